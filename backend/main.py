# backend/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from database import init_db
from dotenv import load_dotenv
import os

load_dotenv()

from routes.discounts import router as discounts_router
from routes.best_sellers import router as best_sellers_router

app = FastAPI(title="Storefront Pricing API", version="1.0.0")

# CORS Configuration
frontend_url = os.getenv("FRONTEND_URL")
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173"
]

if frontend_url:
    origins.append(frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(discounts_router)
app.include_router(best_sellers_router)


@app.on_event("startup")
def on_startup():
    init_db()


@app.get("/")
def read_root():
    return {"message": "Storefront Pricing API is running"}
