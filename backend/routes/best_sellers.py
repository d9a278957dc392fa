# backend/routes/best_sellers.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database import get_db
from models.best_selling import BestSellingProduct
from utils.best_sellers import get_best_sellers_by_month
import schemas.best_selling as best_selling_schemas

router = APIRouter(prefix="/best-sellers", tags=["Best Sellers"])


@router.get("", response_model=best_selling_schemas.BestSellingList)
def list_best_sellers(db: Session = Depends(get_db)):
    items = (
        db.query(BestSellingProduct)
        .order_by(BestSellingProduct.month.desc(), BestSellingProduct.id.asc())
        .all()
    )
    return {"items": items, "total": len(items)}


@router.get("/month", response_model=best_selling_schemas.BestSellingList)
def list_best_sellers_by_month(
    month: Optional[date] = Query(None, description="Any day of the month (YYYY-MM-DD), defaults to the current month"),
    db: Session = Depends(get_db),
):
    items = get_best_sellers_by_month(db, month)
    return {"items": items, "total": len(items)}


@router.get("/{entry_id}", response_model=best_selling_schemas.BestSellingOut)
def get_best_seller(entry_id: int, db: Session = Depends(get_db)):
    entry = db.query(BestSellingProduct).filter(BestSellingProduct.id == entry_id).first()
    if not entry:
        raise HTTPException(status_code=404, detail="Best selling product not found")
    return entry
