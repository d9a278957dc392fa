# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    # Batch size used when walking the product catalog
    DISCOUNT_CHUNK_SIZE: int = 100

    # Default number of products kept in the monthly best-sellers snapshot
    BEST_SELLERS_TOP: int = 10

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
