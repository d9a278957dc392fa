# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Catalog fields exposed next to discounts and best sellers
class ProductOut(ORMBase):
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: float = Field(ge=0)
    units_sold: int = Field(ge=0)
    qty: int = Field(ge=0)
    image_url: Optional[str] = None
    rating: Optional[float] = None
    created_at: Optional[datetime] = None
