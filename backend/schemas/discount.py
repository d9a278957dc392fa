# backend/schemas/discount.py
from pydantic import Field
from typing import List, Optional
from datetime import datetime

from schemas.product import ORMBase, ProductOut


class DiscountOut(ORMBase):
    id: int
    product_id: int
    discount_percentage: int = Field(ge=0, le=70)
    final_price: float = Field(ge=0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    product: Optional[ProductOut] = None


class DiscountList(ORMBase):
    items: List[DiscountOut]
    total: int
