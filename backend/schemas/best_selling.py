# backend/schemas/best_selling.py
from typing import List, Optional
from datetime import date, datetime

from schemas.product import ORMBase, ProductOut


class BestSellingOut(ORMBase):
    id: int
    product_id: int
    month: date
    created_at: Optional[datetime] = None
    product: Optional[ProductOut] = None


class BestSellingList(ORMBase):
    items: List[BestSellingOut]
    total: int
