# backend/routes/discounts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.discount import Discount
import schemas.discount as discount_schemas

router = APIRouter(prefix="/discounts", tags=["Discounts"])


# =========================
# DISCOUNTED PRODUCTS
# =========================
@router.get("", response_model=discount_schemas.DiscountList)
def list_discounts(db: Session = Depends(get_db)):
    """Every stored discount together with its product."""
    items = db.query(Discount).order_by(Discount.product_id.asc()).all()
    return {"items": items, "total": len(items)}


# =========================
# SINGLE DISCOUNT
# =========================
@router.get("/{discount_id}", response_model=discount_schemas.DiscountOut)
def get_discount(discount_id: int, db: Session = Depends(get_db)):
    discount = db.query(Discount).filter(Discount.id == discount_id).first()
    if not discount:
        raise HTTPException(status_code=404, detail="Discount not found")
    return discount
