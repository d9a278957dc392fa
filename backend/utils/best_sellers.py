# backend/utils/best_sellers.py
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from models.best_selling import BestSellingProduct
from models.product import Product

logger = logging.getLogger(__name__)


def month_start(day: Optional[date] = None) -> date:
    """First day of the month containing `day` (today by default)."""
    day = day or date.today()
    return day.replace(day=1)


def snapshot_best_sellers(db: Session, top: int = 10, month: Optional[date] = None) -> List[BestSellingProduct]:
    """Records the `top` products by units sold for the given month."""
    if top < 1:
        raise ValueError("top must be >= 1")

    month = month_start(month)

    top_products = (
        db.query(Product)
        .order_by(Product.units_sold.desc(), Product.id.asc())
        .limit(top)
        .all()
    )

    entries = []
    created = 0
    for product in top_products:
        entry = db.query(BestSellingProduct).filter(
            BestSellingProduct.product_id == product.id,
            BestSellingProduct.month == month,
        ).first()
        if not entry:
            entry = BestSellingProduct(product_id=product.id, month=month)
            db.add(entry)
            created += 1
        entries.append(entry)

    db.commit()
    logger.info("Best sellers snapshot for %s: %s entries, %s new", month, len(entries), created)
    return entries


def get_best_sellers_by_month(db: Session, month: Optional[date] = None) -> List[BestSellingProduct]:
    month = month_start(month)
    return (
        db.query(BestSellingProduct)
        .filter(BestSellingProduct.month == month)
        .order_by(BestSellingProduct.id.asc())
        .all()
    )
