# backend/utils/discount_job.py
import logging
from decimal import Decimal
from typing import Iterator, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, lazyload

from config import settings
from models.discount import Discount
from models.product import Product
from utils.pricing import InvalidProductData, compute_discount_percentage, compute_final_price

logger = logging.getLogger(__name__)


class DiscountRepository(Protocol):
    """Storage operations the discount run depends on."""

    def fetch_all_products(self, page_size: int) -> Iterator[List]:
        ...

    def find_discount_by_product_id(self, product_id: int) -> Optional[Discount]:
        ...

    def upsert_discount(
        self, product_id: int, percentage: int, final_price: Decimal, existing: Optional[Discount] = None
    ) -> Discount:
        ...


class SqlDiscountRepository:
    """DiscountRepository backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_all_products(self, page_size: int) -> Iterator[List]:
        # Keyset pagination on id; rows are plain tuples so per-product commits
        # do not expire them.
        last_id = 0
        while True:
            chunk = (
                self.db.query(Product.id, Product.price, Product.units_sold, Product.qty)
                .filter(Product.id > last_id)
                .order_by(Product.id.asc())
                .limit(page_size)
                .all()
            )
            if not chunk:
                return
            yield chunk
            last_id = chunk[-1].id

    def find_discount_by_product_id(self, product_id: int) -> Optional[Discount]:
        return (
            self.db.query(Discount)
            .options(lazyload(Discount.product))
            .filter(Discount.product_id == product_id)
            .first()
        )

    def upsert_discount(
        self, product_id: int, percentage: int, final_price: Decimal, existing: Optional[Discount] = None
    ) -> Discount:
        # existing is the row returned by find_discount_by_product_id; None creates a new row
        discount = existing
        try:
            if discount:
                discount.discount_percentage = percentage
                discount.final_price = final_price
            else:
                discount = Discount(
                    product_id=product_id,
                    discount_percentage=percentage,
                    final_price=final_price,
                )
                self.db.add(discount)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return discount


def apply_discounts(repository: DiscountRepository, chunk_size: Optional[int] = None) -> dict:
    """
    Recomputes the discount of every product and stores it.

    Products with missing or negative pricing data are logged and skipped.
    Storage errors stop the run and are re-raised; the run can be repeated
    from the start because unchanged products produce identical rows.
    """
    if chunk_size is None:
        chunk_size = settings.DISCOUNT_CHUNK_SIZE
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")

    processed = 0
    written = 0
    skipped = 0

    for chunk in repository.fetch_all_products(chunk_size):
        for product in chunk:
            try:
                percentage = compute_discount_percentage(product.price, product.units_sold, product.qty)
                final_price = compute_final_price(product.price, percentage)
            except InvalidProductData as e:
                logger.warning("Skipping product %s: %s", product.id, e)
                skipped += 1
                continue

            processed += 1

            existing = repository.find_discount_by_product_id(product.id)
            if (
                existing is not None
                and existing.discount_percentage == percentage
                and Decimal(str(existing.final_price)) == final_price
            ):
                continue

            repository.upsert_discount(product.id, percentage, final_price, existing=existing)
            written += 1

        logger.debug("Discount chunk done: processed=%s skipped=%s", processed, skipped)

    logger.info("Discount run finished: processed=%s written=%s skipped=%s", processed, written, skipped)
    return {"processed": processed, "written": written, "skipped": skipped}
