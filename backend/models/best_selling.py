# backend/models/best_selling.py
from sqlalchemy import Column, Integer, Date, ForeignKey, DateTime, UniqueConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# One row per product per month it made the top-sellers list
class BestSellingProduct(Base):
    __tablename__ = "best_selling_products"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    # First day of the snapshot month
    month = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product", lazy="joined")

    __table_args__ = (
        UniqueConstraint("product_id", "month", name="uq_best_selling_product_month"),
    )
