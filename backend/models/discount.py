# backend/models/discount.py
from sqlalchemy import Column, Integer, Numeric, ForeignKey, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Current markdown for exactly one product, rewritten by every discount run.
class Discount(Base):
    __tablename__ = "discounts"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, unique=True, index=True)

    discount_percentage = Column(
        Integer,
        CheckConstraint("discount_percentage >= 0 AND discount_percentage <= 70"),
        nullable=False,
    )
    final_price = Column(Numeric(10, 2), CheckConstraint("final_price >= 0"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    product = relationship("Product", back_populates="discount", lazy="joined")
