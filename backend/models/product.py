# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, Numeric, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Model Product
# A sellable catalog item. The discount engine only reads price,
# units_sold and qty; everything else is catalog metadata.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(String)
    category = Column(String, index=True)

    # Pricing and demand figures, guarded by check constraints.
    price = Column(Numeric(10, 2), CheckConstraint("price >= 0"), nullable=False)
    units_sold = Column(Integer, CheckConstraint("units_sold >= 0"), nullable=False, default=0)

    # Inventory depth.
    qty = Column(Integer, CheckConstraint("qty >= 0"), nullable=False, default=0)

    image_url = Column(String, nullable=True)
    rating = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    discount = relationship("Discount", back_populates="product", uselist=False)

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}')>"
