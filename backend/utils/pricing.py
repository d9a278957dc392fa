# backend/utils/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]

MAX_DISCOUNT = 70
MIN_DISCOUNT = 0

# Price tier boundaries (currency units)
HIGH_VALUE_PRICE = 1000
LOW_VALUE_PRICE = 100

# Demand boundaries (units sold)
HIGH_DEMAND_UNITS = 500
LOW_DEMAND_UNITS = 100
VERY_LOW_DEMAND_UNITS = 50

# Inventory boundaries
OVERSTOCK_QTY = 500
UNDERSTOCK_QTY = 20

CENT = Decimal("0.01")


class InvalidProductData(ValueError):
    """Raised when a product carries a missing or negative pricing field."""


def _validate(price, units_sold, qty) -> None:
    for field, value in (("price", price), ("units_sold", units_sold), ("qty", qty)):
        if value is None:
            raise InvalidProductData(f"{field} is missing")
        if value < 0:
            raise InvalidProductData(f"{field} must be >= 0, got {value}")


def compute_discount_percentage(price: Number, units_sold: int, qty: int) -> int:
    """
    Returns the markdown percentage for a product.

    Rules run top to bottom and a later rule overwrites an earlier one;
    the inventory adjustment is always added on top before clamping to [0, 70].
    """
    _validate(price, units_sold, qty)

    discount = 0

    # Expensive items
    if price >= HIGH_VALUE_PRICE:
        if units_sold >= HIGH_DEMAND_UNITS:
            # High demand
            if price <= 2000:
                discount = 20
            elif price <= 5000:
                discount = 25
            else:
                discount = 35
        elif units_sold < LOW_DEMAND_UNITS:
            # Low demand
            if price <= 2000 and units_sold < VERY_LOW_DEMAND_UNITS:
                discount = 25
            elif price <= 5000 and units_sold < VERY_LOW_DEMAND_UNITS:
                discount = 30
            elif price > 5000 and units_sold < LOW_DEMAND_UNITS:
                discount = 40

    # Cheap items that sell well
    if price < LOW_VALUE_PRICE and units_sold >= HIGH_DEMAND_UNITS:
        if price >= 50:
            discount = 5
        elif price >= 20:
            discount = 10
        else:
            discount = 15

    # Inventory adjustment
    if qty > OVERSTOCK_QTY:
        discount += 10
    elif qty < UNDERSTOCK_QTY:
        discount += 15

    return max(MIN_DISCOUNT, min(discount, MAX_DISCOUNT))


def compute_final_price(price: Number, percentage: Number) -> Decimal:
    """Price after the markdown, rounded half-up to cents."""
    if price is None or price < 0:
        raise InvalidProductData(f"price must be >= 0, got {price}")

    price = Decimal(str(price))
    percentage = Decimal(str(percentage))
    final_price = price - (percentage / Decimal(100)) * price
    return final_price.quantize(CENT, rounding=ROUND_HALF_UP)
