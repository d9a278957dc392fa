# backend/utils/import_products.py
import logging
from decimal import Decimal

import pandas as pd
from sqlalchemy.orm import Session

from models.product import Product

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["name", "price", "qty", "units_sold"]
NUMERIC_COLUMNS = ["price", "qty", "units_sold"]
COUNT_COLUMNS = ["qty", "units_sold"]
OPTIONAL_COLUMNS = ["description", "category", "image_url", "rating"]


def _value(row, column):
    if column not in row or pd.isna(row[column]):
        return None
    return row[column]


def import_products_csv(db: Session, path) -> int:
    """Inserts catalog rows from a CSV file; names already in the catalog are skipped."""
    df = pd.read_csv(path)

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")

    df = df.dropna(subset=REQUIRED_COLUMNS).copy()
    for column in NUMERIC_COLUMNS:
        df[column] = pd.to_numeric(df[column], errors="coerce")
    df["name"] = df["name"].astype(str).str.strip()

    existing = {name for (name,) in db.query(Product.name).all()}

    to_add = []
    for _, row in df.iterrows():
        name = row["name"]
        if not name or name in existing:
            continue
        if any(pd.isna(row[c]) for c in NUMERIC_COLUMNS):
            logger.warning("Skipping product '%s': price, qty or units_sold is not a number", name)
            continue
        if row["price"] < 0 or row["qty"] < 0 or row["units_sold"] < 0:
            logger.warning("Skipping product '%s': negative price, qty or units_sold", name)
            continue
        if not all(float(row[c]).is_integer() for c in COUNT_COLUMNS):
            logger.warning("Skipping product '%s': qty and units_sold must be whole numbers", name)
            continue
        existing.add(name)

        product = Product(
            name=name,
            price=Decimal(str(row["price"])).quantize(Decimal("0.01")),
            qty=int(row["qty"]),
            units_sold=int(row["units_sold"]),
        )
        for column in OPTIONAL_COLUMNS:
            value = _value(row, column)
            if value is not None:
                setattr(product, column, float(value) if column == "rating" else str(value))
        to_add.append(product)

    db.add_all(to_add)
    db.commit()
    logger.info("Imported %s products from %s", len(to_add), path)
    return len(to_add)
