# backend/manage.py
"""Administrative commands.

Commands:
  python manage.py discount:apply                    Recompute every product discount
  python manage.py best-sellers:snapshot [--top N]   Save this month's top sellers
  python manage.py products:import <file.csv>        Bulk insert products from CSV
"""
import argparse
import logging
import sys

from config import settings
from database import SessionLocal, init_db
from utils.audit import write_log
from utils.best_sellers import month_start, snapshot_best_sellers
from utils.discount_job import SqlDiscountRepository, apply_discounts
from utils.import_products import import_products_csv

logger = logging.getLogger(__name__)


def cmd_apply_discounts(args: argparse.Namespace) -> int:
    db = SessionLocal()
    try:
        summary = apply_discounts(SqlDiscountRepository(db), chunk_size=settings.DISCOUNT_CHUNK_SIZE)
        write_log(db, action="DISCOUNT_APPLY", resource="discounts", meta=summary)
    except Exception as e:
        db.rollback()
        write_log(db, action="DISCOUNT_APPLY", resource="discounts", status="FAIL", meta={"error": str(e)})
        raise
    finally:
        db.close()

    print("Discounts applied successfully.")
    return 0


def cmd_snapshot_best_sellers(args: argparse.Namespace) -> int:
    top = args.top if args.top is not None else settings.BEST_SELLERS_TOP
    month = month_start()
    db = SessionLocal()
    try:
        entries = snapshot_best_sellers(db, top=top, month=month)
        write_log(
            db, action="BEST_SELLERS_SNAPSHOT", resource="best_selling_products",
            meta={"month": month.isoformat(), "top": top, "saved": len(entries)},
        )
    except Exception as e:
        db.rollback()
        write_log(
            db, action="BEST_SELLERS_SNAPSHOT", resource="best_selling_products", status="FAIL",
            meta={"month": month.isoformat(), "top": top, "error": str(e)},
        )
        raise
    finally:
        db.close()

    print(f"Top {top} best-selling products snapshot saved for {month.isoformat()}.")
    return 0


def cmd_import_products(args: argparse.Namespace) -> int:
    db = SessionLocal()
    try:
        count = import_products_csv(db, args.file)
        write_log(db, action="PRODUCTS_IMPORT", resource="products", meta={"file": str(args.file), "imported": count})
    except Exception as e:
        db.rollback()
        write_log(db, action="PRODUCTS_IMPORT", resource="products", status="FAIL", meta={"file": str(args.file), "error": str(e)})
        raise
    finally:
        db.close()

    print(f"Imported {count} products.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="manage.py", description="Storefront pricing administration")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("discount:apply", help="Apply discounts to products based on predefined logic")
    p.set_defaults(func=cmd_apply_discounts)

    p = sub.add_parser("best-sellers:snapshot", help="Take a snapshot of top-selling products for the current month")
    p.add_argument("--top", type=int, default=None, help="Number of products to keep (default: BEST_SELLERS_TOP)")
    p.set_defaults(func=cmd_snapshot_best_sellers)

    p = sub.add_parser("products:import", help="Import products from a CSV file")
    p.add_argument("file", help="CSV with name, price, qty, units_sold columns")
    p.set_defaults(func=cmd_import_products)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    init_db()
    try:
        return args.func(args)
    except Exception:
        logger.exception("Command %s failed", args.command)
        return 1


if __name__ == "__main__":
    sys.exit(main())
