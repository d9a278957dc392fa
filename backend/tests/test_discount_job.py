from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError

from models.discount import Discount
from utils.discount_job import SqlDiscountRepository, apply_discounts


class InMemoryRepository:
    """Dict backed repository used to run the job without a database."""

    def __init__(self, products):
        self.products = products
        self.discounts = {}
        self.pages = []
        self.writes = 0
        self.fail_on = None

    def fetch_all_products(self, page_size):
        for start in range(0, len(self.products), page_size):
            page = self.products[start:start + page_size]
            self.pages.append(len(page))
            yield page

    def find_discount_by_product_id(self, product_id):
        return self.discounts.get(product_id)

    def upsert_discount(self, product_id, percentage, final_price, existing=None):
        if product_id == self.fail_on:
            raise SQLAlchemyError("write failed")
        self.writes += 1
        discount = self.discounts.get(product_id)
        if discount is None:
            discount = SimpleNamespace(product_id=product_id)
            self.discounts[product_id] = discount
        discount.discount_percentage = percentage
        discount.final_price = final_price
        return discount


def product(id, price, units_sold, qty):
    return SimpleNamespace(id=id, price=price, units_sold=units_sold, qty=qty)


# ---- engine against the in-memory repository ----

def test_every_product_gets_a_discount():
    repo = InMemoryRepository([
        product(1, Decimal("3000"), 600, 50),
        product(2, Decimal("6000"), 50, 10),
        product(3, Decimal("30"), 700, 600),
    ])

    summary = apply_discounts(repo, chunk_size=100)

    assert summary == {"processed": 3, "written": 3, "skipped": 0}
    assert repo.discounts[1].discount_percentage == 25
    assert repo.discounts[1].final_price == Decimal("2250.00")
    assert repo.discounts[2].discount_percentage == 55
    assert repo.discounts[2].final_price == Decimal("2700.00")
    assert repo.discounts[3].discount_percentage == 20
    assert repo.discounts[3].final_price == Decimal("24.00")


@pytest.mark.parametrize("chunk_size, pages", [(1, [1] * 5), (2, [2, 2, 1]), (5, [5]), (100, [5])])
def test_chunking_visits_each_product_once(chunk_size, pages):
    repo = InMemoryRepository([product(i, Decimal("500"), 200, 15) for i in range(1, 6)])

    summary = apply_discounts(repo, chunk_size=chunk_size)

    assert repo.pages == pages
    assert summary["processed"] == 5
    assert sorted(repo.discounts) == [1, 2, 3, 4, 5]


def test_invalid_chunk_size_is_rejected():
    with pytest.raises(ValueError):
        apply_discounts(InMemoryRepository([]), chunk_size=0)


def test_products_with_bad_data_are_skipped(caplog):
    repo = InMemoryRepository([
        product(1, None, 10, 10),
        product(2, Decimal("500"), -1, 10),
        product(3, Decimal("500"), 200, 15),
    ])

    with caplog.at_level("WARNING"):
        summary = apply_discounts(repo, chunk_size=10)

    assert summary == {"processed": 1, "written": 1, "skipped": 2}
    assert list(repo.discounts) == [3]
    assert "Skipping product 1" in caplog.text
    assert "Skipping product 2" in caplog.text


def test_storage_failure_stops_the_run():
    repo = InMemoryRepository([product(i, Decimal("500"), 200, 15) for i in range(1, 4)])
    repo.fail_on = 2

    with pytest.raises(SQLAlchemyError):
        apply_discounts(repo, chunk_size=10)

    assert list(repo.discounts) == [1]


def test_unchanged_discounts_are_not_rewritten():
    repo = InMemoryRepository([product(1, Decimal("3000"), 600, 50)])
    apply_discounts(repo, chunk_size=10)
    assert repo.writes == 1

    summary = apply_discounts(repo, chunk_size=10)

    assert repo.writes == 1
    assert summary == {"processed": 1, "written": 0, "skipped": 0}


# ---- engine against the SQL repository ----

def test_sql_run_creates_one_discount_per_product(db, make_product):
    p1 = make_product(3000, units_sold=600, qty=50)
    p2 = make_product(10000, units_sold=1000, qty=10000)
    p3 = make_product(500, units_sold=200, qty=15)

    apply_discounts(SqlDiscountRepository(db), chunk_size=2)

    rows = {d.product_id: d for d in db.query(Discount).all()}
    assert len(rows) == 3
    assert (rows[p1.id].discount_percentage, rows[p1.id].final_price) == (25, Decimal("2250.00"))
    assert (rows[p2.id].discount_percentage, rows[p2.id].final_price) == (45, Decimal("5500.00"))
    assert (rows[p3.id].discount_percentage, rows[p3.id].final_price) == (15, Decimal("425.00"))


def test_sql_run_is_idempotent(db, make_product):
    for price, units_sold, qty in [(3000, 600, 50), (30, 700, 600), (1500, 75, 300)]:
        make_product(price, units_sold=units_sold, qty=qty)
    repo = SqlDiscountRepository(db)

    apply_discounts(repo, chunk_size=1)
    first = [(d.id, d.product_id, d.discount_percentage, d.final_price) for d in db.query(Discount).order_by(Discount.id)]

    apply_discounts(repo, chunk_size=1)
    second = [(d.id, d.product_id, d.discount_percentage, d.final_price) for d in db.query(Discount).order_by(Discount.id)]

    assert first == second
    assert len(second) == 3


def test_sql_run_updates_existing_discount_in_place(db, make_product):
    p = make_product(3000, units_sold=600, qty=50)
    repo = SqlDiscountRepository(db)
    apply_discounts(repo, chunk_size=10)
    discount_id = db.query(Discount).one().id

    p.qty = 5
    db.commit()
    apply_discounts(repo, chunk_size=10)

    discount = db.query(Discount).one()
    assert discount.id == discount_id
    assert discount.discount_percentage == 40
    assert discount.final_price == Decimal("1800.00")


def test_sql_find_discount_by_product_id(db, make_product):
    p = make_product(500, units_sold=200, qty=15)
    repo = SqlDiscountRepository(db)

    assert repo.find_discount_by_product_id(p.id) is None
    repo.upsert_discount(p.id, 15, Decimal("425.00"))

    found = repo.find_discount_by_product_id(p.id)
    assert found.discount_percentage == 15
    assert found.final_price == Decimal("425.00")


def test_sql_storage_error_rolls_back_and_propagates(db, make_product, monkeypatch):
    make_product(500, units_sold=200, qty=15)
    repo = SqlDiscountRepository(db)

    def failing_commit():
        raise SQLAlchemyError("database is locked")

    monkeypatch.setattr(db, "commit", failing_commit)

    with pytest.raises(SQLAlchemyError, match="database is locked"):
        apply_discounts(repo, chunk_size=10)

    monkeypatch.undo()
    assert db.query(Discount).count() == 0


def test_sql_fetch_all_products_pages_by_id(db, make_product):
    ids = [make_product(100 + i).id for i in range(7)]

    pages = list(SqlDiscountRepository(db).fetch_all_products(3))

    assert [len(page) for page in pages] == [3, 3, 1]
    assert [row.id for page in pages for row in page] == ids


def test_empty_catalog_is_a_no_op(db):
    summary = apply_discounts(SqlDiscountRepository(db), chunk_size=100)

    assert summary == {"processed": 0, "written": 0, "skipped": 0}
    assert db.query(Discount).count() == 0


def test_sql_run_looks_up_each_discount_once(db, engine, make_product):
    make_product(3000, units_sold=600, qty=50)
    make_product(30, units_sold=700, qty=600)
    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT") and "discounts" in statement:
            statements.append(statement)

    event.listen(engine, "before_cursor_execute", record)
    try:
        apply_discounts(SqlDiscountRepository(db), chunk_size=10)
        assert len(statements) == 2
        assert all("JOIN products" not in s for s in statements)

        statements.clear()
        apply_discounts(SqlDiscountRepository(db), chunk_size=10)
        assert len(statements) == 2
    finally:
        event.remove(engine, "before_cursor_execute", record)

    assert db.query(Discount).count() == 2
