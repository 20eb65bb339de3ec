"""Update + log atomicity and per-row import commits, against SQLite."""

import pytest
from sqlalchemy.exc import IntegrityError

from stocktrail.core.database import transaction
from stocktrail.core.errors import ConflictError
from stocktrail.models.inventory_log import InventoryLog
from stocktrail.models.product import Product
from stocktrail.repositories.inventory_logs import InventoryLogRepository
from stocktrail.repositories.products import ProductRepository
from stocktrail.services.products import ProductService


@pytest.fixture
def real_service(db):
    return ProductService(
        ProductRepository(db),
        InventoryLogRepository(db),
        unit_of_work=lambda: transaction(db),
    )


def payload(name, stock, **overrides):
    data = {
        "name": name,
        "unit": "kg",
        "category": "food",
        "brand": "abc",
        "status": "active",
        "stock": stock,
    }
    data.update(overrides)
    return data


def test_update_and_log_are_committed_together(db, real_service, make_product):
    p = make_product(name="Rice", stock=10)

    updated = real_service.update_product(p.id, payload("Rice", 20), "admin@example.com")

    db.expire_all()
    assert updated.stock == 20
    logs = db.query(InventoryLog).all()
    assert [(log.product_id, log.old_stock, log.new_stock, log.changed_by) for log in logs] == [
        (p.id, 10, 20, "admin@example.com")
    ]


def test_log_is_rolled_back_when_update_fails(db, real_service, make_product, monkeypatch):
    p = make_product(name="Rice", stock=10)

    def broken_update(product_id, data):
        raise IntegrityError("UPDATE products", {}, Exception("disk full"))

    monkeypatch.setattr(real_service.products, "update", broken_update)

    with pytest.raises(IntegrityError):
        real_service.update_product(p.id, payload("Rice", 20), "admin@example.com")

    db.expire_all()
    assert db.query(InventoryLog).count() == 0
    assert db.get(Product, p.id).stock == 10


def test_conflict_leaves_nothing_behind(db, real_service, make_product):
    p = make_product(name="Rice", stock=10)
    make_product(name="Oil", stock=1)

    with pytest.raises(ConflictError, match="Product name 'oil' already exists."):
        real_service.update_product(p.id, payload("oil", 99), "admin@example.com")

    db.expire_all()
    assert db.query(InventoryLog).count() == 0
    assert db.get(Product, p.id).name == "Rice"


def test_update_to_same_stock_writes_no_log(db, real_service, make_product):
    p = make_product(name="Rice", stock=10)

    real_service.update_product(p.id, payload("Rice", 10, brand="other"), "admin@example.com")

    assert db.query(InventoryLog).count() == 0
    assert db.get(Product, p.id).brand == "other"


def test_import_keeps_rows_committed_before_a_failing_row(db, real_service, monkeypatch):
    repo = real_service.products
    original_create = repo.create

    def create(data):
        if data["name"] == "Bad":
            # flush a row the store rejects, then let the error escape
            original_create({**data, "stock": -1})
        return original_create(data)

    monkeypatch.setattr(repo, "create", create)

    result = real_service.import_products(
        [payload("Rice", 1), payload("Bad", 2), payload("Oil", 3), payload("rice", 4)]
    )

    assert result == {
        "added": 2,
        "skipped": 2,
        "duplicates": [{"name": "rice", "existing_id": repo.find_by_name("Rice").id}],
    }
    db.expire_all()
    assert sorted(p.name for p in db.query(Product).all()) == ["Oil", "Rice"]


def test_delete_removes_history(db, real_service, make_product):
    p = make_product(name="Rice", stock=1)
    real_service.update_product(p.id, payload("Rice", 5), "admin@example.com")

    real_service.delete_product(p.id)

    db.expire_all()
    assert db.query(Product).count() == 0
    assert db.query(InventoryLog).count() == 0
