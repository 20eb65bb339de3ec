"""
Pytest fixtures for the StockTrail test suite.

Provides:
- an in-memory SQLite engine with fresh tables per test
- sessions bound to it
- a FastAPI TestClient whose get_db dependency uses that engine
- seeded manager/viewer users and their bearer headers
"""

from contextlib import nullcontext
from datetime import datetime
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stocktrail.api.deps import get_db
from stocktrail.core.database import Base
from stocktrail.core.security import create_access_token, hash_password
from stocktrail.main import app
from stocktrail.models.inventory_log import InventoryLog
from stocktrail.models.product import Product
from stocktrail.models.user import User, ROLE_MANAGER, ROLE_VIEWER
from stocktrail.repositories.inventory_logs import InventoryLogRepository
from stocktrail.repositories.products import ProductRepository
from stocktrail.services.products import ProductService

MANAGER_USERNAME = "admin@example.com"
VIEWER_USERNAME = "viewer@example.com"
PASSWORD = "s3cret-pass"


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_product(db):
    """Insert and commit a product; returns the refreshed row."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "name": f"Product {counter['n']}",
            "unit": "pcs",
            "category": "general",
            "brand": "acme",
            "stock": 0,
            "status": "active",
        }
        fields.update(overrides)
        p = Product(**fields)
        db.add(p)
        db.commit()
        db.refresh(p)
        return p

    return _make


@pytest.fixture
def make_log(db):
    def _make(product, old_stock, new_stock, changed_by="system", timestamp=None):
        log = InventoryLog(
            product_id=product.id,
            old_stock=old_stock,
            new_stock=new_stock,
            changed_by=changed_by,
            timestamp=timestamp or datetime(2025, 1, 1),
        )
        db.add(log)
        db.commit()
        return log

    return _make


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def product_repo():
    return Mock(spec=ProductRepository)


@pytest.fixture
def log_repo():
    return Mock(spec=InventoryLogRepository)


@pytest.fixture
def service(product_repo, log_repo):
    """ProductService over mocked repositories; the unit of work is a no-op."""
    return ProductService(product_repo, log_repo, unit_of_work=nullcontext)


# =============================================================================
# API
# =============================================================================


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def users(db):
    manager = User(
        username=MANAGER_USERNAME,
        name="Manager",
        role=ROLE_MANAGER,
        password_hash=hash_password(PASSWORD),
    )
    viewer = User(
        username=VIEWER_USERNAME,
        name="Viewer",
        role=ROLE_VIEWER,
        password_hash=hash_password(PASSWORD),
    )
    db.add_all([manager, viewer])
    db.commit()
    return {"manager": manager, "viewer": viewer}


def _bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest.fixture
def manager_headers(users):
    return _bearer(users["manager"])


@pytest.fixture
def viewer_headers(users):
    return _bearer(users["viewer"])
