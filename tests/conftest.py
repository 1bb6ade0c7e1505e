"""Pytest configuration and fixtures."""
from datetime import datetime
from typing import List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.database import bootstrap_schema, create_session_factory
from app.main import create_app
from app.models.product import Product
from app.services.product_store import ProductStore, SQLProductStore, StorageError

DB_ENV = {
    "DB_HOST": "db.internal",
    "DB_PORT": "5432",
    "DB_USER": "shop",
    "DB_PASSWORD": "s3cret",
    "DB_NAME": "catalog",
    "DB_SSL_MODE": "disable",
}


class InMemoryProductStore(ProductStore):
    """Fake store keeping products in a list."""

    def __init__(self):
        self.products: List[Product] = []

    def create_product(self, product: Product) -> Product:
        product.id = len(self.products) + 1
        product.created = datetime.now()
        self.products.append(product)
        return product

    def get_products(self) -> List[Product]:
        return list(self.products)


class FailingProductStore(ProductStore):
    """Fake store whose every operation fails."""

    def create_product(self, product: Product) -> Product:
        raise StorageError("error inserting product: connection refused")

    def get_products(self) -> List[Product]:
        raise StorageError("error fetching products: connection refused")


@pytest.fixture
def db_env(monkeypatch, tmp_path):
    """Environment with every database variable set and an empty .env file."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("# values come from the process environment\n")
    for key in ("SERVER_PORT", "LOG_LEVEL", "LOG_FILE"):
        monkeypatch.delenv(key, raising=False)
    for key, value in DB_ENV.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def bare_env(monkeypatch, tmp_path):
    """Environment with no database variables and no .env file."""
    monkeypatch.chdir(tmp_path)
    for key in DB_ENV:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def test_engine():
    """Create a test database for testing."""
    # Use in-memory SQLite for tests
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(test_engine):
    """SQLProductStore over a bootstrapped in-memory database."""
    bootstrap_schema(test_engine)
    return SQLProductStore(create_session_factory(test_engine))


@pytest.fixture
def memory_store():
    return InMemoryProductStore()


@pytest.fixture
def client(sql_store):
    """Client for an app backed by the SQLite store."""
    return TestClient(create_app(sql_store))


@pytest.fixture
def memory_client(memory_store):
    return TestClient(create_app(memory_store))


@pytest.fixture
def failing_client():
    return TestClient(create_app(FailingProductStore()))
