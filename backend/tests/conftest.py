"""Pytest configuration and fixtures."""

import os

# Settings are read at import time; keep the application engine in memory
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from typing import Any, Dict, Generator, List, Tuple

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from rims.api.deps import get_notifier
from rims.db.base import Base
from rims.db.session import build_engine, get_db
from rims.main import app
from rims.services.inventory_store import InventoryStore

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite://"


class RecordingNotifier:
    """Notifier that keeps every published event for assertions."""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def publish(self, event: str, data: Dict[str, Any]) -> None:
        self.events.append((event, data))


class FailingNotifier:
    """Notifier whose channel is down."""

    def publish(self, event: str, data: Dict[str, Any]) -> None:
        raise ConnectionError("notification channel unavailable")


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session: Session) -> InventoryStore:
    return InventoryStore(db_session)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(scope="function")
def client(db_session: Session, notifier: RecordingNotifier) -> Generator[TestClient, None, None]:
    """Create a test client with database and notifier overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    # Disable the rate limiter during tests to avoid flaky failures
    from rims.core.rate_limit import limiter
    limiter.enabled = False
    # Don't raise server exceptions so we can test error status codes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    limiter.enabled = True
    app.dependency_overrides.clear()


def _create_catalog(store: InventoryStore, ingredients, menu_item, recipe):
    """Insert ingredients, one menu item and its recipe; returns their ids.

    ``recipe`` is a list of (ingredient name, quantity required, yield factor).
    """
    with store.transaction():
        created = {data["name"]: store.add_ingredient(**data) for data in ingredients}
        item = store.add_menu_item(**menu_item)
        for name, quantity_required, yield_factor in recipe:
            store.add_recipe_item(
                menu_item_id=item.id,
                ingredient_id=created[name].id,
                quantity_required=quantity_required,
                yield_factor=yield_factor,
            )
    ids = {name: ingredient.id for name, ingredient in created.items()}
    ids["menu_item"] = item.id
    return ids


@pytest.fixture
def burger_catalog(store: InventoryStore) -> Dict[str, int]:
    """Beef, Bun and Lettuce with a Burger that uses all three."""
    return _create_catalog(
        store,
        ingredients=[
            {"name": "Beef", "unit": "grams", "current_stock": 5000, "par_level": 1000, "unit_cost": 0.08},
            {"name": "Bun", "unit": "pieces", "current_stock": 200, "par_level": 50, "unit_cost": 0.50},
            {"name": "Lettuce", "unit": "grams", "current_stock": 1500, "par_level": 300, "unit_cost": 0.02},
        ],
        menu_item={"name": "Burger", "base_price": 12.99},
        recipe=[("Beef", 200, 1.1), ("Bun", 1, 1.0), ("Lettuce", 50, 1.2)],
    )


@pytest.fixture
def make_catalog(store: InventoryStore):
    """Factory for catalogs other than the burger."""
    def _make(ingredients, menu_item, recipe):
        return _create_catalog(store, ingredients, menu_item, recipe)
    return _make


@pytest.fixture
def failing_notifier() -> FailingNotifier:
    return FailingNotifier()
