"""Concurrent sales against a file-backed database.

Each worker gets its own connection and session, like two requests being
served at once.
"""

import threading

import pytest
from sqlalchemy.orm import sessionmaker

from rims.core.exceptions import InsufficientStockError
from rims.db.base import Base
from rims.db.session import build_engine
from rims.services.inventory_store import InventoryStore
from rims.services.sale_processor import SaleProcessor


@pytest.fixture
def file_sessions(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def _seed(Session, stock):
    session = Session()
    try:
        store = InventoryStore(session)
        with store.transaction():
            patty = store.add_ingredient(name="Patty", unit="pieces", current_stock=stock, par_level=10, unit_cost=1.2)
            burger = store.add_menu_item(name="Double", base_price=9.5)
            store.add_recipe_item(menu_item_id=burger.id, ingredient_id=patty.id, quantity_required=100, yield_factor=1.0)
        return patty.id, burger.id
    finally:
        session.close()


def _race(Session, menu_item_id, quantity, workers=2):
    barrier = threading.Barrier(workers)
    results = []
    lock = threading.Lock()

    def sell():
        session = Session()
        try:
            processor = SaleProcessor(InventoryStore(session))
            barrier.wait()
            try:
                processor.process_sale(menu_item_id, quantity)
                outcome = "sold"
            except InsufficientStockError:
                outcome = "short"
            except Exception as e:
                outcome = f"error: {e!r}"
        finally:
            session.close()
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=sell) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return results


def test_stock_for_one_sale_admits_exactly_one(file_sessions):
    patty_id, burger_id = _seed(file_sessions, stock=500)

    results = _race(file_sessions, burger_id, quantity=5)

    assert sorted(results) == ["short", "sold"]

    session = file_sessions()
    try:
        store = InventoryStore(session)
        assert store.get_ingredient(patty_id).current_stock == 0
        sales = store.list_sales(menu_item_id=burger_id)
        assert [sale.quantity_sold for sale in sales] == [5]
    finally:
        session.close()


def test_stock_never_goes_negative_under_load(file_sessions):
    patty_id, burger_id = _seed(file_sessions, stock=1000)

    results = _race(file_sessions, burger_id, quantity=3, workers=4)

    # 1000 covers three sales of 300 but not a fourth
    assert results.count("sold") == 3
    assert results.count("short") == 1

    session = file_sessions()
    try:
        store = InventoryStore(session)
        assert store.get_ingredient(patty_id).current_stock == pytest.approx(100)
        assert sum(sale.quantity_sold for sale in store.list_sales(menu_item_id=burger_id)) == 9
    finally:
        session.close()
