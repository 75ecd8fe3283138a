"""Seed the inventory database with a small burger catalog.

Wipes existing rows, then creates three ingredients, one menu item with
its recipe, and a sample sale of 5 burgers processed through the normal
deduction path so stock and the sales ledger agree.

Usage:
    cd backend
    python seed_data.py
"""

import sys
import os

# Ensure the backend package is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy import delete

from rims.db.base import Base
from rims.db.session import SessionLocal, engine
from rims.models import Ingredient, MenuItem, RecipeItem, Sale, WasteLog
from rims.services.deduction import actual_deduction
from rims.services.inventory_store import InventoryStore
from rims.services.sale_processor import SaleProcessor

INGREDIENTS = [
    {"name": "Beef", "unit": "grams", "current_stock": 5000, "par_level": 1000, "unit_cost": 0.08},
    {"name": "Bun", "unit": "pieces", "current_stock": 200, "par_level": 50, "unit_cost": 0.50},
    {"name": "Lettuce", "unit": "grams", "current_stock": 1500, "par_level": 300, "unit_cost": 0.02},
]

# (ingredient name, quantity required per burger, yield factor)
BURGER_RECIPE = [
    ("Beef", 200, 1.1),     # 10% prep waste
    ("Bun", 1, 1.0),
    ("Lettuce", 50, 1.2),   # 20% prep waste
]


def seed():
    """Reset the catalog and insert the sample data."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        store = InventoryStore(db)
        with store.transaction():
            for model in (Sale, WasteLog, RecipeItem, MenuItem, Ingredient):
                db.execute(delete(model))

            ingredients = {data["name"]: store.add_ingredient(**data) for data in INGREDIENTS}
            burger = store.add_menu_item(name="Burger", base_price=12.99)
            for name, quantity_required, yield_factor in BURGER_RECIPE:
                store.add_recipe_item(
                    menu_item_id=burger.id,
                    ingredient_id=ingredients[name].id,
                    quantity_required=quantity_required,
                    yield_factor=yield_factor,
                )
        print(f"Created {len(ingredients)} ingredients and menu item '{burger.name}'")

        outcome = SaleProcessor(store).process_sale(burger.id, 5)
        print(outcome.message)

        print("\nDeduction per burger sold:")
        for name, quantity_required, yield_factor in BURGER_RECIPE:
            per_unit = actual_deduction(quantity_required, yield_factor)
            print(f"  {name}: {quantity_required} / {yield_factor} = {per_unit:.4f}")

        print("\nStock after sample sale:")
        for ingredient in store.list_ingredients():
            print(f"  {ingredient.name}: {ingredient.current_stock:.4f} {ingredient.unit}")
    except Exception as e:
        print(f"Error seeding data: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    print("=" * 60)
    print("Restaurant Inventory - Seed Data")
    print("=" * 60)
    seed()
