"""Inventory Store - explicit repository over the SQLAlchemy session.

Processors never touch the session directly: they go through this handle,
which owns query shapes, the transactional boundary and the translation of
driver errors into the domain error taxonomy. The caller owns the session
lifecycle (open/close), typically via the ``get_db`` dependency.
"""

import logging
import re
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence

from sqlalchemy import case, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session, selectinload

from rims.core.exceptions import ConstraintViolationError, NotFoundError, StoreUnavailableError
from rims.models.ingredient import Ingredient
from rims.models.menu import MenuItem, RecipeItem
from rims.models.sale import Sale
from rims.models.waste import WasteLog

logger = logging.getLogger(__name__)

# Constraint names as reported by SQLite ("UNIQUE constraint failed: ingredients.name")
# and PostgreSQL ('violates unique constraint "uq_..."')
_CONSTRAINT_PATTERNS = (
    re.compile(r'constraint "([^"]+)"'),
    re.compile(r"(?:UNIQUE|CHECK|NOT NULL) constraint failed: (.+)$", re.MULTILINE),
    re.compile(r"(FOREIGN KEY) constraint failed"),
)


def _constraint_name(exc: IntegrityError) -> Optional[str]:
    text = str(exc.orig)
    for pattern in _CONSTRAINT_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


class InventoryStore:
    """Typed query and transactional-update operations for the inventory core."""

    def __init__(self, db: Session):
        self.db = db

    # ===== TRANSACTIONS & ERROR TRANSLATION =====

    @contextmanager
    def transaction(self) -> Iterator["InventoryStore"]:
        """Commit everything done inside the block, or roll all of it back."""
        try:
            yield self
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            constraint = _constraint_name(e)
            logger.info(f"Write rejected by constraint {constraint}: {e.orig}")
            raise ConstraintViolationError(
                f"Constraint violation: {constraint or 'integrity error'}",
                constraint=constraint,
            ) from e
        except DBAPIError as e:
            self.db.rollback()
            logger.error(f"Store failure during transaction: {e}", exc_info=True)
            raise StoreUnavailableError(f"Inventory store unavailable: {e.orig}") from e
        except Exception:
            self.db.rollback()
            raise

    @contextmanager
    def _reading(self) -> Iterator[None]:
        try:
            yield
        except DBAPIError as e:
            self.db.rollback()
            logger.error(f"Store failure during read: {e}", exc_info=True)
            raise StoreUnavailableError(f"Inventory store unavailable: {e.orig}") from e

    def rollback(self) -> None:
        self.db.rollback()

    # ===== INGREDIENTS =====

    def list_ingredients(self) -> List[Ingredient]:
        with self._reading():
            return list(self.db.scalars(select(Ingredient).order_by(Ingredient.name)))

    def get_ingredient(self, ingredient_id: int) -> Ingredient:
        with self._reading():
            ingredient = self.db.get(Ingredient, ingredient_id)
        if ingredient is None:
            raise NotFoundError("Ingredient", ingredient_id)
        return ingredient

    def list_depleted_ingredients(self) -> List[Ingredient]:
        """Ingredients with stock at or below zero."""
        with self._reading():
            return list(self.db.scalars(
                select(Ingredient).where(Ingredient.current_stock <= 0).order_by(Ingredient.name)
            ))

    def add_ingredient(self, **fields: Any) -> Ingredient:
        ingredient = Ingredient(**fields)
        self.db.add(ingredient)
        self.db.flush()
        return ingredient

    def update_ingredient(self, ingredient_id: int, changes: Dict[str, Any]) -> Ingredient:
        ingredient = self.get_ingredient(ingredient_id)
        for key, value in changes.items():
            setattr(ingredient, key, value)
        self.db.flush()
        return ingredient

    def delete_ingredient(self, ingredient_id: int) -> None:
        """Delete an ingredient; its recipe items and waste logs go with it."""
        self.db.delete(self.get_ingredient(ingredient_id))
        self.db.flush()

    def lock_ingredients(self, ingredient_ids: Sequence[int]) -> Dict[int, Ingredient]:
        """Load fresh ingredient rows, row-locked where the backend supports it.

        Rows are locked in id order so concurrent sales sharing ingredients
        cannot deadlock. SQLite ignores FOR UPDATE; there the conditional
        decrement in ``deduct_stock_if_available`` is what keeps stock safe.
        """
        if not ingredient_ids:
            return {}
        stmt = (
            select(Ingredient)
            .where(Ingredient.id.in_(sorted(set(ingredient_ids))))
            .order_by(Ingredient.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        with self._reading():
            return {ingredient.id: ingredient for ingredient in self.db.scalars(stmt)}

    def deduct_stock_if_available(self, ingredient_id: int, quantity: float) -> bool:
        """Atomically decrement stock only if it covers ``quantity``.

        Returns False when no row was updated, i.e. another transaction got
        there first and the remaining stock is no longer sufficient.
        """
        stmt = (
            update(Ingredient)
            .where(Ingredient.id == ingredient_id, Ingredient.current_stock >= quantity)
            .values(current_stock=Ingredient.current_stock - quantity)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def adjust_stock(self, ingredient_id: int, delta: float, floor: Optional[float] = None) -> None:
        """Atomically add ``delta`` (negative to remove) to an ingredient's stock."""
        new_value = Ingredient.current_stock + delta
        if floor is not None:
            new_value = case((new_value < floor, floor), else_=new_value)
        stmt = (
            update(Ingredient)
            .where(Ingredient.id == ingredient_id)
            .values(current_stock=new_value)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        if result.rowcount != 1:
            raise NotFoundError("Ingredient", ingredient_id)

    # ===== MENU ITEMS & RECIPES =====

    def list_menu_items(self) -> List[MenuItem]:
        stmt = (
            select(MenuItem)
            .options(selectinload(MenuItem.recipe_items).selectinload(RecipeItem.ingredient))
            .order_by(MenuItem.name)
        )
        with self._reading():
            return list(self.db.scalars(stmt))

    def get_menu_item(self, menu_item_id: int) -> MenuItem:
        with self._reading():
            menu_item = self.db.get(MenuItem, menu_item_id)
        if menu_item is None:
            raise NotFoundError("Menu item", menu_item_id)
        return menu_item

    def get_menu_item_with_recipe(self, menu_item_id: int) -> MenuItem:
        """Load a menu item together with every recipe item and its ingredient."""
        stmt = (
            select(MenuItem)
            .where(MenuItem.id == menu_item_id)
            .options(selectinload(MenuItem.recipe_items).selectinload(RecipeItem.ingredient))
            .execution_options(populate_existing=True)
        )
        with self._reading():
            menu_item = self.db.scalars(stmt).first()
        if menu_item is None:
            raise NotFoundError("Menu item", menu_item_id)
        return menu_item

    def add_menu_item(self, **fields: Any) -> MenuItem:
        menu_item = MenuItem(**fields)
        self.db.add(menu_item)
        self.db.flush()
        return menu_item

    def update_menu_item(self, menu_item_id: int, changes: Dict[str, Any]) -> MenuItem:
        menu_item = self.get_menu_item(menu_item_id)
        for key, value in changes.items():
            setattr(menu_item, key, value)
        self.db.flush()
        return menu_item

    def delete_menu_item(self, menu_item_id: int) -> None:
        """Delete a menu item; its recipe items and sales go with it."""
        self.db.delete(self.get_menu_item(menu_item_id))
        self.db.flush()

    def list_recipe_items(self, menu_item_id: Optional[int] = None) -> List[RecipeItem]:
        stmt = select(RecipeItem).options(
            selectinload(RecipeItem.ingredient), selectinload(RecipeItem.menu_item)
        )
        if menu_item_id is not None:
            stmt = stmt.where(RecipeItem.menu_item_id == menu_item_id)
        with self._reading():
            return list(self.db.scalars(stmt.order_by(RecipeItem.id)))

    def get_recipe_item(self, recipe_item_id: int) -> RecipeItem:
        with self._reading():
            recipe_item = self.db.get(RecipeItem, recipe_item_id)
        if recipe_item is None:
            raise NotFoundError("Recipe item", recipe_item_id)
        return recipe_item

    def add_recipe_item(self, **fields: Any) -> RecipeItem:
        recipe_item = RecipeItem(**fields)
        self.db.add(recipe_item)
        self.db.flush()
        return recipe_item

    def update_recipe_item(self, recipe_item_id: int, changes: Dict[str, Any]) -> RecipeItem:
        recipe_item = self.get_recipe_item(recipe_item_id)
        for key, value in changes.items():
            setattr(recipe_item, key, value)
        self.db.flush()
        return recipe_item

    def delete_recipe_item(self, recipe_item_id: int) -> None:
        self.db.delete(self.get_recipe_item(recipe_item_id))
        self.db.flush()

    # ===== LEDGERS =====

    def add_sale(self, menu_item_id: int, quantity_sold: int, created_at: Optional[datetime] = None) -> Sale:
        sale = Sale(menu_item_id=menu_item_id, quantity_sold=quantity_sold)
        if created_at is not None:
            sale.created_at = created_at
        self.db.add(sale)
        self.db.flush()
        return sale

    def list_sales(self, since: Optional[datetime] = None, menu_item_id: Optional[int] = None) -> List[Sale]:
        """Sales newest first, optionally restricted to a window and a menu item."""
        stmt = select(Sale).options(selectinload(Sale.menu_item))
        if since is not None:
            stmt = stmt.where(Sale.created_at >= since)
        if menu_item_id is not None:
            stmt = stmt.where(Sale.menu_item_id == menu_item_id)
        with self._reading():
            return list(self.db.scalars(stmt.order_by(Sale.created_at.desc(), Sale.id.desc())))

    def add_waste_log(
        self, ingredient_id: int, quantity: float, reason: str, created_at: Optional[datetime] = None
    ) -> WasteLog:
        waste_log = WasteLog(ingredient_id=ingredient_id, quantity=quantity, reason=reason)
        if created_at is not None:
            waste_log.created_at = created_at
        self.db.add(waste_log)
        self.db.flush()
        return waste_log

    def list_waste_logs(self, since: Optional[datetime] = None) -> List[WasteLog]:
        """Waste logs newest first, optionally restricted to a window."""
        stmt = select(WasteLog).options(selectinload(WasteLog.ingredient))
        if since is not None:
            stmt = stmt.where(WasteLog.created_at >= since)
        with self._reading():
            return list(self.db.scalars(stmt.order_by(WasteLog.created_at.desc(), WasteLog.id.desc())))

    def get_waste_log(self, waste_log_id: int) -> WasteLog:
        with self._reading():
            waste_log = self.db.get(WasteLog, waste_log_id)
        if waste_log is None:
            raise NotFoundError("Waste log", waste_log_id)
        return waste_log

    def delete_waste_log(self, waste_log_id: int) -> None:
        """Remove a waste record. Stock is deliberately left untouched."""
        self.db.delete(self.get_waste_log(waste_log_id))
        self.db.flush()
