"""Sale Processor - records a sale and deducts its recipe from stock.

Flow:
1. Load the menu item with its full recipe (NotFound if missing)
2. For each recipe item compute the true consumption:
   quantity_required / yield_factor * quantity_sold
3. Validation pass: collect EVERY ingredient whose stock cannot cover its
   consumption. Any shortage aborts the sale with nothing changed.
4. Mutation pass: decrement each ingredient, then append the Sale record.

Steps 3 and 4 run in one transaction. Ingredient rows are locked
(SELECT ... FOR UPDATE) where the backend supports it, and each decrement is
a conditional UPDATE that only applies while stock still covers it. If a
concurrent sale drains an ingredient between validation and deduction, the
whole transaction is rolled back and the sale is rejected as a shortage.
Stock can therefore never go negative through a sale, and a partial
deduction is never committed.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rims.core.exceptions import InsufficientStockError, Shortage, ValidationError
from rims.models.ingredient import Ingredient
from rims.models.menu import MenuItem
from rims.models.sale import Sale
from rims.services.deduction import total_deduction
from rims.services.inventory_store import InventoryStore
from rims.services.notifier import Notifier, publish_inventory_update

logger = logging.getLogger(__name__)


@dataclass
class IngredientRequirement:
    """Stock one ingredient must give up for a sale."""

    ingredient_id: int
    ingredient_name: str
    quantity: float


@dataclass
class SaleOutcome:
    """A committed sale and what it consumed."""

    sale: Sale
    menu_item_name: str
    requirements: List[IngredientRequirement] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"Sale processed: {self.sale.quantity_sold} {self.menu_item_name}(s)"


def _validate_quantity(quantity_sold) -> None:
    if isinstance(quantity_sold, bool) or not isinstance(quantity_sold, int):
        raise ValidationError(f"Quantity sold must be an integer, got {quantity_sold!r}")
    if quantity_sold <= 0:
        raise ValidationError(f"Quantity sold must be positive, got {quantity_sold}")


class SaleProcessor:
    """Validates and applies sales against the inventory store."""

    def __init__(self, store: InventoryStore, notifier: Optional[Notifier] = None):
        self.store = store
        self.notifier = notifier

    def process_sale(self, menu_item_id: int, quantity_sold: int) -> SaleOutcome:
        """Deduct the recipe of ``quantity_sold`` units and record the sale.

        Raises:
            ValidationError: quantity_sold is not a positive integer.
            NotFoundError: the menu item does not exist.
            InsufficientStockError: one or more ingredients are short; carries
                every shortage, and nothing was changed.
            StoreUnavailableError: the store failed; nothing was changed.
        """
        _validate_quantity(quantity_sold)

        menu_item = self.store.get_menu_item_with_recipe(menu_item_id)
        requirements = self.compute_requirements(menu_item, quantity_sold)

        try:
            with self.store.transaction():
                stock = self.store.lock_ingredients([r.ingredient_id for r in requirements])
                shortages = self.find_shortages(requirements, stock)
                if shortages:
                    logger.warning(
                        f"Sale of {quantity_sold} x '{menu_item.name}' rejected: "
                        f"{len(shortages)} ingredient(s) short"
                    )
                    raise InsufficientStockError(shortages)

                for requirement in requirements:
                    if not self.store.deduct_stock_if_available(requirement.ingredient_id, requirement.quantity):
                        # Stock changed under us after validation; undo everything
                        raise _ConcurrentDepletion(requirement)

                sale = self.store.add_sale(menu_item.id, quantity_sold)
        except _ConcurrentDepletion as e:
            # Already rolled back; report against the stock that beat us
            shortages = self._shortages_after_race(requirements, e.requirement)
            logger.warning(
                f"Sale of {quantity_sold} x '{menu_item.name}' lost a concurrent stock race: "
                f"{len(shortages)} ingredient(s) short"
            )
            raise InsufficientStockError(shortages) from e

        logger.info(
            f"Sale {sale.id} recorded: {quantity_sold} x '{menu_item.name}', "
            f"{len(requirements)} ingredient(s) deducted"
        )
        publish_inventory_update(self.store, self.notifier, reason="sale")
        return SaleOutcome(sale=sale, menu_item_name=menu_item.name, requirements=requirements)

    def compute_requirements(self, menu_item: MenuItem, quantity_sold: int) -> List[IngredientRequirement]:
        """Total consumption per recipe ingredient for ``quantity_sold`` units."""
        return [
            IngredientRequirement(
                ingredient_id=recipe_item.ingredient_id,
                ingredient_name=recipe_item.ingredient.name,
                quantity=total_deduction(
                    recipe_item.quantity_required, recipe_item.yield_factor, quantity_sold
                ),
            )
            for recipe_item in menu_item.recipe_items
        ]

    @staticmethod
    def find_shortages(
        requirements: List[IngredientRequirement],
        stock: Dict[int, Ingredient],
    ) -> List[Shortage]:
        """Every requirement the current stock cannot cover (read-only)."""
        shortages = []
        for requirement in requirements:
            ingredient = stock.get(requirement.ingredient_id)
            available = ingredient.current_stock if ingredient is not None else 0.0
            if available < requirement.quantity:
                shortages.append(Shortage(
                    ingredient_id=requirement.ingredient_id,
                    ingredient=requirement.ingredient_name,
                    needed=requirement.quantity,
                    available=available,
                ))
        return shortages

    def _shortages_after_race(
        self,
        requirements: List[IngredientRequirement],
        failed: IngredientRequirement,
    ) -> List[Shortage]:
        stock = self.store.lock_ingredients([r.ingredient_id for r in requirements])
        shortages = self.find_shortages(requirements, stock)
        if not shortages:
            # Stock recovered since the failed decrement; report that ingredient
            ingredient = stock.get(failed.ingredient_id)
            shortages = [Shortage(
                ingredient_id=failed.ingredient_id,
                ingredient=failed.ingredient_name,
                needed=failed.quantity,
                available=ingredient.current_stock if ingredient is not None else 0.0,
            )]
        # Release the locks taken for the re-read
        self.store.rollback()
        return shortages


class _ConcurrentDepletion(Exception):
    """A conditional decrement matched no row: a concurrent writer won."""

    def __init__(self, requirement: IngredientRequirement):
        self.requirement = requirement
        super().__init__(f"Stock of '{requirement.ingredient_name}' changed during the sale")


def get_sale_processor(store: InventoryStore, notifier: Optional[Notifier] = None) -> SaleProcessor:
    """Get a sale processor bound to a store."""
    return SaleProcessor(store, notifier)
