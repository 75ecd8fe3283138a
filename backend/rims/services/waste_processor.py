"""Waste Processor - records waste and removes it from stock.

Unlike a sale, waste is not checked against available stock: the waste
happened whether or not the books say the ingredient was there, so by
default stock may go negative to flag a reconciliation problem. With
``clamp_at_zero`` the decrement stops at zero instead. Deleting a waste
log only removes the record; stock is never restored.
"""

import logging
import math
from typing import Optional

from rims.core.exceptions import ValidationError
from rims.models.waste import WasteLog
from rims.services.inventory_store import InventoryStore
from rims.services.notifier import Notifier, publish_inventory_update

logger = logging.getLogger(__name__)


class WasteProcessor:
    """Service for logging ingredient waste."""

    def __init__(
        self,
        store: InventoryStore,
        notifier: Optional[Notifier] = None,
        clamp_at_zero: bool = False,
    ):
        self.store = store
        self.notifier = notifier
        self.clamp_at_zero = clamp_at_zero

    def log_waste(self, ingredient_id: int, quantity: float, reason: str) -> WasteLog:
        """Create a waste log and decrement the ingredient, atomically."""
        if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
            raise ValidationError(f"Waste quantity must be a number, got {quantity!r}")
        if not math.isfinite(quantity) or quantity <= 0:
            raise ValidationError(f"Waste quantity must be positive, got {quantity}")
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Waste reason is required")

        ingredient = self.store.get_ingredient(ingredient_id)

        with self.store.transaction():
            waste_log = self.store.add_waste_log(ingredient.id, float(quantity), reason)
            self.store.adjust_stock(
                ingredient.id,
                -float(quantity),
                floor=0.0 if self.clamp_at_zero else None,
            )

        logger.info(
            f"Waste {waste_log.id} logged: {quantity} {ingredient.unit} of '{ingredient.name}' ({reason})"
        )
        if ingredient.current_stock < 0:
            logger.warning(
                f"Stock for '{ingredient.name}' went negative after waste: "
                f"{ingredient.current_stock} {ingredient.unit}"
            )

        publish_inventory_update(self.store, self.notifier, reason="waste")
        return waste_log

    def delete_waste_log(self, waste_log_id: int) -> None:
        """Delete a waste record without restoring stock."""
        with self.store.transaction():
            self.store.delete_waste_log(waste_log_id)
        logger.info(f"Waste log {waste_log_id} deleted (stock not restored)")
