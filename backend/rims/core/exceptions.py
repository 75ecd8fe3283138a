"""Domain errors raised by the inventory core.

Every failure of a core operation surfaces as one of these types so callers
can tell a business-rule rejection (InsufficientStockError) apart from bad
input (ValidationError) and infrastructure trouble (StoreUnavailableError).
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class InventoryError(Exception):
    """Base class for all inventory core errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(InventoryError):
    """A referenced ingredient, menu item, recipe item or waste log does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ValidationError(InventoryError):
    """Malformed input rejected before the store is touched."""

    status_code = 422


@dataclass
class Shortage:
    """A per-ingredient deficit found while validating a sale."""

    ingredient_id: int
    ingredient: str
    needed: float
    available: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ingredientId": self.ingredient_id,
            "ingredient": self.ingredient,
            "needed": round(self.needed, 2),
            "available": self.available,
        }

    def describe(self) -> str:
        return f"{self.ingredient}: needs {self.needed:.2f}, have {self.available}"


class InsufficientStockError(InventoryError):
    """One or more recipe ingredients cannot cover the requested sale."""

    status_code = 400

    def __init__(self, shortages: List[Shortage], message: str = "Insufficient stock for some ingredients"):
        self.shortages = shortages
        super().__init__(message)


class ConstraintViolationError(InventoryError):
    """The store rejected a write because of a uniqueness or foreign-key constraint."""

    status_code = 409

    def __init__(self, message: str, constraint: Optional[str] = None):
        self.constraint = constraint
        super().__init__(message)


class StoreUnavailableError(InventoryError):
    """The persistence layer could not be reached or timed out."""

    status_code = 503
