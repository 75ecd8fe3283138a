"""SQLAlchemy models."""

from rims.models.ingredient import Ingredient
from rims.models.menu import MenuItem, RecipeItem
from rims.models.sale import Sale
from rims.models.waste import WasteLog

__all__ = ["Ingredient", "MenuItem", "RecipeItem", "Sale", "WasteLog"]
