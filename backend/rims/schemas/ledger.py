"""Sale and waste log schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from rims.schemas.ingredient import CAMEL_CONFIG, IngredientRef
from rims.schemas.menu import MenuItemRef


class SaleCreate(BaseModel):
    """Sale request: the menu item and how many units were sold."""

    menu_item_id: int
    quantity_sold: int = Field(gt=0)

    model_config = CAMEL_CONFIG


class SaleResponse(BaseModel):
    """Recorded sale."""

    id: int
    menu_item_id: int
    quantity_sold: int
    created_at: datetime
    menu_item: MenuItemRef

    model_config = CAMEL_CONFIG


class ShortageResponse(BaseModel):
    """Ingredient that could not cover a sale."""

    ingredient_id: int
    ingredient: str
    needed: float
    available: float

    model_config = CAMEL_CONFIG


class SaleResult(BaseModel):
    """Outcome of processing a sale."""

    success: bool
    message: str
    sale: Optional[SaleResponse] = None
    shortages: Optional[List[ShortageResponse]] = None

    model_config = CAMEL_CONFIG


class WasteLogCreate(BaseModel):
    """Waste entry request."""

    ingredient_id: int
    quantity: float = Field(gt=0)
    reason: str = Field(min_length=1, max_length=255)

    model_config = CAMEL_CONFIG


class WasteLogResponse(BaseModel):
    """Recorded waste entry."""

    id: int
    ingredient_id: int
    quantity: float
    reason: str
    created_at: datetime
    ingredient: IngredientRef

    model_config = CAMEL_CONFIG
