"""Menu item and recipe item schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from rims.schemas.ingredient import CAMEL_CONFIG, IngredientRef


class MenuItemCreate(BaseModel):
    """Menu item creation schema."""

    name: str = Field(min_length=1, max_length=255)
    base_price: float = Field(ge=0)

    model_config = CAMEL_CONFIG


class MenuItemUpdate(BaseModel):
    """Menu item update schema."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    base_price: Optional[float] = Field(None, ge=0)

    model_config = CAMEL_CONFIG


class MenuItemRef(BaseModel):
    """Menu item fields nested inside sale responses."""

    id: int
    name: str
    base_price: float

    model_config = CAMEL_CONFIG


class RecipeItemCreate(BaseModel):
    """Recipe item creation schema."""

    menu_item_id: int
    ingredient_id: int
    quantity_required: float = Field(gt=0)
    yield_factor: float = Field(1.0, ge=1.0)

    model_config = CAMEL_CONFIG


class RecipeItemUpdate(BaseModel):
    """Recipe item update schema."""

    quantity_required: Optional[float] = Field(None, gt=0)
    yield_factor: Optional[float] = Field(None, ge=1.0)

    model_config = CAMEL_CONFIG


class RecipeItemResponse(BaseModel):
    """Recipe item response schema."""

    id: int
    menu_item_id: int
    ingredient_id: int
    quantity_required: float
    yield_factor: float
    ingredient: IngredientRef
    menu_item: Optional[MenuItemRef] = None

    model_config = CAMEL_CONFIG


class MenuItemResponse(BaseModel):
    """Menu item response schema with its recipe."""

    id: int
    name: str
    base_price: float
    created_at: datetime
    updated_at: datetime
    recipe_items: List[RecipeItemResponse] = []

    model_config = CAMEL_CONFIG
