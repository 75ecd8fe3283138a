"""Ingredient schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

CAMEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "from_attributes": True,
    "str_strip_whitespace": True,
}


class IngredientBase(BaseModel):
    """Base ingredient schema."""

    name: str = Field(min_length=1, max_length=255)
    unit: str = Field(min_length=1, max_length=50)
    current_stock: float = Field(0.0, ge=0)
    par_level: float = Field(0.0, ge=0)
    unit_cost: float = Field(0.0, ge=0)

    model_config = CAMEL_CONFIG


class IngredientCreate(IngredientBase):
    """Ingredient creation schema."""


class IngredientUpdate(BaseModel):
    """Ingredient update schema. Only supplied fields are changed."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    unit: Optional[str] = Field(None, min_length=1, max_length=50)
    current_stock: Optional[float] = Field(None, ge=0)
    par_level: Optional[float] = Field(None, ge=0)
    unit_cost: Optional[float] = Field(None, ge=0)

    model_config = CAMEL_CONFIG


class IngredientRef(BaseModel):
    """Ingredient fields nested inside recipe and waste responses."""

    id: int
    name: str
    unit: str
    current_stock: float
    unit_cost: float

    model_config = CAMEL_CONFIG


class IngredientResponse(IngredientBase):
    """Ingredient response schema. Stock may be negative after waste."""

    id: int
    current_stock: float
    created_at: datetime
    updated_at: datetime
