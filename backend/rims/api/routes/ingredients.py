"""Ingredient routes."""

import logging
from typing import List

from fastapi import APIRouter, Request, status

from rims.api.deps import EventNotifier, Store
from rims.core.rate_limit import limiter
from rims.schemas.ingredient import IngredientCreate, IngredientResponse, IngredientUpdate
from rims.services.notifier import publish_inventory_update

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[IngredientResponse])
@limiter.limit("60/minute")
def list_ingredients(request: Request, store: Store):
    """List all ingredients by name."""
    return store.list_ingredients()


@router.get("/{ingredient_id}", response_model=IngredientResponse)
@limiter.limit("60/minute")
def get_ingredient(request: Request, ingredient_id: int, store: Store):
    """Get an ingredient by ID."""
    return store.get_ingredient(ingredient_id)


@router.post("/", response_model=IngredientResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_ingredient(request: Request, ingredient_in: IngredientCreate, store: Store, notifier: EventNotifier):
    """Create a new ingredient."""
    with store.transaction():
        ingredient = store.add_ingredient(**ingredient_in.model_dump())
    logger.info(f"Ingredient {ingredient.id} created: '{ingredient.name}'")
    publish_inventory_update(store, notifier, reason="ingredient_created")
    return ingredient


@router.put("/{ingredient_id}", response_model=IngredientResponse)
@limiter.limit("30/minute")
def update_ingredient(
    request: Request,
    ingredient_id: int,
    ingredient_in: IngredientUpdate,
    store: Store,
    notifier: EventNotifier,
):
    """Update an ingredient. Only the supplied fields change."""
    changes = ingredient_in.model_dump(exclude_unset=True, exclude_none=True)
    with store.transaction():
        ingredient = store.update_ingredient(ingredient_id, changes)
    publish_inventory_update(store, notifier, reason="ingredient_updated")
    return ingredient


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
def delete_ingredient(request: Request, ingredient_id: int, store: Store, notifier: EventNotifier):
    """Delete an ingredient along with its recipe items and waste logs."""
    with store.transaction():
        store.delete_ingredient(ingredient_id)
    logger.info(f"Ingredient {ingredient_id} deleted")
    publish_inventory_update(store, notifier, reason="ingredient_deleted")
