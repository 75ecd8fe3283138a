"""Recipe item routes.

A recipe item links one ingredient to one menu item with the quantity a
single unit needs and the yield factor lost in preparation.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from rims.api.deps import Store
from rims.core.rate_limit import limiter
from rims.schemas.menu import RecipeItemCreate, RecipeItemResponse, RecipeItemUpdate

router = APIRouter()


@router.get("/", response_model=List[RecipeItemResponse])
@limiter.limit("60/minute")
def list_recipe_items(
    request: Request,
    store: Store,
    menu_item_id: Optional[int] = Query(None, alias="menuItemId", description="Filter by menu item"),
):
    """List recipe items, optionally for one menu item."""
    return store.list_recipe_items(menu_item_id=menu_item_id)


@router.get("/{recipe_item_id}", response_model=RecipeItemResponse)
@limiter.limit("60/minute")
def get_recipe_item(request: Request, recipe_item_id: int, store: Store):
    """Get a recipe item by ID."""
    return store.get_recipe_item(recipe_item_id)


@router.post("/", response_model=RecipeItemResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_recipe_item(request: Request, recipe_item_in: RecipeItemCreate, store: Store):
    """Add an ingredient to a menu item's recipe."""
    # Both ends must exist; a missing one is a 404, not a constraint failure
    store.get_menu_item(recipe_item_in.menu_item_id)
    store.get_ingredient(recipe_item_in.ingredient_id)
    with store.transaction():
        recipe_item = store.add_recipe_item(**recipe_item_in.model_dump())
    return recipe_item


@router.put("/{recipe_item_id}", response_model=RecipeItemResponse)
@limiter.limit("30/minute")
def update_recipe_item(request: Request, recipe_item_id: int, recipe_item_in: RecipeItemUpdate, store: Store):
    """Change the quantity required or yield factor of a recipe item."""
    changes = recipe_item_in.model_dump(exclude_unset=True, exclude_none=True)
    with store.transaction():
        recipe_item = store.update_recipe_item(recipe_item_id, changes)
    return recipe_item


@router.delete("/{recipe_item_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
def delete_recipe_item(request: Request, recipe_item_id: int, store: Store):
    """Remove an ingredient from a recipe."""
    with store.transaction():
        store.delete_recipe_item(recipe_item_id)
