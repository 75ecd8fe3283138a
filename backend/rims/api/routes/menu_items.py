"""Menu item routes."""

import logging
from typing import List

from fastapi import APIRouter, Request, status

from rims.api.deps import Store
from rims.core.rate_limit import limiter
from rims.schemas.menu import MenuItemCreate, MenuItemResponse, MenuItemUpdate, RecipeItemResponse
from rims.services.reporting_service import ReportingService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[MenuItemResponse])
@limiter.limit("60/minute")
def list_menu_items(request: Request, store: Store):
    """List all menu items with their recipes."""
    return store.list_menu_items()


@router.get("/{menu_item_id}")
@limiter.limit("60/minute")
def get_menu_item_details(request: Request, menu_item_id: int, store: Store):
    """Menu item with per-ingredient consumption, ingredient cost and profit margin."""
    return ReportingService(store).menu_item_details(menu_item_id)


@router.get("/{menu_item_id}/recipes", response_model=List[RecipeItemResponse])
@limiter.limit("60/minute")
def list_menu_item_recipes(request: Request, menu_item_id: int, store: Store):
    """Recipe items of one menu item."""
    store.get_menu_item(menu_item_id)
    return store.list_recipe_items(menu_item_id=menu_item_id)


@router.post("/", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_menu_item(request: Request, menu_item_in: MenuItemCreate, store: Store):
    """Create a menu item. Recipe items are added separately."""
    with store.transaction():
        menu_item = store.add_menu_item(**menu_item_in.model_dump())
    logger.info(f"Menu item {menu_item.id} created: '{menu_item.name}'")
    return menu_item


@router.put("/{menu_item_id}", response_model=MenuItemResponse)
@limiter.limit("30/minute")
def update_menu_item(request: Request, menu_item_id: int, menu_item_in: MenuItemUpdate, store: Store):
    """Update a menu item's name or base price."""
    changes = menu_item_in.model_dump(exclude_unset=True, exclude_none=True)
    with store.transaction():
        store.update_menu_item(menu_item_id, changes)
    return store.get_menu_item_with_recipe(menu_item_id)


@router.delete("/{menu_item_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
def delete_menu_item(request: Request, menu_item_id: int, store: Store):
    """Delete a menu item along with its recipe items and sales."""
    with store.transaction():
        store.delete_menu_item(menu_item_id)
    logger.info(f"Menu item {menu_item_id} deleted")
