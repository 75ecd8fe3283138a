"""API routes."""

from fastapi import APIRouter

from rims.api.routes import ingredients, menu_items, recipe_items, reports, sales, waste_logs

api_router = APIRouter()

api_router.include_router(ingredients.router, prefix="/ingredients", tags=["ingredients"])
api_router.include_router(menu_items.router, prefix="/menu-items", tags=["menu-items"])
api_router.include_router(recipe_items.router, prefix="/recipe-items", tags=["recipe-items"])
api_router.include_router(sales.router, prefix="/sales", tags=["sales"])
api_router.include_router(waste_logs.router, prefix="/waste-logs", tags=["waste"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
