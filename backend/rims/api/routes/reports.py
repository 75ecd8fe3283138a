"""Dashboard report routes."""

from fastapi import APIRouter, Request

from rims.api.deps import Store
from rims.core.rate_limit import limiter
from rims.services.reporting_service import ReportingService

router = APIRouter()


@router.get("/inventory")
@limiter.limit("60/minute")
def get_inventory_summary(request: Request, store: Store):
    """Every ingredient with its CRITICAL / LOW / OK status."""
    return ReportingService(store).inventory_summary()


@router.get("/stock-deductions/{menu_item_id}")
@limiter.limit("60/minute")
def get_stock_deductions(request: Request, menu_item_id: int, store: Store):
    """Per-unit consumption of a menu item and how many units current stock allows."""
    return ReportingService(store).stock_deductions(menu_item_id)


@router.get("/purchase-orders")
@limiter.limit("60/minute")
def get_purchase_orders(request: Request, store: Store):
    """Restock proposals for depleted ingredients."""
    return ReportingService(store).purchase_orders()
