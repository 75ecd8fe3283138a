"""Sale routes."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from rims.api.deps import EventNotifier, Store
from rims.core.config import settings
from rims.core.rate_limit import limiter
from rims.schemas.ledger import SaleCreate, SaleResponse, SaleResult
from rims.services.reporting_service import ReportingService
from rims.services.sale_processor import get_sale_processor

router = APIRouter()


@router.get("/", response_model=List[SaleResponse])
@limiter.limit("60/minute")
def list_sales(
    request: Request,
    store: Store,
    days: Optional[int] = Query(None, ge=1, description="Only sales from the last N days"),
    menu_item_id: Optional[int] = Query(None, alias="menuItemId", description="Filter by menu item"),
):
    """List sales, newest first."""
    since = datetime.now(timezone.utc) - timedelta(days=days) if days else None
    return store.list_sales(since=since, menu_item_id=menu_item_id)


@router.get("/report")
@limiter.limit("60/minute")
def get_sales_report(
    request: Request,
    store: Store,
    days: int = Query(settings.default_report_days, ge=1, description="Report window in days"),
):
    """Units sold and revenue per menu item over the window."""
    return ReportingService(store).sales_report(days)


@router.post("/", response_model=SaleResult, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_sale(request: Request, sale_in: SaleCreate, store: Store, notifier: EventNotifier):
    """Record a sale and deduct its recipe from stock.

    Rejected with 400 and the full shortage list when any ingredient cannot
    cover the sale; nothing is deducted in that case.
    """
    outcome = get_sale_processor(store, notifier).process_sale(sale_in.menu_item_id, sale_in.quantity_sold)
    return SaleResult(
        success=True,
        message=outcome.message,
        sale=SaleResponse.model_validate(outcome.sale),
    )
