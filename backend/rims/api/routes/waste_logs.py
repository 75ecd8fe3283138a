"""Waste log routes."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from rims.api.deps import EventNotifier, Store
from rims.core.config import settings
from rims.core.rate_limit import limiter
from rims.schemas.ledger import WasteLogCreate, WasteLogResponse
from rims.services.reporting_service import ReportingService
from rims.services.waste_processor import WasteProcessor

router = APIRouter()


@router.get("/", response_model=List[WasteLogResponse])
@limiter.limit("60/minute")
def list_waste_logs(
    request: Request,
    store: Store,
    days: Optional[int] = Query(None, ge=1, description="Only waste from the last N days"),
):
    """List waste logs, newest first."""
    since = datetime.now(timezone.utc) - timedelta(days=days) if days else None
    return store.list_waste_logs(since=since)


@router.get("/summary")
@limiter.limit("60/minute")
def get_waste_summary(
    request: Request,
    store: Store,
    days: int = Query(settings.waste_report_days, ge=1, description="Summary window in days"),
):
    """Waste totals by ingredient and by reason."""
    return ReportingService(store).waste_summary(days)


@router.post("/", response_model=WasteLogResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_waste_log(request: Request, waste_in: WasteLogCreate, store: Store, notifier: EventNotifier):
    """Log waste and remove it from stock. Stock may go negative."""
    processor = WasteProcessor(store, notifier, clamp_at_zero=settings.waste_clamp_at_zero)
    return processor.log_waste(waste_in.ingredient_id, waste_in.quantity, waste_in.reason)


@router.delete("/{waste_log_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
def delete_waste_log(request: Request, waste_log_id: int, store: Store):
    """Delete a waste record. The wasted stock is not restored."""
    WasteProcessor(store).delete_waste_log(waste_log_id)
