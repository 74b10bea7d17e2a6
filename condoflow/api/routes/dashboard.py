"""Dashboard route."""

import httpx
from fastapi import APIRouter, Depends, Query

from condoflow.api.dependencies import get_insight_client, get_store, require_user
from condoflow.schemas.reconciliation import MAX_YEAR, MIN_YEAR, DashboardResponse
from condoflow.services.dashboard import build_dashboard, resolve_reference_month
from condoflow.store.base import RecordStore

router = APIRouter(tags=["dashboard"], dependencies=require_user)


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
    store: RecordStore = Depends(get_store),
    insight_client: httpx.Client | None = Depends(get_insight_client),
):
    """
    Totals, month-over-month change, top consumers and completion for a month.

    Includes a short natural-language insight; the insight never fails the
    request and falls back to a fixed sentence.
    """
    reference = resolve_reference_month(store, month, year)
    return build_dashboard(store, reference, insight_client=insight_client)
