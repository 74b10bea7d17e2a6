"""Dashboard service - month summary plus the consumption insight."""

import logging
from datetime import UTC, datetime

import httpx
from fastapi import HTTPException, status

from condoflow.schemas.reading import ReadingFilter
from condoflow.schemas.reconciliation import (
    MONTH_NAMES_PT,
    ConsumptionMetrics,
    DashboardResponse,
    MonthSummary,
    ReferenceMonth,
)
from condoflow.services.insight import NO_DATA_INSIGHT, analyze_consumption
from condoflow.services.reconciliation import default_reference_month, summarize_month
from condoflow.store.base import RecordStore

logger = logging.getLogger(__name__)


def resolve_reference_month(
    store: RecordStore,
    month: int | None = None,
    year: int | None = None,
    today: datetime | None = None,
) -> ReferenceMonth:
    """Month and year from the query, else the month of the latest reading."""
    reference = reference_from_query(month, year)
    if reference is not None:
        return reference
    return default_reference_month(store.list_readings(), today or datetime.now(UTC))


def reference_from_query(month: int | None, year: int | None) -> ReferenceMonth | None:
    """
    Reference month named by query parameters, None when neither is given.

    Raises:
        HTTPException: 400 if only one of month and year is given

    """
    if month is None and year is None:
        return None
    if month is None or year is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="month and year must be given together",
        )
    return ReferenceMonth(month=month, year=year)


def consumption_metrics(summary: MonthSummary) -> ConsumptionMetrics:
    reference = summary.reference
    return ConsumptionMetrics(
        total_water=float(summary.water.total),
        total_gas=float(summary.gas.total),
        water_change=float(summary.water.change_percent),
        gas_change=float(summary.gas.change_percent),
        month=f"{MONTH_NAMES_PT[reference.month - 1]} de {reference.year}",
    )


def build_dashboard(
    store: RecordStore,
    reference: ReferenceMonth,
    insight_client: httpx.Client | None = None,
) -> DashboardResponse:
    """
    Reconcile the month against the one before it and attach an insight.

    The insight service is only consulted when the month has consumption.
    """
    units = store.list_units()
    readings = store.list_readings(
        ReadingFilter(start=reference.previous().start, end=reference.end)
    )
    summary = summarize_month(units, readings, reference)

    if summary.water.total > 0 or summary.gas.total > 0:
        insight = analyze_consumption(consumption_metrics(summary), client=insight_client)
    else:
        insight = NO_DATA_INSIGHT

    logger.debug(
        "Dashboard for %s: water=%s gas=%s completion=%s%%",
        reference.label,
        summary.water.total,
        summary.gas.total,
        summary.completion_percent,
    )
    return DashboardResponse(summary=summary, insight=insight)
