"""Report download routes (PDF and spreadsheet)."""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from reportlab.platypus.doctemplate import LayoutError

from condoflow.api.dependencies import get_store, require_user
from condoflow.core.config import settings
from condoflow.models.enums import UtilityType
from condoflow.schemas.reading import ReadingFilter
from condoflow.schemas.reconciliation import MAX_YEAR, MIN_YEAR
from condoflow.schemas.report import MonthlyReport, ReportFormat
from condoflow.services import units as unit_service
from condoflow.services.dashboard import resolve_reference_month
from condoflow.services.export import (
    render_individual_pdf,
    render_monthly_pdf,
    render_monthly_xlsx,
)
from condoflow.services.reports import (
    build_individual_report,
    build_monthly_report,
    monthly_readings,
)
from condoflow.store.base import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"], dependencies=require_user)

REPORT_FAILURE_MESSAGE = "Erro ao gerar relatório. Verifique os dados."
PDF_MEDIA_TYPE = "application/pdf"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

R = TypeVar("R")


def _render(renderer: Callable[[R], bytes], report: R) -> bytes:
    try:
        return renderer(report)
    except (LayoutError, ValueError, OSError):
        logger.exception("Report rendering failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=REPORT_FAILURE_MESSAGE,
        ) from None


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _timestamp() -> int:
    """Milliseconds since the epoch, used to keep downloaded file names unique."""
    return int(datetime.now(UTC).timestamp() * 1000)


def _monthly_report(
    store: RecordStore,
    month: int | None,
    year: int | None,
    utility_type: UtilityType | None,
    report_format: ReportFormat,
) -> MonthlyReport:
    reference = resolve_reference_month(store, month, year)
    readings = store.list_readings(
        ReadingFilter(start=reference.start, end=reference.end, type=utility_type)
    )
    return build_monthly_report(
        monthly_readings(readings, reference, utility_type),
        store.list_units(),
        reference,
        settings.CONDOMINIUM_NAME,
        report_format,
    )


@router.get("/monthly.pdf")
def monthly_pdf(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
    type: UtilityType | None = Query(None, description="Only this utility"),
    store: RecordStore = Depends(get_store),
):
    """Monthly consumption PDF, one page per utility with readings."""
    report = _monthly_report(store, month, year, type, ReportFormat.PDF)
    content = _render(render_monthly_pdf, report)
    return _attachment(content, PDF_MEDIA_TYPE, f"relatorio_mensal_{_timestamp()}.pdf")


@router.get("/monthly.xlsx")
def monthly_xlsx(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
    type: UtilityType | None = Query(None, description="Only this utility"),
    store: RecordStore = Depends(get_store),
):
    """Monthly consumption workbook with a water and a gas sheet."""
    report = _monthly_report(store, month, year, type, ReportFormat.SPREADSHEET)
    content = _render(render_monthly_xlsx, report)
    return _attachment(content, XLSX_MEDIA_TYPE, f"relatorio_consumo_{_timestamp()}.xlsx")


@router.get("/units/{unit_id}.pdf")
def unit_pdf(
    unit_id: int,
    start: date | None = Query(None, description="First day, inclusive"),
    end: date | None = Query(None, description="Last day, inclusive"),
    store: RecordStore = Depends(get_store),
):
    """Individual report of a unit over all its readings or a date range."""
    if start and end and start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start must not be after end",
        )

    unit = unit_service.get_unit(store, unit_id)
    report = build_individual_report(
        unit,
        store.list_readings(ReadingFilter(unit_id=unit_id)),
        settings.CONDOMINIUM_NAME,
        today=datetime.now(UTC).date(),
        start=start,
        end=end,
    )
    content = _render(render_individual_pdf, report)
    return _attachment(content, PDF_MEDIA_TYPE, f"relatorio_apto_{unit.number}.pdf")
