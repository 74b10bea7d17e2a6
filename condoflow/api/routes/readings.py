"""Reading routes for ledger operations."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from condoflow.api.dependencies import get_store, require_user
from condoflow.models.enums import UtilityType
from condoflow.schemas.reading import (
    ReadingHistoryItem,
    ReadingResponse,
    ReadingUpsert,
    ReadingValidation,
    ReadingValidationRequest,
)
from condoflow.schemas.reconciliation import MAX_YEAR, MIN_YEAR
from condoflow.services import readings as reading_service
from condoflow.services.dashboard import reference_from_query
from condoflow.store.base import RecordStore

router = APIRouter(prefix="/readings", tags=["readings"], dependencies=require_user)


@router.get("", response_model=list[ReadingResponse])
def list_readings(
    unit_id: int | None = Query(None),
    type: UtilityType | None = Query(None),
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
    start: datetime | None = Query(None, description="Inclusive lower bound"),
    end: datetime | None = Query(None, description="Exclusive upper bound"),
    store: RecordStore = Depends(get_store),
):
    """List readings; month and year together select a reference month."""
    reference = reference_from_query(month, year)
    return reading_service.list_readings(store, unit_id, type, start, end, reference)


@router.post("/validate", response_model=ReadingValidation)
def validate_reading(request: ReadingValidationRequest, store: RecordStore = Depends(get_store)):
    """
    Check a value before saving it.

    Returns the previous value it is compared against and, when the value is
    below it, the warning that must be confirmed on save.
    """
    return reading_service.check_reading(store, request)


@router.put("", response_model=ReadingResponse)
def save_reading(reading_data: ReadingUpsert, store: RecordStore = Depends(get_store)):
    """
    Record a unit's reading for the month of ``date``.

    Updates the existing reading of that unit, type and month if there is one.
    A value below the previous one is refused with 409 unless
    ``confirm_below_previous`` is set.
    """
    return reading_service.save_reading(store, reading_data)


@router.get("/history", response_model=list[ReadingHistoryItem])
def reading_history(
    unit_id: int | None = Query(None),
    type: UtilityType | None = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    store: RecordStore = Depends(get_store),
):
    """Most recent readings first, with unit label and resident."""
    return reading_service.reading_history(store, unit_id, type, limit)


@router.get("/{reading_id}", response_model=ReadingResponse)
def get_reading(reading_id: int, store: RecordStore = Depends(get_store)):
    return reading_service.get_reading(store, reading_id)


@router.delete("/{reading_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reading(reading_id: int, store: RecordStore = Depends(get_store)):
    reading_service.delete_reading(store, reading_id)
