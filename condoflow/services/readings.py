"""Reading service - validation and the two-phase save of ledger entries."""

import logging
from datetime import UTC, datetime
from decimal import Decimal

from fastapi import HTTPException, status

from condoflow.models.enums import ReadingStatus, UtilityType
from condoflow.schemas.reading import (
    ReadingFilter,
    ReadingHistoryItem,
    ReadingPayload,
    ReadingResponse,
    ReadingUpsert,
    ReadingValidation,
    ReadingValidationRequest,
)
from condoflow.schemas.reconciliation import ReferenceMonth
from condoflow.services.ordering import unit_label
from condoflow.services.reconciliation import previous_value_for
from condoflow.store.base import RecordStore, to_naive_utc

logger = logging.getLogger(__name__)

NEGATIVE_VALUE_ERROR = "A leitura não pode ser negativa."


def _plain(value: Decimal) -> str:
    """Shortest decimal text: 12.500 -> 12.5, 10.000 -> 10."""
    return f"{value.normalize():f}"


def below_previous_warning(current: Decimal, previous: Decimal) -> str:
    return (
        f"Atenção: A leitura atual ({_plain(current)}) é menor que a anterior "
        f"({_plain(previous)}). Deseja salvar mesmo assim?"
    )


def validate_reading(current: Decimal, previous: Decimal) -> ReadingValidation:
    """
    First phase of a save.

    A negative value is rejected outright. A value below the previous one is
    accepted with a warning that the caller must confirm before saving.
    """
    if current < 0:
        return ReadingValidation(ok=False, previous_value=previous, error=NEGATIVE_VALUE_ERROR)
    if current < previous:
        return ReadingValidation(
            ok=True,
            previous_value=previous,
            warning=below_previous_warning(current, previous),
        )
    return ReadingValidation(ok=True, previous_value=previous)


def _require_unit(store: RecordStore, unit_id: int) -> None:
    if store.get_unit(unit_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unit not found",
        )


def resolve_previous_value(
    store: RecordStore,
    unit_id: int,
    utility_type: UtilityType,
    date: datetime,
    supplied: Decimal | None = None,
) -> Decimal:
    """
    Previous value given by the caller, else the one already on the month's
    reading, else the one carried over from earlier months.
    """
    if supplied is not None:
        return supplied
    month = ReferenceMonth.of(date)
    history = store.list_readings(ReadingFilter(unit_id=unit_id, type=utility_type))
    existing = next((r for r in history if month.contains(r.date)), None)
    if existing is not None:
        return existing.previous_value
    return previous_value_for(history, unit_id, utility_type, month.start)


def check_reading(store: RecordStore, request: ReadingValidationRequest) -> ReadingValidation:
    """Validate a value against the unit's previous reading without saving it."""
    _require_unit(store, request.unit_id)
    date = _reading_date(request.date)
    previous = resolve_previous_value(
        store, request.unit_id, request.type, date, request.previous_value
    )
    return validate_reading(request.current_value, previous)


def _reading_date(date: datetime | None) -> datetime:
    return to_naive_utc(date or datetime.now(UTC))


def save_reading(store: RecordStore, data: ReadingUpsert) -> ReadingResponse:
    """
    Second phase of a save: upsert the unit's reading for the month.

    Raises:
        HTTPException: 404 for an unknown unit, 400 for a negative value,
            409 with the warning text when a value below the previous one
            was not confirmed

    """
    _require_unit(store, data.unit_id)
    date = _reading_date(data.date)
    previous = resolve_previous_value(store, data.unit_id, data.type, date, data.previous_value)

    payload = ReadingPayload(previous_value=previous, current_value=data.current_value)
    if data.current_value is None:
        payload.status = ReadingStatus.PENDENTE
    else:
        validation = validate_reading(data.current_value, previous)
        if not validation.ok:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=validation.error,
            )
        if validation.warning and not data.confirm_below_previous:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=validation.warning,
            )
        if validation.warning:
            payload.status = ReadingStatus.ERRO
            payload.alert_message = validation.warning
        else:
            payload.status = ReadingStatus.LIDO

    reading = store.upsert_reading(data.unit_id, data.type, date, payload)
    logger.info(
        "Saved %s reading for unit %s on %s: %s -> %s (%s)",
        data.type.value,
        data.unit_id,
        f"{date:%Y-%m}",
        reading.previous_value,
        reading.current_value,
        reading.status.value,
    )
    return reading


def list_readings(
    store: RecordStore,
    unit_id: int | None = None,
    utility_type: UtilityType | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    reference: ReferenceMonth | None = None,
) -> list[ReadingResponse]:
    """Ledger entries in insertion order; a reference month overrides start/end."""
    if reference is not None:
        start, end = reference.start, reference.end
    if start and end and start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start must not be after end",
        )
    return store.list_readings(
        ReadingFilter(unit_id=unit_id, type=utility_type, start=start, end=end)
    )


def get_reading(store: RecordStore, reading_id: int) -> ReadingResponse:
    reading = store.get_reading(reading_id)
    if not reading:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reading not found",
        )
    return reading


def delete_reading(store: RecordStore, reading_id: int) -> None:
    if not store.delete_reading(reading_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reading not found",
        )
    logger.info("Deleted reading %s", reading_id)


def reading_history(
    store: RecordStore,
    unit_id: int | None = None,
    utility_type: UtilityType | None = None,
    limit: int = 100,
) -> list[ReadingHistoryItem]:
    """Most recent readings first, each with its unit's label and resident."""
    units_by_id = {unit.id: unit for unit in store.list_units()}
    readings = store.list_readings(ReadingFilter(unit_id=unit_id, type=utility_type))
    readings.sort(key=lambda r: (r.date, r.id), reverse=True)

    history = []
    for reading in readings[:limit]:
        unit = units_by_id.get(reading.unit_id)
        history.append(
            ReadingHistoryItem(
                reading=reading,
                unit_label=unit_label(unit) if unit else "-",
                resident_name=unit.resident_name if unit else "",
            )
        )
    return history
