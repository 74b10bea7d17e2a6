"""SQLAlchemy implementation of the record store."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal

from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from condoflow.models.enums import ReadingStatus, RegistrationStatus, UtilityType
from condoflow.models.reading import Reading
from condoflow.models.registration import RegistrationRequest
from condoflow.models.unit import Unit
from condoflow.schemas.reading import ReadingFilter, ReadingPayload, ReadingResponse
from condoflow.schemas.reconciliation import ReferenceMonth
from condoflow.schemas.registration import (
    RegistrationDraft,
    RegistrationFilter,
    RegistrationResponse,
    RegistrationUpdate,
)
from condoflow.schemas.unit import UnitCreate, UnitResponse, UnitUpdate
from condoflow.store.base import RecordStoreError, to_naive_utc

logger = logging.getLogger(__name__)


def _enum_values(data: dict) -> dict:
    return {key: getattr(value, "value", value) for key, value in data.items()}


class SqlAlchemyStore:
    """Record store over a request-scoped SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def _writing(self, action: str) -> Iterator[None]:
        """Commit on success; roll back and raise RecordStoreError on failure."""
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Record store failed to %s: %s", action, exc)
            raise RecordStoreError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Units
    # ------------------------------------------------------------------

    def _unit_row(self, unit_id: int) -> Unit | None:
        return self.db.query(Unit).filter(Unit.id == unit_id).first()

    def list_units(self) -> list[UnitResponse]:
        units = self.db.query(Unit).order_by(Unit.id).all()
        return [UnitResponse.model_validate(u) for u in units]

    def get_unit(self, unit_id: int) -> UnitResponse | None:
        unit = self._unit_row(unit_id)
        return UnitResponse.model_validate(unit) if unit else None

    def create_unit(self, data: UnitCreate) -> UnitResponse:
        unit = Unit(**_enum_values(data.model_dump()))
        with self._writing("create unit"):
            self.db.add(unit)
        self.db.refresh(unit)
        return UnitResponse.model_validate(unit)

    def update_unit(self, unit_id: int, data: UnitUpdate) -> UnitResponse | None:
        unit = self._unit_row(unit_id)
        if not unit:
            return None

        with self._writing("update unit"):
            for field, value in _enum_values(data.model_dump(exclude_unset=True)).items():
                setattr(unit, field, value)
        self.db.refresh(unit)
        return UnitResponse.model_validate(unit)

    def delete_unit(self, unit_id: int) -> bool:
        """Delete a unit with its readings and registration requests."""
        unit = self._unit_row(unit_id)
        if not unit:
            return False

        with self._writing("delete unit"):
            self.db.delete(unit)
        return True

    # ------------------------------------------------------------------
    # Readings
    # ------------------------------------------------------------------

    def _reading_row(self, reading_id: int) -> Reading | None:
        return self.db.query(Reading).filter(Reading.id == reading_id).first()

    def list_readings(self, filters: ReadingFilter | None = None) -> list[ReadingResponse]:
        """Readings matching the filter, in insertion order."""
        query = self.db.query(Reading)
        if filters:
            if filters.unit_id is not None:
                query = query.filter(Reading.unit_id == filters.unit_id)
            if filters.type is not None:
                query = query.filter(Reading.type == filters.type.value)
            if filters.start is not None:
                query = query.filter(Reading.date >= to_naive_utc(filters.start))
            if filters.end is not None:
                query = query.filter(Reading.date < to_naive_utc(filters.end))
        return [ReadingResponse.model_validate(r) for r in query.order_by(Reading.id).all()]

    def get_reading(self, reading_id: int) -> ReadingResponse | None:
        reading = self._reading_row(reading_id)
        return ReadingResponse.model_validate(reading) if reading else None

    def upsert_reading(
        self,
        unit_id: int,
        utility_type: UtilityType,
        date: datetime,
        payload: ReadingPayload,
    ) -> ReadingResponse:
        """Update the unit's reading of this type for the month of ``date``, or create it."""
        date = to_naive_utc(date)
        month = ReferenceMonth.of(date)
        reading = (
            self.db.query(Reading)
            .filter(
                and_(
                    Reading.unit_id == unit_id,
                    Reading.type == utility_type.value,
                    Reading.date >= month.start,
                    Reading.date < month.end,
                )
            )
            .order_by(Reading.id)
            .first()
        )
        status = payload.status or (
            ReadingStatus.PENDENTE if payload.current_value is None else ReadingStatus.LIDO
        )

        with self._writing("save reading"):
            if reading is None:
                reading = Reading(
                    unit_id=unit_id,
                    type=utility_type.value,
                    previous_value=payload.previous_value or Decimal("0"),
                    date=date,
                )
                self.db.add(reading)
            elif payload.previous_value is not None:
                reading.previous_value = payload.previous_value
            reading.current_value = payload.current_value
            reading.status = status.value
            reading.alert_message = payload.alert_message
        self.db.refresh(reading)
        return ReadingResponse.model_validate(reading)

    def delete_reading(self, reading_id: int) -> bool:
        reading = self._reading_row(reading_id)
        if not reading:
            return False

        with self._writing("delete reading"):
            self.db.delete(reading)
        return True

    # ------------------------------------------------------------------
    # Registration requests
    # ------------------------------------------------------------------

    def _registration_row(self, registration_id: int) -> RegistrationRequest | None:
        return (
            self.db.query(RegistrationRequest)
            .filter(RegistrationRequest.id == registration_id)
            .first()
        )

    def list_registrations(
        self, filters: RegistrationFilter | None = None
    ) -> list[RegistrationResponse]:
        """Registration requests, newest first."""
        query = self.db.query(RegistrationRequest)
        if filters:
            if filters.unit_id is not None:
                query = query.filter(RegistrationRequest.unit_id == filters.unit_id)
            if filters.status is not None:
                query = query.filter(RegistrationRequest.status == filters.status.value)
        rows = query.order_by(
            RegistrationRequest.created_at.desc(), RegistrationRequest.id.desc()
        ).all()
        return [RegistrationResponse.model_validate(r) for r in rows]

    def get_registration(self, registration_id: int) -> RegistrationResponse | None:
        registration = self._registration_row(registration_id)
        return RegistrationResponse.model_validate(registration) if registration else None

    def create_registration(self, draft: RegistrationDraft) -> RegistrationResponse:
        data = _enum_values(draft.model_dump(exclude={"additional_residents"}))
        registration = RegistrationRequest(
            **data,
            additional_residents=[
                r.model_dump(mode="json") for r in draft.additional_residents
            ],
            status=RegistrationStatus.PENDENTE.value,
        )
        with self._writing("create registration"):
            self.db.add(registration)
        self.db.refresh(registration)
        return RegistrationResponse.model_validate(registration)

    def update_registration(
        self, registration_id: int, data: RegistrationUpdate
    ) -> RegistrationResponse | None:
        registration = self._registration_row(registration_id)
        if not registration:
            return None

        update_data = _enum_values(
            data.model_dump(exclude_unset=True, exclude={"additional_residents"})
        )
        with self._writing("update registration"):
            for field, value in update_data.items():
                setattr(registration, field, value)
            if data.additional_residents is not None:
                registration.additional_residents = [
                    r.model_dump(mode="json") for r in data.additional_residents
                ]
        self.db.refresh(registration)
        return RegistrationResponse.model_validate(registration)

    def update_registration_status(
        self, registration_id: int, status: RegistrationStatus
    ) -> RegistrationResponse | None:
        registration = self._registration_row(registration_id)
        if not registration:
            return None

        with self._writing("update registration status"):
            registration.status = status.value
        self.db.refresh(registration)
        return RegistrationResponse.model_validate(registration)

    def apply_registration_to_unit(self, registration_id: int) -> UnitResponse | None:
        """Copy the registered resident's name and role onto the unit."""
        registration = self._registration_row(registration_id)
        if not registration:
            return None

        unit = registration.unit
        with self._writing("apply registration to unit"):
            unit.resident_name = registration.full_name
            unit.resident_role = registration.resident_type
        self.db.refresh(unit)
        return UnitResponse.model_validate(unit)
