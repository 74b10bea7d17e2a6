"""Record store port used by the workflow services."""

from datetime import UTC, datetime
from typing import Protocol

from condoflow.models.enums import RegistrationStatus, UtilityType
from condoflow.schemas.reading import ReadingFilter, ReadingPayload, ReadingResponse
from condoflow.schemas.registration import (
    RegistrationDraft,
    RegistrationFilter,
    RegistrationResponse,
    RegistrationUpdate,
)
from condoflow.schemas.unit import UnitCreate, UnitResponse, UnitUpdate


def to_naive_utc(moment: datetime) -> datetime:
    """Aware datetimes are converted to UTC; naive ones are taken as UTC already."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(UTC).replace(tzinfo=None)


class RecordStoreError(Exception):
    """A write to the backing store failed; carries the backend's message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RecordStore(Protocol):
    """Persistence contract for units, readings and registration requests.

    Implementations return typed entities, never backend rows, and raise
    RecordStoreError when a write fails.
    """

    # Units
    def list_units(self) -> list[UnitResponse]: ...

    def get_unit(self, unit_id: int) -> UnitResponse | None: ...

    def create_unit(self, data: UnitCreate) -> UnitResponse: ...

    def update_unit(self, unit_id: int, data: UnitUpdate) -> UnitResponse | None: ...

    def delete_unit(self, unit_id: int) -> bool: ...

    # Readings
    def list_readings(self, filters: ReadingFilter | None = None) -> list[ReadingResponse]: ...

    def get_reading(self, reading_id: int) -> ReadingResponse | None: ...

    def upsert_reading(
        self,
        unit_id: int,
        utility_type: UtilityType,
        date: datetime,
        payload: ReadingPayload,
    ) -> ReadingResponse: ...

    def delete_reading(self, reading_id: int) -> bool: ...

    # Registration requests
    def list_registrations(
        self, filters: RegistrationFilter | None = None
    ) -> list[RegistrationResponse]: ...

    def get_registration(self, registration_id: int) -> RegistrationResponse | None: ...

    def create_registration(self, draft: RegistrationDraft) -> RegistrationResponse: ...

    def update_registration(
        self, registration_id: int, data: RegistrationUpdate
    ) -> RegistrationResponse | None: ...

    def update_registration_status(
        self, registration_id: int, status: RegistrationStatus
    ) -> RegistrationResponse | None: ...

    def apply_registration_to_unit(self, registration_id: int) -> UnitResponse | None: ...
