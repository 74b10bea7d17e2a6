"""Reading Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, computed_field, field_validator, model_validator

from condoflow.models.enums import ReadingStatus, UtilityType
from condoflow.schemas.reconciliation import MAX_YEAR, MIN_YEAR


def _check_year(value: datetime | None) -> datetime | None:
    if value is not None and not MIN_YEAR <= value.year <= MAX_YEAR:
        raise ValueError(f"year must be between {MIN_YEAR} and {MAX_YEAR}")
    return value


class ReadingResponse(BaseModel):
    """Typed ledger entry returned by the record store."""

    id: int
    unit_id: int
    type: UtilityType
    previous_value: Decimal
    current_value: Decimal | None
    date: datetime
    status: ReadingStatus
    alert_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def consumption(self) -> Decimal | None:
        """current_value - previous_value, None until the current value is entered."""
        if self.current_value is None:
            return None
        return self.current_value - self.previous_value


class ReadingPayload(BaseModel):
    """Values written by an upsert; previous_value is looked up when omitted."""

    previous_value: Decimal | None = None
    current_value: Decimal | None = None
    status: ReadingStatus | None = None
    alert_message: str | None = None


class ReadingUpsert(BaseModel):
    """Schema for recording a unit's reading for the month of ``date``."""

    unit_id: int
    type: UtilityType
    date: datetime | None = None  # Defaults to now
    current_value: Decimal | None = None
    previous_value: Decimal | None = None
    confirm_below_previous: bool = False

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: datetime | None) -> datetime | None:
        return _check_year(v)


class ReadingValidationRequest(BaseModel):
    """First phase of a save: check a value before committing it."""

    unit_id: int
    type: UtilityType
    current_value: Decimal
    date: datetime | None = None
    previous_value: Decimal | None = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: datetime | None) -> datetime | None:
        return _check_year(v)


class ReadingValidation(BaseModel):
    """Outcome of validating a reading value."""

    ok: bool
    previous_value: Decimal
    warning: str | None = None
    error: str | None = None


class ReadingFilter(BaseModel):
    """Filter accepted by the record store's reading listing."""

    unit_id: int | None = None
    type: UtilityType | None = None
    start: datetime | None = None  # inclusive
    end: datetime | None = None  # exclusive

    @model_validator(mode="after")
    def validate_range(self) -> "ReadingFilter":
        """Start must not be after end."""
        if self.start and self.end and self.start > self.end:
            raise ValueError("start must be before end")
        return self


class ReadingHistoryItem(BaseModel):
    """Ledger entry joined with its unit for the history listing."""

    reading: ReadingResponse
    unit_label: str
    resident_name: str
