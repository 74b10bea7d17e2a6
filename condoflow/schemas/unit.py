"""Unit Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from condoflow.models.enums import ResidentRole


class UnitBase(BaseModel):
    """Base unit schema."""

    number: str
    block: str = ""
    resident_name: str = ""
    resident_role: ResidentRole = ResidentRole.PROPRIETARIO

    @field_validator("number")
    @classmethod
    def validate_number(cls, v: str) -> str:
        """Unit numbers are trimmed and cannot be empty."""
        v = v.strip()
        if not v:
            raise ValueError("Unit number cannot be empty")
        return v

    @field_validator("block")
    @classmethod
    def normalize_block(cls, v: str) -> str:
        return v.strip().upper()


class UnitCreate(UnitBase):
    """Schema for creating a unit directly (outside the registration workflow)."""


class UnitUpdate(BaseModel):
    """Schema for partially updating a unit."""

    number: str | None = None
    block: str | None = None
    resident_name: str | None = None
    resident_role: ResidentRole | None = None

    @field_validator("number")
    @classmethod
    def validate_number(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Unit number cannot be empty")
        return v

    @field_validator("block")
    @classmethod
    def normalize_block(cls, v: str | None) -> str | None:
        return v.strip().upper() if v is not None else v


class UnitResponse(UnitBase):
    """Typed unit entity returned by the record store."""

    id: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
