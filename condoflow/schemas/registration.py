"""Registration request Pydantic schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field, computed_field, field_validator

from condoflow.core.documents import format_cpf, format_phone
from condoflow.models.enums import RegistrationStatus, ResidentRole
from condoflow.schemas.unit import UnitResponse


class AdditionalResident(BaseModel):
    """Co-resident listed on a registration."""

    name: str = ""
    cpf: str = ""
    birth_date: date | None = None
    phone: str = ""


class RegistrationDraft(BaseModel):
    """Intake form contents; every field is optional until validated step by step."""

    unit_id: int | None = None
    full_name: str = ""
    cpf: str = ""
    birth_date: date | None = None
    phone: str = ""
    resident_type: ResidentRole = ResidentRole.PROPRIETARIO
    garage_spot: str = ""
    is_financial_responsible: bool = True
    financial_responsible_name: str | None = None
    financial_responsible_cpf: str | None = None
    owner_name: str | None = None
    owner_phone: str | None = None
    additional_residents: list[AdditionalResident] = Field(default_factory=list)


class RegistrationUpdate(BaseModel):
    """Partial edit of a registration still awaiting a decision."""

    full_name: str | None = None
    cpf: str | None = None
    birth_date: date | None = None
    phone: str | None = None
    resident_type: ResidentRole | None = None
    garage_spot: str | None = None
    is_financial_responsible: bool | None = None
    financial_responsible_name: str | None = None
    financial_responsible_cpf: str | None = None
    owner_name: str | None = None
    owner_phone: str | None = None
    additional_residents: list[AdditionalResident] | None = None


class RegistrationResponse(BaseModel):
    """Typed registration entity returned by the record store."""

    id: int
    unit_id: int
    full_name: str
    cpf: str
    birth_date: date
    phone: str
    resident_type: ResidentRole
    garage_spot: str
    is_financial_responsible: bool
    financial_responsible_name: str | None = None
    financial_responsible_cpf: str | None = None
    owner_name: str | None = None
    owner_phone: str | None = None
    additional_residents: list[AdditionalResident] = Field(default_factory=list)
    status: RegistrationStatus
    created_at: datetime | None = None

    model_config = {"from_attributes": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cpf_display(self) -> str:
        """CPF masked as 000.000.000-00."""
        return format_cpf(self.cpf)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def phone_display(self) -> str:
        return format_phone(self.phone)


class RegistrationFilter(BaseModel):
    """Filter accepted by the record store's registration listing."""

    unit_id: int | None = None
    status: RegistrationStatus | None = None


class StepValidation(BaseModel):
    """Field errors for one intake step; an empty map lets the form advance."""

    step: int
    ok: bool
    errors: dict[str, str]


class UnitOption(BaseModel):
    """Unit choice shown on the public intake form."""

    id: int
    number: str
    block: str
    label: str


class UnitProfile(BaseModel):
    """Administrative edit of a unit together with its resident's details."""

    number: str
    block: str = ""
    resident_name: str
    resident_role: ResidentRole = ResidentRole.PROPRIETARIO
    cpf: str = ""
    birth_date: date
    phone: str = ""
    garage_spot: str = ""
    is_financial_responsible: bool = True
    financial_responsible_name: str | None = None
    financial_responsible_cpf: str | None = None
    owner_name: str | None = None
    owner_phone: str | None = None
    additional_residents: list[AdditionalResident] = Field(default_factory=list)

    @field_validator("number")
    @classmethod
    def validate_number(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Unit number cannot be empty")
        return v


class UnitProfileResponse(BaseModel):
    """Unit and the approved registration backing it after a profile save."""

    unit: UnitResponse
    registration: RegistrationResponse
