"""Resident registration request database model."""

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from condoflow.core.database import Base
from condoflow.models.enums import RegistrationStatus, ResidentRole

if TYPE_CHECKING:
    from condoflow.models.unit import Unit


class RegistrationRequest(Base):
    """Resident profile submitted for a unit, awaiting an administrative decision."""

    __tablename__ = "registration_requests"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    unit_id: Mapped[int] = mapped_column(
        ForeignKey("units.id", ondelete="CASCADE"), index=True
    )

    # Primary resident (documents stored as digits only)
    full_name: Mapped[str] = mapped_column(String(255))
    cpf: Mapped[str] = mapped_column(String(11))
    birth_date: Mapped[date]
    phone: Mapped[str] = mapped_column(String(11))
    resident_type: Mapped[ResidentRole] = mapped_column(String(20))
    garage_spot: Mapped[str] = mapped_column(String(50))

    # Financial responsible, when not the resident
    is_financial_responsible: Mapped[bool] = mapped_column(default=True)
    financial_responsible_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    financial_responsible_cpf: Mapped[str | None] = mapped_column(String(11), nullable=True)

    # Owner contact, for tenants
    owner_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner_phone: Mapped[str | None] = mapped_column(String(11), nullable=True)

    additional_residents: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)

    status: Mapped[RegistrationStatus] = mapped_column(
        String(10), default=RegistrationStatus.PENDENTE, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC), index=True
    )

    # Relationships
    unit: Mapped["Unit"] = relationship(back_populates="registrations")
