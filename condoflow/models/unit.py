"""Unit database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from condoflow.core.database import Base
from condoflow.models.enums import ResidentRole

if TYPE_CHECKING:
    from condoflow.models.reading import Reading
    from condoflow.models.registration import RegistrationRequest


class Unit(Base):
    """Residential unit tracked for metering."""

    __tablename__ = "units"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    number: Mapped[str] = mapped_column(String(20), index=True)  # "101", "COND. AB"
    block: Mapped[str] = mapped_column(String(5), default="")
    resident_name: Mapped[str] = mapped_column(String(255), default="")
    resident_role: Mapped[ResidentRole] = mapped_column(
        String(20), default=ResidentRole.PROPRIETARIO
    )
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    readings: Mapped[list["Reading"]] = relationship(
        back_populates="unit", cascade="all, delete-orphan"
    )
    registrations: Mapped[list["RegistrationRequest"]] = relationship(
        back_populates="unit", cascade="all, delete-orphan"
    )
