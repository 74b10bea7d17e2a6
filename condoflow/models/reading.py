"""Reading database model - the monthly ledger."""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from condoflow.core.database import Base
from condoflow.models.enums import ReadingStatus, UtilityType

if TYPE_CHECKING:
    from condoflow.models.unit import Unit


class Reading(Base):
    """Water or gas meter entry for a unit in a billing month.

    The billing month is derived from ``date``; at most one reading per
    (unit, type, month) is kept by the upsert in the store, not by a constraint.
    """

    __tablename__ = "readings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    unit_id: Mapped[int] = mapped_column(
        ForeignKey("units.id", ondelete="CASCADE"), index=True
    )
    type: Mapped[UtilityType] = mapped_column(String(10), index=True)

    # Meter values (using Decimal for precision)
    previous_value: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=3))
    current_value: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=12, scale=3), nullable=True
    )

    date: Mapped[datetime] = mapped_column(index=True)  # Anchors the billing month
    status: Mapped[ReadingStatus] = mapped_column(String(10), default=ReadingStatus.PENDENTE)
    alert_message: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Relationships
    unit: Mapped["Unit"] = relationship(back_populates="readings")
