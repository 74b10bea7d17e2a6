"""Reference month, reconciliation and dashboard schemas."""

import calendar
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, computed_field

from condoflow.models.enums import UtilityType
from condoflow.schemas.unit import UnitResponse

MONTH_NAMES_PT = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

# Years accepted from callers; the neighbouring months stay inside ReferenceMonth bounds
MIN_YEAR = 1901
MAX_YEAR = 9998


class ReferenceMonth(BaseModel):
    """(month, year) scope for every reconciliation query."""

    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1900, le=9999)

    model_config = {"frozen": True}

    @classmethod
    def of(cls, moment: date | datetime) -> "ReferenceMonth":
        return cls(month=moment.month, year=moment.year)

    @property
    def start(self) -> datetime:
        return datetime(self.year, self.month, 1)

    @property
    def end(self) -> datetime:
        """First instant of the following month (exclusive bound)."""
        return self.next().start

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def previous(self) -> "ReferenceMonth":
        if self.month == 1:
            return ReferenceMonth(month=12, year=self.year - 1)
        return ReferenceMonth(month=self.month - 1, year=self.year)

    def next(self) -> "ReferenceMonth":
        if self.month == 12:
            return ReferenceMonth(month=1, year=self.year + 1)
        return ReferenceMonth(month=self.month + 1, year=self.year)

    def contains(self, moment: date | datetime) -> bool:
        return moment.year == self.year and moment.month == self.month

    @property
    def label(self) -> str:
        """Capitalised Portuguese label, e.g. "Janeiro de 2026"."""
        return f"{MONTH_NAMES_PT[self.month - 1].capitalize()} de {self.year}"


class UnitStatus(BaseModel):
    """Completion of a unit's readings for a reference month."""

    has_water: bool
    has_gas: bool

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_complete(self) -> bool:
        return self.has_water and self.has_gas

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_partial(self) -> bool:
        return self.has_water != self.has_gas

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_pending(self) -> bool:
        return not self.has_water and not self.has_gas

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> str:
        if self.is_complete:
            return "complete"
        if self.is_partial:
            return "partial"
        return "pending"


class UnitStatusEntry(BaseModel):
    """Unit with its label and status for the listing screen."""

    unit: UnitResponse
    label: str
    status: UnitStatus


class RankingEntry(BaseModel):
    """One position of a top-consumption ranking."""

    unit_id: int
    unit_label: str
    consumption: Decimal


class UtilitySummary(BaseModel):
    """Aggregate consumption of one utility for a month and its predecessor."""

    type: UtilityType
    total: Decimal
    previous_total: Decimal
    change_percent: Decimal
    ranking: list[RankingEntry]


class MonthSummary(BaseModel):
    """Reconciliation of a reference month."""

    reference: ReferenceMonth
    water: UtilitySummary
    gas: UtilitySummary
    completion_percent: Decimal
    units_total: int
    units_complete: int
    units_partial: int
    units_pending: int


class UnitStatusListing(BaseModel):
    """Filtered unit listing with the month's completion."""

    reference: ReferenceMonth
    completion_percent: Decimal
    units: list[UnitStatusEntry]


class ConsumptionMetrics(BaseModel):
    """Payload handed to the insight summarizer."""

    total_water: float = Field(serialization_alias="totalWater")
    total_gas: float = Field(serialization_alias="totalGas")
    water_change: float = Field(serialization_alias="waterChange")
    gas_change: float = Field(serialization_alias="gasChange")
    month: str


class DashboardResponse(BaseModel):
    """Month summary plus the natural-language insight."""

    summary: MonthSummary
    insight: str
