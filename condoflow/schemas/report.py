"""Row-oriented report tables handed to the export sinks."""

from enum import Enum

from pydantic import BaseModel, Field

from condoflow.models.enums import UtilityType

MONTHLY_COLUMNS = ["UNIDADE", "MORADOR", "ANTERIOR", "ATUAL", "CONSUMO"]
INDIVIDUAL_COLUMNS = ["DATA", "TIPO", "ANTERIOR", "ATUAL", "CONSUMO"]


class ReportFormat(str, Enum):
    """Output format; decides the decimal separator of the consumption column."""

    PDF = "pdf"
    SPREADSHEET = "xlsx"


class ReportTable(BaseModel):
    """One utility's table: already sorted, already formatted."""

    type: UtilityType
    heading: str
    columns: list[str] = Field(default_factory=lambda: list(MONTHLY_COLUMNS))
    rows: list[list[str]] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows


class MonthlyReport(BaseModel):
    """Monthly (optionally type-filtered) report."""

    title: str
    month_label: str
    format: ReportFormat
    water: ReportTable
    gas: ReportTable

    @property
    def tables(self) -> list[ReportTable]:
        return [self.water, self.gas]


class IndividualReport(BaseModel):
    """Single-unit report over its readings or a date range."""

    title: str
    unit_heading: str
    resident_line: str
    unit_number: str
    columns: list[str] = Field(default_factory=lambda: list(INDIVIDUAL_COLUMNS))
    rows: list[list[str]] = Field(default_factory=list)
