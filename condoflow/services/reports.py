"""Report assembly: turns readings into sorted, formatted tables.

The tables produced here are consumed by the PDF and spreadsheet sinks in
``condoflow.services.export``; nothing in this module renders files.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from condoflow.models.enums import UtilityType
from condoflow.schemas.reading import ReadingResponse
from condoflow.schemas.reconciliation import ReferenceMonth
from condoflow.schemas.report import (
    IndividualReport,
    MonthlyReport,
    ReportFormat,
    ReportTable,
)
from condoflow.schemas.unit import UnitResponse
from condoflow.services.ordering import sort_readings_by_unit, unit_label
from condoflow.services.reconciliation import readings_in_month

EMPTY_REPORT_MESSAGE = "Nenhum registro encontrado para o mês selecionado."
MISSING = "-"


class EmptyReportError(Exception):
    """No readings match the requested period; raised before anything is rendered."""

    def __init__(self, message: str = EMPTY_REPORT_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


def format_value(value: Decimal, precision: int, decimal_separator: str = ".") -> str:
    """Fixed-point text with half-up rounding."""
    quantum = Decimal(1).scaleb(-precision)
    text = f"{value.quantize(quantum, rounding=ROUND_HALF_UP):f}"
    if decimal_separator != ".":
        text = text.replace(".", decimal_separator)
    return text


def report_title(condominium_name: str, period: str) -> str:
    return f"Condomínio {condominium_name} {period}"


def monthly_readings(
    readings: Iterable[ReadingResponse],
    reference: ReferenceMonth,
    utility_type: UtilityType | None = None,
) -> list[ReadingResponse]:
    """Readings of the month, optionally restricted to one utility."""
    return [
        r
        for r in readings_in_month(readings, reference)
        if utility_type is None or r.type == utility_type
    ]


def _value_columns(
    reading: ReadingResponse,
    consumption_separator: str = ".",
) -> list[str]:
    precision = UtilityType(reading.type).precision
    previous = reading.previous_value or Decimal("0")
    current = reading.current_value or Decimal("0")
    return [
        format_value(previous, precision),
        format_value(current, precision),
        format_value(current - previous, precision, consumption_separator),
    ]


def _monthly_table(
    utility_type: UtilityType,
    readings: Sequence[ReadingResponse],
    units_by_id: dict[int, UnitResponse],
    report_format: ReportFormat,
) -> ReportTable:
    separator = "," if report_format is ReportFormat.SPREADSHEET else "."
    rows = []
    for reading in sort_readings_by_unit(
        (r for r in readings if r.type == utility_type), units_by_id
    ):
        unit = units_by_id.get(reading.unit_id)
        rows.append(
            [
                unit_label(unit) if unit else MISSING,
                (unit.resident_name if unit else "") or MISSING,
                *_value_columns(reading, separator),
            ]
        )
    return ReportTable(
        type=utility_type,
        heading=f"Relatório de Consumo - {utility_type.label}",
        rows=rows,
    )


def build_monthly_report(
    readings: Sequence[ReadingResponse],
    units: Iterable[UnitResponse],
    reference: ReferenceMonth,
    condominium_name: str,
    report_format: ReportFormat = ReportFormat.PDF,
) -> MonthlyReport:
    """Water and gas tables for readings already limited to one month.

    Raises EmptyReportError when there is nothing to report.
    """
    if not readings:
        raise EmptyReportError()

    units_by_id = {unit.id: unit for unit in units}
    return MonthlyReport(
        title=report_title(condominium_name, f"referente ao mês {reference.label}"),
        month_label=reference.label,
        format=report_format,
        water=_monthly_table(UtilityType.WATER, readings, units_by_id, report_format),
        gas=_monthly_table(UtilityType.GAS, readings, units_by_id, report_format),
    )


def individual_period(
    start: date | None,
    end: date | None,
    today: date,
) -> str:
    """Subtitle naming the date range, or the current month when no range is set."""
    if start and end:
        return f"referente ao período {start:%d/%m/%Y} a {end:%d/%m/%Y}"
    return f"referente ao mês {ReferenceMonth.of(today).label}"


def readings_in_range(
    readings: Iterable[ReadingResponse],
    start: date | None,
    end: date | None,
) -> list[ReadingResponse]:
    """Inclusive day range; applied only when both bounds are given."""
    if not (start and end):
        return list(readings)
    return [r for r in readings if start <= _as_date(r.date) <= end]


def _as_date(moment: date | datetime) -> date:
    return moment.date() if isinstance(moment, datetime) else moment


def build_individual_report(
    unit: UnitResponse,
    readings: Iterable[ReadingResponse],
    condominium_name: str,
    today: date,
    start: date | None = None,
    end: date | None = None,
) -> IndividualReport:
    """One row per reading of the unit, in the order the ledger returned them."""
    rows = []
    for reading in readings_in_range(
        (r for r in readings if r.unit_id == unit.id), start, end
    ):
        rows.append(
            [
                f"{reading.date:%d/%m/%Y}",
                UtilityType(reading.type).label,
                *_value_columns(reading),
            ]
        )
    return IndividualReport(
        title=report_title(condominium_name, individual_period(start, end, today)),
        unit_heading=f"Relatório Individual - Apto {unit.number} {unit.block}".rstrip(),
        resident_line=f"Morador: {unit.resident_name}",
        unit_number=unit.number,
        rows=rows,
    )
