"""Tests for PDF and spreadsheet rendering."""

from datetime import date, datetime
from io import BytesIO

import pytest
from factories import reading_entity, unit_entity
from openpyxl import load_workbook

from condoflow.models.enums import UtilityType
from condoflow.schemas.reconciliation import ReferenceMonth
from condoflow.schemas.report import MonthlyReport, ReportFormat, ReportTable
from condoflow.services.export import (
    render_individual_pdf,
    render_monthly_pdf,
    render_monthly_xlsx,
)
from condoflow.services.reports import (
    EmptyReportError,
    build_individual_report,
    build_monthly_report,
)

JAN_2026 = ReferenceMonth(month=1, year=2026)


@pytest.fixture
def readings():
    when = datetime(2026, 1, 10)
    return [
        reading_entity(1, 1, UtilityType.WATER, "10", "12.5", when),
        reading_entity(2, 2, UtilityType.WATER, "20", "25", when),
        reading_entity(3, 1, UtilityType.GAS, "3", "4.25", when),
    ]


@pytest.fixture
def units():
    return [unit_entity(1, "101", "A", "João & Maria"), unit_entity(2, "COND. AB")]


class TestMonthlyPdf:
    """Monthly report as PDF."""

    def test_renders_pdf(self, readings, units) -> None:
        """Test that the monthly report renders as a PDF."""
        report = build_monthly_report(readings, units, JAN_2026, "Luci Berkembrock")
        content = render_monthly_pdf(report)
        assert content.startswith(b"%PDF")

    def test_all_tables_empty_raises(self) -> None:
        """Test that a report without rows in any table is refused."""
        report = MonthlyReport(
            title="t",
            month_label="Janeiro de 2026",
            format=ReportFormat.PDF,
            water=ReportTable(type=UtilityType.WATER, heading="a"),
            gas=ReportTable(type=UtilityType.GAS, heading="g"),
        )
        with pytest.raises(EmptyReportError):
            render_monthly_pdf(report)


class TestMonthlySpreadsheet:
    """Workbook layout: title, blank row, header, data."""

    def _workbook(self, readings, units):
        report = build_monthly_report(
            readings, units, JAN_2026, "Luci Berkembrock", ReportFormat.SPREADSHEET
        )
        return load_workbook(BytesIO(render_monthly_xlsx(report)))

    def test_one_sheet_per_utility(self, readings, units) -> None:
        """Test the water and gas sheet names."""
        wb = self._workbook(readings, units)
        assert wb.sheetnames == ["Consumo Água", "Consumo Gás"]

    def test_sheet_layout(self, readings, units) -> None:
        """Test title, header and data rows of a sheet."""
        ws = self._workbook(readings, units)["Consumo Água"]
        assert ws["A1"].value == "Condomínio Luci Berkembrock referente ao mês Janeiro de 2026"
        assert [c.value for c in ws[3]] == ["UNIDADE", "MORADOR", "ANTERIOR", "ATUAL", "CONSUMO"]
        assert [c.value for c in ws[4]] == ["COND. AB", "-", "20.00", "25.00", "5,00"]
        assert [c.value for c in ws[5]] == ["101 A", "João & Maria", "10.00", "12.50", "2,50"]

    def test_empty_utility_keeps_its_sheet(self, readings, units) -> None:
        """Test that a utility without readings still gets a header-only sheet."""
        only_gas = [r for r in readings if r.type == UtilityType.GAS]
        wb = self._workbook(only_gas, units)
        ws = wb["Consumo Água"]
        assert [c.value for c in ws[3]][0] == "UNIDADE"
        assert ws.max_row == 3
        assert wb["Consumo Gás"]["E4"].value == "1,250"


class TestIndividualPdf:
    """One unit's report as PDF."""

    def test_renders_pdf(self, readings, units) -> None:
        """Test that the individual report renders as a PDF."""
        report = build_individual_report(units[0], readings, "Luci Berkembrock", date(2026, 2, 1))
        assert render_individual_pdf(report).startswith(b"%PDF")

    def test_renders_without_rows(self, units) -> None:
        """Test an individual report with no readings."""
        report = build_individual_report(units[1], [], "Luci Berkembrock", date(2026, 2, 1))
        assert render_individual_pdf(report).startswith(b"%PDF")
