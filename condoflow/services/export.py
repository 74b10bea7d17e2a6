"""PDF and spreadsheet rendering of assembled reports."""

import logging
from io import BytesIO
from xml.sax.saxutils import escape

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from condoflow.models.enums import UtilityType
from condoflow.schemas.report import IndividualReport, MonthlyReport, ReportTable
from condoflow.services.reports import EmptyReportError

logger = logging.getLogger(__name__)

UTILITY_COLORS = {
    UtilityType.WATER: colors.Color(0 / 255, 102 / 255, 204 / 255),
    UtilityType.GAS: colors.Color(204 / 255, 82 / 255, 0 / 255),
}
INDIVIDUAL_COLOR = colors.Color(128 / 255, 46 / 255, 83 / 255)
STRIPE_COLOR = colors.Color(0.96, 0.96, 0.96)

SHEET_NAMES = {
    UtilityType.WATER: "Consumo Água",
    UtilityType.GAS: "Consumo Gás",
}
SHEET_COLUMN_WIDTHS = (10, 30, 10, 10, 10)


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ReportTitle", parent=base["Heading2"], fontName="Helvetica-Bold", fontSize=16,
            leading=20, textColor=colors.black,
        ),
        "heading": ParagraphStyle(
            "ReportHeading", parent=base["Normal"], fontName="Helvetica", fontSize=12, leading=16,
        ),
    }


def _document(buffer: BytesIO) -> SimpleDocTemplate:
    return SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=14 * mm,
        bottomMargin=14 * mm,
    )


def _data_table(
    columns: list[str],
    rows: list[list[str]],
    accent: colors.Color,
    striped: bool = True,
    emphasize_first_and_last: bool = True,
) -> Table:
    table = Table([columns, *rows], repeatRows=1)
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), accent),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]
    if striped:
        style.append(("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, STRIPE_COLOR]))
    else:
        style.append(("GRID", (0, 0), (-1, -1), 0.5, colors.grey))
    if emphasize_first_and_last and rows:
        style += [
            ("FONTNAME", (0, 1), (0, -1), "Helvetica-Bold"),
            ("FONTNAME", (-1, 1), (-1, -1), "Helvetica-Bold"),
            ("TEXTCOLOR", (-1, 1), (-1, -1), accent),
        ]
    table.setStyle(TableStyle(style))
    return table


def render_monthly_pdf(report: MonthlyReport) -> bytes:
    """One page per utility; a utility without rows gets no page at all."""
    tables: list[ReportTable] = [t for t in report.tables if not t.is_empty]
    if not tables:
        raise EmptyReportError()

    styles = _styles()
    story = []
    for index, table in enumerate(tables):
        if index:
            story.append(PageBreak())
        accent = UTILITY_COLORS[table.type]
        heading_style = ParagraphStyle(
            f"Heading{table.type.value}", parent=styles["heading"], textColor=accent
        )
        story += [
            Paragraph(escape(report.title), styles["title"]),
            Spacer(1, 4 * mm),
            Paragraph(escape(table.heading), heading_style),
            Spacer(1, 4 * mm),
            _data_table(table.columns, table.rows, accent),
        ]

    buffer = BytesIO()
    _document(buffer).build(story)
    logger.info(
        "Rendered monthly PDF for %s (%s)",
        report.month_label,
        ", ".join(f"{t.type.value}={len(t.rows)}" for t in tables),
    )
    return buffer.getvalue()


def render_monthly_xlsx(report: MonthlyReport) -> bytes:
    """Workbook with a water and a gas sheet; empty sheets are kept."""
    wb = Workbook()
    wb.remove(wb.active)

    for table in report.tables:
        ws = wb.create_sheet(SHEET_NAMES[table.type])
        ws.append([report.title])
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(table.columns))
        ws["A1"].font = Font(bold=True, size=12)
        ws["A1"].alignment = Alignment(horizontal="center")

        ws.append([])
        ws.append(table.columns)
        header_fill = PatternFill("solid", fgColor="D9E1F2")
        for cell in ws[3]:
            cell.font = Font(bold=True)
            cell.fill = header_fill

        for row in table.rows:
            ws.append(row)

        for column_letter, width in zip("ABCDE", SHEET_COLUMN_WIDTHS):
            ws.column_dimensions[column_letter].width = width

    buffer = BytesIO()
    wb.save(buffer)
    logger.info(
        "Rendered monthly spreadsheet for %s (%s)",
        report.month_label,
        ", ".join(f"{t.type.value}={len(t.rows)}" for t in report.tables),
    )
    return buffer.getvalue()


def render_individual_pdf(report: IndividualReport) -> bytes:
    styles = _styles()
    detail_style = ParagraphStyle(
        "IndividualDetail", parent=styles["heading"], textColor=colors.Color(0.39, 0.39, 0.39)
    )
    story = [
        Paragraph(escape(report.title), styles["title"]),
        Spacer(1, 4 * mm),
        Paragraph(escape(report.unit_heading), detail_style),
        Paragraph(escape(report.resident_line), detail_style),
        Spacer(1, 4 * mm),
        _data_table(
            report.columns,
            report.rows,
            INDIVIDUAL_COLOR,
            striped=False,
            emphasize_first_and_last=False,
        ),
    ]

    buffer = BytesIO()
    _document(buffer).build(story)
    logger.info("Rendered individual PDF for unit %s (%d rows)", report.unit_number, len(report.rows))
    return buffer.getvalue()
