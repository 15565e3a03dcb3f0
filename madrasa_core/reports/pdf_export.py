# =============================================================================
# madrasa_core/reports/pdf_export.py
# PDF exports (students, fees, attendance, education reports)
# =============================================================================
"""
reportlab exports returning PDF bytes for st.download_button.

Every report is landscape A4 with the madrasa name, a title, the generation
timestamp and a page-number footer. Text uses Helvetica unless a TrueType
font is given (Settings.pdf_font); Urdu names and madrasa titles need one,
such as Noto Nastaliq Urdu, because Helvetica has no Arabic-script glyphs.
"""

from __future__ import annotations
import io
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from madrasa_core.errors.exceptions import ReportExportError
from madrasa_core.logging import get_logger
from madrasa_core.services import analytics

logger = get_logger(__name__)

HEADER_BG = colors.HexColor("#1a365d")
ROW_ALT_BG = colors.HexColor("#f7fafc")
GRID = colors.HexColor("#cbd5e0")

BASE_FONT = "Helvetica"
BASE_BOLD_FONT = "Helvetica-Bold"

STATUS_COLORS = {
    "paid": colors.HexColor("#22c55e"),
    "pending": colors.HexColor("#eab308"),
    "overdue": colors.HexColor("#ef4444"),
    "partial": colors.HexColor("#3b82f6"),
    "present": colors.HexColor("#22c55e"),
    "absent": colors.HexColor("#ef4444"),
    "late": colors.HexColor("#eab308"),
    "excused": colors.HexColor("#3b82f6"),
}


def _text(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value)


def _date_text(value: Any) -> str:
    if not value:
        return ""
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return _text(value)
    return parsed.strftime("%d/%m/%Y")


def _money(value: Any) -> str:
    try:
        return f"{float(value):,.2f}"
    except (TypeError, ValueError):
        return _text(value)


def _in_range(value: Any, start: Optional[date], end: Optional[date]) -> bool:
    if start is None and end is None:
        return True
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return False
    day = parsed.date()
    return (start is None or day >= start) and (end is None or day <= end)


def register_font(path: Optional[Path]) -> Optional[str]:
    """
    Register a TrueType font (e.g. Noto Nastaliq Urdu) with reportlab.

    Returns:
        The registered font name, or None when path is unset or the file
        cannot be loaded; reports then fall back to Helvetica
    """
    if not path:
        return None
    path = Path(path)
    name = f"Madrasa-{path.stem}"
    if name in pdfmetrics.getRegisteredFontNames():
        return name
    if not path.is_file():
        logger.warning(f"PDF font {path} not found, using {BASE_FONT}")
        return None
    try:
        pdfmetrics.registerFont(TTFont(name, str(path)))
    except Exception as e:
        logger.warning(f"Could not load PDF font {path}: {e}")
        return None
    logger.info(f"Registered PDF font {name} from {path}")
    return name


class ReportBuilder:
    """
    Shared layout for every report.

    Usage:
        builder = ReportBuilder("Jamia Islamia", font_path=settings.pdf_font)
        pdf = builder.build("Students List", [table])
    """

    def __init__(self, madrasa_name: Optional[str] = None, font_path: Optional[Path] = None):
        self.madrasa_name = madrasa_name or "Madrasa"
        custom = register_font(font_path)
        self.font = custom or BASE_FONT
        self.bold_font = custom or BASE_BOLD_FONT
        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "ReportMadrasa",
            parent=styles["Heading1"],
            fontName=self.bold_font,
            fontSize=18,
            textColor=HEADER_BG,
            alignment=TA_CENTER,
            spaceAfter=4,
        )
        self.subtitle_style = ParagraphStyle(
            "ReportTitle",
            parent=styles["Heading2"],
            fontName=self.bold_font,
            fontSize=14,
            alignment=TA_CENTER,
            spaceAfter=4,
        )
        self.small_style = ParagraphStyle(
            "ReportSmall",
            parent=styles["Normal"],
            fontName=self.font,
            fontSize=9,
            textColor=colors.HexColor("#4a5568"),
            alignment=TA_CENTER,
            spaceAfter=2,
        )
        self.section_style = ParagraphStyle(
            "ReportSection",
            parent=styles["Heading3"],
            fontName=self.bold_font,
            fontSize=12,
            spaceBefore=10,
            spaceAfter=6,
        )

    def table(
        self,
        header: Sequence[str],
        rows: Sequence[Sequence[Any]],
        status_column: Optional[int] = None,
        col_widths: Optional[Sequence[float]] = None,
    ) -> Table:
        """Striped grid table; status_column cells are coloured by value."""
        data = [list(header)] + [[_text(cell) for cell in row] for row in rows]
        table = Table(data, colWidths=col_widths, repeatRows=1)
        style = [
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), self.bold_font),
            ("FONTNAME", (0, 1), (-1, -1), self.font),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("ALIGN", (0, 0), (-1, -1), "CENTER"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("GRID", (0, 0), (-1, -1), 0.5, GRID),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]
        for index in range(1, len(data)):
            if index % 2 == 0:
                style.append(("BACKGROUND", (0, index), (-1, index), ROW_ALT_BG))
            if status_column is not None:
                colour = STATUS_COLORS.get(str(rows[index - 1][status_column]).lower())
                if colour is not None:
                    style.append(("TEXTCOLOR", (status_column, index), (status_column, index), colour))
        table.setStyle(TableStyle(style))
        return table

    def section(self, title: str) -> Paragraph:
        return Paragraph(escape(title), self.section_style)

    def build(
        self,
        title: str,
        flowables: List[Any],
        period: Optional[Tuple[Optional[date], Optional[date]]] = None,
    ) -> bytes:
        """Render header + flowables + page footer into PDF bytes."""
        generated = datetime.now()
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=landscape(A4),
            rightMargin=1 * cm,
            leftMargin=1 * cm,
            topMargin=1 * cm,
            bottomMargin=1.5 * cm,
            title=title,
        )

        content: List[Any] = [
            Paragraph(escape(self.madrasa_name), self.title_style),
            Paragraph(escape(title), self.subtitle_style),
        ]
        if period and (period[0] or period[1]):
            start, end = period
            content.append(Paragraph(
                f"Period: {_date_text(start) or '...'} - {_date_text(end) or '...'}", self.small_style
            ))
        content.append(Paragraph(f"Generated: {generated.strftime('%d/%m/%Y - %H:%M:%S')}", self.small_style))
        content.append(Spacer(1, 12))
        content.extend(flowables)

        footer = self._footer(generated)
        try:
            doc.build(content, onFirstPage=footer, onLaterPages=footer)
        except Exception as e:
            logger.error(f"Error generating PDF '{title}': {e}", exc_info=True)
            raise ReportExportError(f"Could not generate {title}: {e}", report=title) from e

        pdf_bytes = buffer.getvalue()
        buffer.close()
        logger.info(f"Generated PDF '{title}' ({len(pdf_bytes)} bytes)")
        return pdf_bytes

    def _footer(self, generated: datetime) -> Callable:
        madrasa = self.madrasa_name
        font = self.font

        def draw(canvas, doc) -> None:
            canvas.saveState()
            canvas.setFont(font, 8)
            canvas.setFillColor(colors.HexColor("#718096"))
            width = doc.pagesize[0]
            canvas.drawCentredString(width / 2, 0.7 * cm, f"Page {doc.page}")
            canvas.drawString(1 * cm, 0.7 * cm, madrasa)
            canvas.drawRightString(width - 1 * cm, 0.7 * cm, generated.strftime("%d/%m/%Y"))
            canvas.restoreState()

        return draw


# =============================================================================
# REPORTS
# =============================================================================

def export_students_pdf(
    students: analytics.Rows,
    classes: analytics.Rows = None,
    madrasa_name: Optional[str] = None,
    font_path: Optional[Path] = None,
) -> bytes:
    """Students list: name, father, class, admission date, contact, status."""
    builder = ReportBuilder(madrasa_name, font_path)
    class_names = analytics.lookup_names(classes)
    rows = []
    for index, student in enumerate(analytics.to_frame(students).to_dict("records"), start=1):
        rows.append([
            index,
            student.get("name"),
            student.get("father_name"),
            class_names.get(_text(student.get("class_id")), ""),
            _date_text(student.get("admission_date")),
            student.get("contact"),
            student.get("status"),
        ])

    flowables = [
        builder.table(["#", "Name", "Father's Name", "Class", "Admission Date", "Contact", "Status"], rows),
        Spacer(1, 8),
        Paragraph(f"Total students: {len(rows)}", builder.small_style),
    ]
    return builder.build("Students List", flowables)


def export_fees_pdf(
    fees: analytics.Rows,
    students: analytics.Rows = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    madrasa_name: Optional[str] = None,
    font_path: Optional[Path] = None,
) -> bytes:
    """Financial report: totals by status, then every fee due in the period."""
    builder = ReportBuilder(madrasa_name, font_path)
    names = analytics.lookup_names(students)
    selected = [
        fee for fee in analytics.to_frame(fees).to_dict("records")
        if _in_range(fee.get("due_date"), start, end)
    ]
    summary = analytics.fee_summary(selected)

    summary_table = builder.table(
        ["Total", "Paid", "Pending", "Overdue", "Partial", "Collection Rate"],
        [[
            _money(summary["total_amount"]),
            _money(summary["paid_amount"]),
            _money(summary["pending_amount"]),
            _money(summary["overdue_amount"]),
            _money(summary["partial_amount"]),
            f"{summary['collection_rate']}%",
        ]],
    )

    rows = [
        [
            names.get(_text(fee.get("student_id")), "Unknown"),
            fee.get("fee_type"),
            _money(fee.get("amount")),
            _date_text(fee.get("due_date")),
            fee.get("status"),
            fee.get("academic_year"),
        ]
        for fee in selected
    ]
    detail_table = builder.table(
        ["Student", "Fee Type", "Amount", "Due Date", "Status", "Academic Year"], rows, status_column=4
    )

    flowables = [builder.section("Summary"), summary_table, builder.section("Fees"), detail_table]
    return builder.build("Financial Report", flowables, period=(start, end))


def export_attendance_pdf(
    attendance: analytics.Rows,
    students: analytics.Rows = None,
    classes: analytics.Rows = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    madrasa_name: Optional[str] = None,
    font_path: Optional[Path] = None,
) -> bytes:
    """Attendance report: per-student summary and daily records in the range."""
    builder = ReportBuilder(madrasa_name, font_path)
    student_names = analytics.lookup_names(students)
    class_names = analytics.lookup_names(classes)

    summary = analytics.attendance_summary(attendance, students, start, end)
    summary_rows = [
        [row["name"], row["present"], row["absent"], row["late"], row["excused"], row["total"], f"{row['rate']}%"]
        for row in summary.to_dict("records")
    ]

    records = [
        record for record in analytics.to_frame(attendance).to_dict("records")
        if _in_range(record.get("date"), start, end)
    ]
    records.sort(key=lambda r: _text(r.get("date")))
    detail_rows = [
        [
            _date_text(record.get("date")),
            student_names.get(_text(record.get("student_id")), "Unknown"),
            class_names.get(_text(record.get("class_id")), ""),
            record.get("status"),
            record.get("time"),
            record.get("noted_by"),
        ]
        for record in records
    ]

    flowables = [
        builder.section("Summary"),
        builder.table(["Student", "Present", "Absent", "Late", "Excused", "Total", "Rate"], summary_rows),
        builder.section("Daily records"),
        builder.table(["Date", "Student", "Class", "Status", "Time", "Noted By"], detail_rows, status_column=3),
    ]
    return builder.build("Attendance Report", flowables, period=(start, end))


def _part(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def export_education_pdf(
    reports: analytics.Rows,
    students: analytics.Rows = None,
    classes: analytics.Rows = None,
    student_id: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    madrasa_name: Optional[str] = None,
    font_path: Optional[Path] = None,
) -> bytes:
    """Education report: sabak / sabqi / manzil progress, optionally for one student."""
    builder = ReportBuilder(madrasa_name, font_path)
    student_names = analytics.lookup_names(students)
    class_names = analytics.lookup_names(classes)

    selected = [
        report for report in analytics.to_frame(reports).to_dict("records")
        if (student_id is None or _text(report.get("student_id")) == str(student_id))
        and _in_range(report.get("date"), start, end)
    ]
    selected.sort(key=lambda r: _text(r.get("date")))

    rows = []
    for report in selected:
        sabak, sabqi, manzil = _part(report.get("sabak")), _part(report.get("sabqi")), _part(report.get("manzil"))
        rows.append([
            _date_text(report.get("date")),
            student_names.get(_text(report.get("student_id")), "Unknown"),
            report.get("father_name"),
            class_names.get(_text(report.get("class_id")), ""),
            f"Para {_text(sabak.get('para_no'))} {_text(sabak.get('amount'))}".strip(),
            ("Yes" if sabqi.get("recited") else "No") + (f" {_text(sabqi.get('amount'))}" if sabqi.get("amount") else ""),
            _text(sabqi.get("heard_by")),
            _text(manzil.get("number")),
            _text(manzil.get("heard_by")),
            report.get("remarks"),
        ])

    title = "Education Report"
    if student_id is not None:
        title = f"Education Report - {student_names.get(str(student_id), 'Unknown')}"

    flowables = [
        builder.table(
            ["Date", "Student", "Father", "Class", "Sabak", "Sabqi", "Sabqi Heard By",
             "Manzil", "Manzil Heard By", "Remarks"],
            rows,
        ),
    ]
    return builder.build(title, flowables, period=(start, end))
