"""CSV / XLSX / PDF export of list results."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any
from xml.sax.saxutils import escape

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy.orm import Session

from campaign.errors import ValidationError
from campaign.models.base import utcnow
from campaign.services.audit_service import log_activity
from campaign.utils.dates import format_br_date, format_br_datetime
from campaign.utils.query import ListFilters

EXPORT_FORMATS = ("csv", "xlsx", "pdf")

MIMETYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}


@dataclass(frozen=True)
class ExportColumn:
    key: str
    header: str
    width: int = 20

    @property
    def is_date(self) -> bool:
        return self.key.endswith("_at") or self.key == "birthday" or "date" in self.key


@dataclass(frozen=True)
class ExportFile:
    content: bytes
    mimetype: str
    filename: str


def _value(row: Any, key: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(key)
    return getattr(row, key, None)


def _bool_text(value: bool) -> str:
    return "Sim" if value else "Não"


def generate_csv(rows: Iterable[Any], columns: Sequence[ExportColumn]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([c.header for c in columns])
    for row in rows:
        out = []
        for column in columns:
            value = _value(row, column.key)
            if isinstance(value, bool):
                out.append(_bool_text(value))
            elif isinstance(value, (datetime, date)):
                out.append(value.isoformat())
            elif value is None:
                out.append("")
            else:
                out.append(value)
        writer.writerow(out)
    return buffer.getvalue().encode("utf-8")


def generate_xlsx(rows: Iterable[Any], columns: Sequence[ExportColumn]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Export Data"

    sheet.append([c.header for c in columns])
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    for idx, column in enumerate(columns, start=1):
        sheet.column_dimensions[get_column_letter(idx)].width = column.width

    for row in rows:
        out = []
        for column in columns:
            value = _value(row, column.key)
            if column.is_date:
                out.append(format_br_datetime(value) if isinstance(value, (datetime, date)) else "")
            elif isinstance(value, bool):
                out.append(_bool_text(value))
            else:
                out.append(value)
        sheet.append(out)

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _period_text(filters: Mapping[str, Any]) -> str:
    def _fmt(raw: Any) -> str:
        return format_br_date(datetime.fromisoformat(raw) if isinstance(raw, str) else raw)

    start, end = filters.get("startDate"), filters.get("endDate")
    if start and end:
        return f"{_fmt(start)} até {_fmt(end)}"
    if start:
        return f"A partir de {_fmt(start)}"
    if end:
        return f"Até {_fmt(end)}"
    return "Todos os períodos"


def generate_pdf(
    rows: Sequence[Any],
    columns: Sequence[ExportColumn],
    filters: Mapping[str, Any],
    title: str,
) -> bytes:
    styles = getSampleStyleSheet()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=20 * mm,
        bottomMargin=20 * mm,
        title=title,
    )

    story: list[Any] = [
        Paragraph(f"Relatório de {title}", styles["Title"]),
        Paragraph("Informações do Relatório", styles["Heading3"]),
        Paragraph(f"Total de registros: {len(rows)}", styles["Normal"]),
        Paragraph(f"Período: {_period_text(filters)}", styles["Normal"]),
    ]
    active = [f'{k}: "{v}"' for k, v in (filters.get("search") or {}).items() if str(v).strip()]
    if active:
        story.append(Paragraph(escape(f"Filtros aplicados: {', '.join(active)}"), styles["Normal"]))
    story.append(Paragraph(f"Gerado em: {format_br_datetime(utcnow())}", styles["Normal"]))
    story.append(Spacer(1, 6 * mm))

    cell_style = styles["BodyText"]
    cell_style.fontSize = 7
    cell_style.leading = 9

    data: list[list[Any]] = [[c.header for c in columns]]
    for row in rows:
        out = []
        for column in columns:
            value = _value(row, column.key)
            if column.is_date:
                text = format_br_date(value) if isinstance(value, (datetime, date)) else "-"
            elif isinstance(value, bool):
                text = _bool_text(value)
            elif value is None:
                text = "-"
            else:
                text = str(value)
            out.append(Paragraph(escape(text), cell_style))
        data.append(out)

    total_width = sum(c.width for c in columns) or 1
    col_widths = [doc.width * c.width / total_width for c in columns]
    table = Table(data, colWidths=col_widths, repeatRows=1)

    style = TableStyle(
        [
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#eeeeee")),
            ("FONT", (0, 0), (-1, 0), "Helvetica-Bold", 8),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("INNERGRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#cccccc")),
            ("BOX", (0, 0), (-1, -1), 0.5, colors.HexColor("#999999")),
        ]
    )
    for idx in range(2, len(data), 2):
        style.add("BACKGROUND", (0, idx), (-1, idx), colors.HexColor("#f9f9f9"))
    table.setStyle(style)
    story.append(table)

    doc.build(story)
    return buffer.getvalue()


def build_export(
    fmt: str,
    rows: Sequence[Any],
    columns: Sequence[ExportColumn],
    *,
    name: str,
    filters: Mapping[str, Any] | None = None,
) -> ExportFile:
    fmt = (fmt or "csv").lower()
    if fmt == "csv":
        content = generate_csv(rows, columns)
    elif fmt == "xlsx":
        content = generate_xlsx(rows, columns)
    elif fmt == "pdf":
        content = generate_pdf(rows, columns, filters or {}, name.replace("_", " ").capitalize())
    else:
        raise ValidationError("Formato de exportação inválido.", details={"format": fmt})
    return ExportFile(content=content, mimetype=MIMETYPES[fmt], filename=f"{name}_export.{fmt}")


def export_rows(
    session: Session,
    fmt: str,
    rows: Sequence[Any],
    columns: Sequence[ExportColumn],
    *,
    name: str,
    filters: ListFilters,
    user_id: int | None,
) -> ExportFile:
    """Build the file and record who exported what."""

    export = build_export(fmt, rows, columns, name=name, filters=filters.describe())
    log_activity(
        session,
        user_id,
        f"EXPORT_{name.upper()}",
        f"{name}_export",
        None,
        {"filters": filters.describe(), "format": fmt, "exported_count": len(rows)},
    )
    return export
