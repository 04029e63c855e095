"""Spreadsheet export of one session's roster."""
import io
from datetime import date
from typing import Dict, Iterable, List
from zoneinfo import ZoneInfo

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from attendance.core.constants import EXPORT_COLUMNS, EXPORT_SHEET_NAME
from attendance.core.utils import format_local
from attendance.models import AttendanceClaim

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_export_rows(claims: Iterable[AttendanceClaim], tz: ZoneInfo) -> List[Dict[str, str]]:
    """Project claims onto the export columns, one dict per row."""
    rows = []
    for claim in claims:
        rows.append({
            "Student ID": claim.student_id,
            "Name": claim.student_name,
            "Roll Number": claim.roll_number,
            "Time": format_local(claim.timestamp, tz),
            "Status": claim.status,
        })
    return rows


def export_filename(today: date) -> str:
    return f"attendance-{today.isoformat()}.xlsx"


def build_workbook(claims: Iterable[AttendanceClaim], tz: ZoneInfo) -> io.BytesIO:
    """Write the roster to an in-memory .xlsx file."""
    wb = Workbook()
    ws = wb.active
    ws.title = EXPORT_SHEET_NAME

    ws.append(list(EXPORT_COLUMNS))
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")

    for row in build_export_rows(claims, tz):
        ws.append([row[column] for column in EXPORT_COLUMNS])

    for column_cells in ws.columns:
        width = max(len(str(cell.value or "")) for cell in column_cells)
        ws.column_dimensions[column_cells[0].column_letter].width = width + 2

    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer
