"""Export Transformer: visible sessions to CSV / Excel for download."""

import csv
import io
import os
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Sequence

from babel.dates import format_datetime
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from cashledger.models import SessionRecord
from cashledger.utils.datetime import today_local

EXPORT_LOCALE = os.getenv("EXPORT_LOCALE", "id_ID")

NOT_CLOSED_PLACEHOLDER = "-"

EXPORT_HEADERS = [
    "Cashier",
    "Opened At",
    "Closed At",
    "Starting Cash",
    "Total Sales",
    "Ending Cash",
    "Variance",
    "Status",
]

# Starting Cash through Variance (1-based, for Excel formatting)
CURRENCY_COLUMNS = range(4, 8)


def _format_timestamp(value: datetime | None, locale: str) -> str:
    if value is None:
        return NOT_CLOSED_PLACEHOLDER
    return format_datetime(value, format="medium", locale=locale)


def _format_number(value: Decimal) -> str:
    """Plain machine-readable number: no grouping, no currency symbol."""
    return format(value, "f")


def session_to_row(
    session: SessionRecord,
    format_type: Literal["csv", "excel"] = "csv",
    locale: str = EXPORT_LOCALE,
) -> list:
    """Convert a session to an export row in EXPORT_HEADERS order."""
    ending_cash = session.ending_cash if session.ending_cash is not None else Decimal("0")
    variance = session.variance if session.variance is not None else Decimal("0")

    if format_type == "csv":
        format_num = _format_number
    else:
        # Excel gets raw numbers so cells stay numeric
        def format_num(x):
            return float(x)

    return [
        session.user_name,
        _format_timestamp(session.opened_at, locale),
        _format_timestamp(session.closed_at, locale),
        format_num(session.starting_cash),
        format_num(session.total_sales),
        format_num(ending_cash),
        format_num(variance),
        session.status.value,
    ]


def to_delimited_text(sessions: Sequence[SessionRecord], locale: str = EXPORT_LOCALE) -> str:
    """Render sessions as CSV: header row, one row per session, '\\n' after every row.

    Fields containing commas, quotes or newlines are quoted (RFC 4180).
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow(EXPORT_HEADERS)
    for session in sessions:
        writer.writerow(session_to_row(session, format_type="csv", locale=locale))

    return output.getvalue()


def to_xlsx(sessions: Sequence[SessionRecord], locale: str = EXPORT_LOCALE) -> bytes:
    """Render sessions as an Excel workbook with a styled, frozen header row."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Session History"

    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")

    for col_idx, header in enumerate(EXPORT_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row_idx, session in enumerate(sessions, start=2):
        row_data = session_to_row(session, format_type="excel", locale=locale)
        for col_idx, value in enumerate(row_data, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if col_idx in CURRENCY_COLUMNS:
                cell.number_format = "#,##0.00"

    # Auto-adjust column widths (sample first 100 rows)
    for col_idx, header in enumerate(EXPORT_HEADERS, start=1):
        max_length = len(header)
        for row_idx in range(2, min(102, len(sessions) + 2)):
            cell_value = ws.cell(row=row_idx, column=col_idx).value
            if cell_value is not None:
                max_length = max(max_length, len(str(cell_value)))
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max_length + 2, 50)

    ws.freeze_panes = "A2"

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def export_filename(extension: str = "csv", on: date | None = None) -> str:
    """session-history-YYYY-MM-DD.<extension>, dated with the export day."""
    export_date = on or today_local()
    return f"session-history-{export_date.isoformat()}.{extension}"
