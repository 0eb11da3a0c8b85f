"""Tests for session history export."""

import csv
import io
from datetime import date, datetime
from decimal import Decimal

from openpyxl import load_workbook

from cashledger.core.session_export import (
    EXPORT_HEADERS,
    export_filename,
    session_to_row,
    to_delimited_text,
    to_xlsx,
)
from tests.factories import make_record


def _sessions():
    return [
        make_record(
            user_name="Ani",
            opened_at=datetime(2024, 1, 1, 8, 0),
            closed_at=datetime(2024, 1, 1, 17, 0),
            starting_cash=Decimal("100000.00"),
            total_sales=Decimal("5200.00"),
            ending_cash=Decimal("105000.00"),
        ),
        make_record(
            user_name='Budi "Bud", Santoso',
            opened_at=datetime(2024, 1, 2, 8, 0),
            starting_cash=Decimal("50000.00"),
            total_sales=Decimal("1250.50"),
        ),
    ]


class TestDelimitedText:
    """CSV export."""

    def test_header_and_row_count(self):
        text = to_delimited_text(_sessions())
        lines = text.split("\n")

        assert lines[0] == ",".join(EXPORT_HEADERS)
        # Every row is newline-terminated, so the text ends with "\n"
        assert text.endswith("\n")
        assert len(lines) == 2 + 1 + 1

    def test_empty_export_has_only_header(self):
        assert to_delimited_text([]) == ",".join(EXPORT_HEADERS) + "\n"

    def test_round_trip_recovers_fields(self):
        sessions = _sessions()

        rows = list(csv.reader(io.StringIO(to_delimited_text(sessions))))

        assert rows[0] == EXPORT_HEADERS
        assert len(rows) - 1 == len(sessions)
        for session, row in zip(sessions, rows[1:]):
            assert row == session_to_row(session)
            assert row[0] == session.user_name
            assert Decimal(row[3]) == session.starting_cash
            assert Decimal(row[4]) == session.total_sales
            assert row[7] == session.status.value

    def test_names_with_separator_and_quotes_are_quoted(self):
        text = to_delimited_text(_sessions())

        assert '"Budi ""Bud"", Santoso"' in text
        reader = csv.DictReader(io.StringIO(text))
        names = [row["Cashier"] for row in reader]
        assert names == ["Ani", 'Budi "Bud", Santoso']

    def test_closed_session_values(self):
        row = session_to_row(_sessions()[0])

        assert row[5] == "105000.00"
        assert row[6] == "-200.00"
        assert row[7] == "Closed"
        assert "2024" in row[1]
        assert "2024" in row[2]

    def test_open_session_placeholders(self):
        row = session_to_row(_sessions()[1])

        assert row[2] == "-"
        assert Decimal(row[5]) == 0
        assert Decimal(row[6]) == 0
        assert row[7] == "Open"

    def test_numbers_are_plain(self):
        session = make_record(starting_cash=Decimal("1500000.50"), total_sales=Decimal("0"))
        row = session_to_row(session)

        assert row[3] == "1500000.50"
        assert "Rp" not in row[3]

    def test_timestamps_follow_locale(self):
        session = make_record(opened_at=datetime(2024, 3, 9, 14, 5))

        indonesian = session_to_row(session, locale="id_ID")[1]
        english = session_to_row(session, locale="en_US")[1]

        assert indonesian != english
        assert "Mar" in english


class TestXlsx:
    """Excel export."""

    def test_workbook_contents(self):
        content = to_xlsx(_sessions())

        ws = load_workbook(io.BytesIO(content)).active
        assert [cell.value for cell in ws[1]] == EXPORT_HEADERS
        assert ws.max_row == 3
        assert ws.cell(2, 1).value == "Ani"
        assert ws.cell(2, 7).value == -200.0
        assert ws.cell(3, 3).value == "-"


class TestExportFilename:
    """Download file name."""

    def test_embeds_export_date(self):
        assert export_filename("csv", on=date(2024, 1, 31)) == "session-history-2024-01-31.csv"

    def test_defaults_to_today(self):
        assert export_filename("xlsx").startswith("session-history-")
        assert export_filename("xlsx").endswith(".xlsx")
