"""Tests for session history endpoints."""

import csv
import io
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook
from sqlalchemy.ext.asyncio import AsyncSession

from cashledger.api.session_history import get_repository
from cashledger.core.errors import StoreUnavailableError
from tests.factories import CashierSessionFactory


@pytest.fixture
async def sample_sessions(db_session: AsyncSession):
    """One closed and one open session on different days."""
    closed = await CashierSessionFactory.create(
        db_session,
        employee_name="Ani",
        opened_at=datetime(2024, 1, 1, 8, 0),
        closed_at=datetime(2024, 1, 1, 17, 0),
        starting_cash=Decimal("100000.00"),
        total_sales=Decimal("5200.00"),
        ending_cash=Decimal("105000.00"),
    )
    opened = await CashierSessionFactory.create(
        db_session,
        employee_name="Budi",
        opened_at=datetime(2024, 1, 6, 0, 0, 1),
        starting_cash=Decimal("50000.00"),
        total_sales=Decimal("800.00"),
    )
    return closed, opened


class TestListSessionHistory:
    """GET /api/session-history"""

    async def test_lists_newest_first_with_summary(self, client: AsyncClient, sample_sessions):
        response = await client.get("/api/session-history")

        assert response.status_code == 200
        data = response.json()
        assert [s["user_name"] for s in data["sessions"]] == ["Budi", "Ani"]
        assert data["summary"]["session_count"] == 2
        assert Decimal(data["summary"]["total_sales"]) == Decimal("6000.00")
        assert Decimal(data["summary"]["average_variance"]) == Decimal("-200.00")

    async def test_sessions_include_derived_fields(self, client: AsyncClient, sample_sessions):
        response = await client.get("/api/session-history", params={"status": "Closed"})

        session = response.json()["sessions"][0]
        assert Decimal(session["expected_cash"]) == Decimal("105200.00")
        assert Decimal(session["variance"]) == Decimal("-200.00")

    async def test_open_filter_average_variance_is_zero(self, client: AsyncClient, sample_sessions):
        response = await client.get("/api/session-history", params={"status": "Open"})

        data = response.json()
        assert [s["user_name"] for s in data["sessions"]] == ["Budi"]
        assert Decimal(data["summary"]["average_variance"]) == 0

    async def test_date_and_text_filters(self, client: AsyncClient, sample_sessions):
        response = await client.get(
            "/api/session-history",
            params={"date_to": "2024-01-05", "q": "an"},
        )

        assert [s["user_name"] for s in response.json()["sessions"]] == ["Ani"]

    async def test_invalid_status_is_rejected(self, client: AsyncClient):
        response = await client.get("/api/session-history", params={"status": "Pending"})
        assert response.status_code == 422

    async def test_store_unavailable_returns_503(self, client: AsyncClient):
        class DownRepository:
            async def load_all(self):
                raise StoreUnavailableError("load")

        client.test_app.dependency_overrides[get_repository] = lambda: DownRepository()

        response = await client.get("/api/session-history")

        assert response.status_code == 503
        assert response.json()["code"] == "STORE_UNAVAILABLE"


class TestExportSessionHistory:
    """GET /api/session-history/export"""

    async def test_csv_export(self, client: AsyncClient, sample_sessions):
        response = await client.get("/api/session-history/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "session-history-" in response.headers["content-disposition"]
        assert response.headers["content-disposition"].endswith('.csv"')

        rows = list(csv.DictReader(io.StringIO(response.text)))
        assert [r["Cashier"] for r in rows] == ["Budi", "Ani"]
        assert rows[0]["Closed At"] == "-"
        assert Decimal(rows[1]["Variance"]) == Decimal("-200.00")

    async def test_csv_export_respects_filters(self, client: AsyncClient, sample_sessions):
        response = await client.get("/api/session-history/export", params={"status": "Closed"})

        rows = list(csv.DictReader(io.StringIO(response.text)))
        assert len(rows) == 1
        assert rows[0]["Status"] == "Closed"

    async def test_xlsx_export(self, client: AsyncClient, sample_sessions):
        response = await client.get("/api/session-history/export", params={"format": "xlsx"})

        assert response.status_code == 200
        assert "spreadsheet" in response.headers["content-type"]
        assert response.headers["content-disposition"].endswith('.xlsx"')

        ws = load_workbook(io.BytesIO(response.content)).active
        assert ws.max_row == 3
        assert ws.cell(2, 1).value == "Budi"


class TestDetailAndDelete:
    """GET/DELETE /api/session-history/{id}"""

    async def test_get_detail(self, client: AsyncClient, sample_sessions):
        closed, _ = sample_sessions

        response = await client.get(f"/api/session-history/{closed.id}")

        assert response.status_code == 200
        assert response.json()["id"] == str(closed.id)
        assert response.json()["status"] == "Closed"

    async def test_get_unknown_returns_404(self, client: AsyncClient):
        response = await client.get(f"/api/session-history/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_delete_then_list(self, client: AsyncClient, sample_sessions):
        closed, opened = sample_sessions

        response = await client.delete(f"/api/session-history/{closed.id}")
        assert response.status_code == 204

        listing = await client.get("/api/session-history")
        assert [s["id"] for s in listing.json()["sessions"]] == [str(opened.id)]

    async def test_delete_unknown_returns_404(self, client: AsyncClient):
        response = await client.delete(f"/api/session-history/{uuid4()}")
        assert response.status_code == 404
