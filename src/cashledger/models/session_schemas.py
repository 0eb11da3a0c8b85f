# File: src/cashledger/models/session_schemas.py
"""Pydantic schemas for the session ledger (read model, filters, summary)."""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from cashledger.core.validators import sanitize_text, validate_amount
from cashledger.models.enums import SessionStatus, StatusFilter
from cashledger.utils.datetime import to_local_naive

if TYPE_CHECKING:
    from cashledger.models.cashier_session import CashierSession

UNKNOWN_CASHIER = "Unknown"


class SessionRecord(BaseModel):
    """Read model for one cashier session.

    expected_cash and variance are always recomputed from their inputs, the
    copies persisted in the store are ignored.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    user_id: UUID | None = None
    user_name: str = UNKNOWN_CASHIER
    starting_cash: Decimal = Decimal("0.00")
    ending_cash: Decimal | None = None
    total_sales: Decimal = Decimal("0.00")
    opened_at: datetime
    closed_at: datetime | None = None
    status: SessionStatus = SessionStatus.OPEN
    notes: str | None = None

    @field_validator("user_name", mode="before")
    @classmethod
    def fallback_user_name(cls, v: str | None) -> str:
        """Blank or missing names show as the placeholder."""
        if v is None or not str(v).strip():
            return UNKNOWN_CASHIER
        return str(v).strip()

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        """Accept 'closed', 'CLOSED', SessionStatus.CLOSED..."""
        if isinstance(v, SessionStatus):
            return v
        return str(v).strip().capitalize()

    @field_validator("opened_at", "closed_at")
    @classmethod
    def as_local_naive(cls, v: datetime | None) -> datetime | None:
        """Store timestamps are compared as naive local time."""
        if v is None:
            return None
        return to_local_naive(v)

    @computed_field
    @property
    def expected_cash(self) -> Decimal:
        return self.starting_cash + self.total_sales

    @computed_field
    @property
    def variance(self) -> Decimal | None:
        """ending_cash - expected_cash; None until the drawer is counted."""
        if self.ending_cash is None:
            return None
        return self.ending_cash - self.expected_cash

    @property
    def is_closed(self) -> bool:
        return self.status == SessionStatus.CLOSED

    @property
    def is_consistent(self) -> bool:
        """Closed iff closed_at and ending_cash are both present."""
        closing_fields = (self.closed_at is not None, self.ending_cash is not None)
        if self.is_closed:
            return all(closing_fields)
        return not any(closing_fields)

    @classmethod
    def from_model(cls, row: "CashierSession") -> "SessionRecord":
        """Build from an ORM row, inferring status when the stored one is unusable."""
        status = (row.status or "").strip().capitalize()
        if status not in (SessionStatus.OPEN.value, SessionStatus.CLOSED.value):
            status = (
                SessionStatus.CLOSED.value
                if row.closed_at is not None
                else SessionStatus.OPEN.value
            )

        return cls(
            id=row.id,
            user_id=row.user_id,
            user_name=row.employee_name,
            starting_cash=row.starting_cash if row.starting_cash is not None else Decimal("0.00"),
            ending_cash=row.ending_cash,
            total_sales=row.total_sales if row.total_sales is not None else Decimal("0.00"),
            opened_at=row.opened_at,
            closed_at=row.closed_at,
            status=status,
            notes=row.notes,
        )


class FilterCriteria(BaseModel):
    """Filters for the session history. All predicates are ANDed."""

    model_config = ConfigDict(frozen=True)

    query: str | None = Field(None, description="Substring of cashier name or session ID")
    date_from: date | None = Field(None, description="Opened on or after this day")
    date_to: date | None = Field(None, description="Opened on or before the end of this day")
    status: StatusFilter = StatusFilter.ALL


class SummaryStats(BaseModel):
    """Aggregates over the visible sessions. Never persisted."""

    session_count: int = 0
    total_sales: Decimal = Decimal("0.00")
    average_variance: Decimal = Decimal("0.00")


class SessionHistoryResponse(BaseModel):
    """Filtered sessions plus their summary."""

    sessions: list[SessionRecord]
    summary: SummaryStats
    criteria: FilterCriteria


class CashierSessionOpen(BaseModel):
    """Schema for opening a cashier session."""

    user_id: UUID | None = None
    employee_name: str | None = Field(None, max_length=150)
    starting_cash: Decimal = Field(Decimal("0.00"), decimal_places=2)
    opened_at: datetime | None = Field(None, description="Optional: override open time (default: now)")
    notes: str | None = Field(None, max_length=1000)

    @field_validator("starting_cash")
    @classmethod
    def validate_starting_cash(cls, v: Decimal) -> Decimal:
        return validate_amount(v)

    @field_validator("employee_name", "notes")
    @classmethod
    def validate_text_fields(cls, v: str | None) -> str | None:
        """Sanitize free text."""
        return sanitize_text(v)


class CashierSessionClose(BaseModel):
    """Schema for closing a cashier session (blind drawer count)."""

    ending_cash: Decimal = Field(..., decimal_places=2)
    closed_at: datetime | None = Field(None, description="Optional: override close time (default: now)")
    notes: str | None = Field(None, max_length=1000)

    @field_validator("ending_cash")
    @classmethod
    def validate_ending_cash(cls, v: Decimal) -> Decimal:
        return validate_amount(v)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        """Sanitize notes field."""
        return sanitize_text(v)
