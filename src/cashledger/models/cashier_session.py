# File: src/cashledger/models/cashier_session.py
"""CashierSession model for shift tracking and reconciliation."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cashledger.core.db import Base
from cashledger.core.errors import InvalidStateError
from cashledger.models.enums import SessionStatus
from cashledger.utils.datetime import now_local_naive


class CashierSession(Base):
    """One cashier shift, from drawer open to drawer close."""

    __tablename__ = "cashier_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Operator who opened the drawer (users live outside this service)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )

    employee_name: Mapped[str | None] = mapped_column(String(150), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SessionStatus.OPEN.value,
        index=True,
    )

    opened_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_local_naive,
        index=True,
    )

    closed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Cash drawer amounts
    starting_cash: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0.00")
    )

    ending_cash: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)

    # Written by the checkout flow while the session is open
    total_sales: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0.00")
    )

    # Persisted at close for reporting; reads recompute them
    expected_cash: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    variance: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)

    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # CALCULATED PROPERTIES
    @property
    def computed_expected_cash(self) -> Decimal:
        """Starting float plus everything sold during the shift."""
        return (self.starting_cash or Decimal("0.00")) + (self.total_sales or Decimal("0.00"))

    @property
    def computed_variance(self) -> Decimal | None:
        """Counted cash minus expected cash.

        Positive = surplus (more cash than expected)
        Negative = shortage (less cash than expected)
        None while the drawer has not been counted.
        """
        if self.ending_cash is None:
            return None
        return self.ending_cash - self.computed_expected_cash

    def close(self, ending_cash: Decimal, closed_at: datetime) -> None:
        """Close the session, setting every closing field together."""
        if self.status != SessionStatus.OPEN.value:
            raise InvalidStateError(
                "Session is not open",
                details={"session_id": str(self.id), "status": self.status},
            )
        if closed_at < self.opened_at:
            raise InvalidStateError(
                "Closed time cannot be before opened time",
                details={
                    "opened_at": self.opened_at.isoformat(),
                    "closed_at": closed_at.isoformat(),
                },
            )

        self.ending_cash = ending_cash
        self.closed_at = closed_at
        self.expected_cash = self.computed_expected_cash
        self.variance = self.computed_variance
        self.status = SessionStatus.CLOSED.value

    def __repr__(self) -> str:
        return (
            f"<CashierSession(id={self.id}, employee_name={self.employee_name!r}, "
            f"status={self.status})>"
        )
