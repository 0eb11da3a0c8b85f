"""Aggregator: summary statistics over the visible sessions."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from cashledger.models import SessionRecord, SummaryStats

CENTS = Decimal("0.01")


def summarize(sessions: Sequence[SessionRecord]) -> SummaryStats:
    """Count, total sales and average variance of the given (filtered) sessions.

    Only closed sessions contribute to the average variance. A closed session
    without an ending cash counts with a variance of zero. With no closed
    sessions the average is zero.

    The average is rounded half-up to cents rather than kept at full
    Decimal precision, so it matches the two-place money columns it is
    shown and exported next to.
    """
    total_sales = sum((s.total_sales for s in sessions), Decimal("0.00"))

    closed = [s for s in sessions if s.is_closed]
    if closed:
        variance_sum = sum((s.variance or Decimal("0.00") for s in closed), Decimal("0.00"))
        average_variance = (variance_sum / len(closed)).quantize(CENTS, rounding=ROUND_HALF_UP)
    else:
        average_variance = Decimal("0.00")

    return SummaryStats(
        session_count=len(sessions),
        total_sales=total_sales,
        average_variance=average_variance,
    )
