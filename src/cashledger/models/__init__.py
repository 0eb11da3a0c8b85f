"""Domain models package."""

from cashledger.models.cashier_session import CashierSession
from cashledger.models.enums import DeletionState, SessionStatus, StatusFilter
from cashledger.models.session_schemas import (
    CashierSessionClose,
    CashierSessionOpen,
    FilterCriteria,
    SessionHistoryResponse,
    SessionRecord,
    SummaryStats,
)

__all__ = [
    "CashierSession",
    "CashierSessionClose",
    "CashierSessionOpen",
    "DeletionState",
    "FilterCriteria",
    "SessionHistoryResponse",
    "SessionRecord",
    "SessionStatus",
    "StatusFilter",
    "SummaryStats",
]
