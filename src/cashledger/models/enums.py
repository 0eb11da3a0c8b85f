"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class SessionStatus(str, enum.Enum):
    """Session lifecycle states, stored verbatim in cashier_sessions.status."""

    OPEN = "Open"
    CLOSED = "Closed"


class StatusFilter(str, enum.Enum):
    """Status selector used by the history filters."""

    ALL = "All"
    OPEN = "Open"
    CLOSED = "Closed"


class DeletionState(str, enum.Enum):
    """States of the two-step delete confirmation."""

    IDLE = "IDLE"
    PENDING_CONFIRMATION = "PENDING_CONFIRMATION"
    DELETING = "DELETING"
