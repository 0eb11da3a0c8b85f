"""Filter Engine: derive the visible subset of sessions from filter criteria."""

from datetime import datetime, time
from typing import Iterable

from cashledger.models import FilterCriteria, SessionRecord
from cashledger.models.enums import StatusFilter


def _matches_query(session: SessionRecord, needle: str) -> bool:
    return needle in session.user_name.casefold() or needle in str(session.id).casefold()


def _within_dates(session: SessionRecord, criteria: FilterCriteria) -> bool:
    # Range is applied to the open time: "sessions opened within range"
    if criteria.date_from and session.opened_at < datetime.combine(criteria.date_from, time.min):
        return False
    if criteria.date_to and session.opened_at > datetime.combine(criteria.date_to, time.max):
        return False
    return True


def _matches_status(session: SessionRecord, status: StatusFilter) -> bool:
    return status == StatusFilter.ALL or session.status.value == status.value


def apply_filters(
    sessions: Iterable[SessionRecord], criteria: FilterCriteria
) -> list[SessionRecord]:
    """Return the sessions matching every predicate in criteria, order preserved.

    Pure: the input is never mutated and a new list is always returned.
    """
    needle = (criteria.query or "").strip().casefold()

    return [
        session
        for session in sessions
        if (not needle or _matches_query(session, needle))
        and _within_dates(session, criteria)
        and _matches_status(session, criteria.status)
    ]
