# File: src/cashledger/utils/datetime.py
"""Timezone-aware datetime utilities for store-local time."""

import os
from datetime import date, datetime
from zoneinfo import ZoneInfo

# Sessions are stored as naive local timestamps in this zone
APP_TIMEZONE = ZoneInfo(os.getenv("APP_TIMEZONE", "Asia/Jakarta"))


def now_local() -> datetime:
    """Get current datetime in the store timezone."""
    return datetime.now(APP_TIMEZONE)


def now_local_naive() -> datetime:
    """Current local datetime without tzinfo, as persisted in cashier_sessions."""
    return now_local().replace(tzinfo=None)


def today_local() -> date:
    """Get today's date in the store timezone."""
    return now_local().date()


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time. Naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(APP_TIMEZONE).replace(tzinfo=None)
