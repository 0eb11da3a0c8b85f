# File: src/cashledger/core/validators.py
"""Reusable validation utilities for input sanitization."""

import re
from decimal import Decimal, InvalidOperation

# NUMERIC(14, 2)
MAX_AMOUNT = Decimal("999999999999.99")


def validate_amount(value: Decimal | float | str, max_value: Decimal = MAX_AMOUNT) -> Decimal:
    """
    Validate a cash amount.

    Amounts are signed (drawer corrections can be negative) but must fit the
    column and carry at most two decimal places.

    Raises:
        ValueError: If value is not a number, too large, or too precise
    """
    try:
        decimal_value = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid amount format: {value}") from e

    if not decimal_value.is_finite():
        raise ValueError(f"Invalid amount format: {value}")

    if abs(decimal_value) > max_value:
        raise ValueError(f"Amount exceeds maximum allowed: {max_value}")

    if decimal_value.as_tuple().exponent < -2:
        raise ValueError("Amount cannot have more than 2 decimal places")

    return decimal_value


def sanitize_text(value: str | None) -> str | None:
    """
    Strip HTML tags and surrounding whitespace.

    Quotes and commas are kept as typed: names end up in CSV exports and
    must round-trip unchanged.

    Returns:
        Cleaned text or None if empty
    """
    if not value:
        return None

    cleaned = re.sub(r"<[^>]+>", "", value).strip()
    return cleaned or None
