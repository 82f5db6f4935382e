"""
Field Validation Rules

These are the checks behind the validated constructors in
``ledger.models.entry``. They normalise accepted input and raise the
ledger's own error types for everything else.

IMPORTANT: Validation NEVER silently fixes issues. A negative amount is
rejected, not clamped; a malformed date is rejected, not guessed.
"""

import datetime as dt
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from ledger.exceptions import EmptyUsername, InvalidAmount, InvalidDate, InvalidText


ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_amount(value: Any) -> Decimal:
    """
    Convert an amount to Decimal and check it is non-negative.

    Accepts Decimal, int, float (through its string form so 0.1 stays 0.1)
    and numeric strings.

    Raises:
        InvalidAmount: negative, non-finite, boolean or unparseable input
    """
    if isinstance(value, bool):
        raise InvalidAmount(value, "Amount must be a number")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidAmount(value, "Amount must be a number")
    else:
        raise InvalidAmount(value, "Amount must be a number")

    if not amount.is_finite():
        raise InvalidAmount(value, "Amount must be a finite number")
    if amount < 0:
        raise InvalidAmount(value)

    return amount


def validate_entry_date(value: Any) -> dt.date:
    """
    Parse a calendar date.

    Accepts a ``date`` or a strict ``yyyy-mm-dd`` string. A ``datetime``
    is an instant, not a calendar date, and is rejected.

    Raises:
        InvalidDate: anything that is not a valid calendar date
    """
    if isinstance(value, dt.datetime):
        raise InvalidDate(value)
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if ISO_DATE_PATTERN.match(text):
            try:
                return dt.date.fromisoformat(text)
            except ValueError:
                pass  # e.g. 2024-02-30
    raise InvalidDate(value)


def validate_username(value: Any) -> str:
    """Strip a username and reject blanks."""
    if not isinstance(value, str) or not value.strip():
        raise EmptyUsername()
    return value.strip()


def validate_text(value: Any, field: str, max_length: int) -> str:
    """
    Strip a free-text field and check its length.

    Raises:
        InvalidText: not a string, or longer than ``max_length`` once stripped
    """
    if not isinstance(value, str):
        raise InvalidText(field, value, "must be text")
    text = value.strip()
    if len(text) > max_length:
        raise InvalidText(field, value, f"must be at most {max_length} characters")
    return text
