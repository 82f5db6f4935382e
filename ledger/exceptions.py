"""
Error taxonomy for the ledger.

Every error carries a human-readable message (``str(error)``) that a
front end can show as-is before returning to its menu.

NOTE: These do not derive from ValueError. Pydantic wraps ValueError
raised inside validators into a ValidationError; anything else propagates
unchanged, which keeps the taxonomy visible to callers of the models.
"""

from typing import Any


class LedgerError(Exception):
    """Base class for all ledger errors."""
    pass


class InvalidAmount(LedgerError):
    """Amount is negative, non-finite or not a number."""

    def __init__(self, value: Any, reason: str = "Amount must be a non-negative number"):
        self.value = value
        self.reason = reason
        super().__init__(f"{reason} (got {value!r})")


class InvalidDate(LedgerError):
    """Date is not a valid calendar date in yyyy-mm-dd form."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Please enter date in yyyy-mm-dd format (got {value!r})")


class EmptyUsername(LedgerError):
    """Username is blank."""

    def __init__(self):
        super().__init__("Username cannot be empty.")


class DuplicateUsername(LedgerError):
    """Username is already registered."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already exists: {username}")


class InvalidCredentials(LedgerError):
    """Unknown username or wrong password."""

    def __init__(self):
        super().__init__("Invalid credentials.")


class InvalidText(LedgerError):
    """A text field is not a string or is too long."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")
