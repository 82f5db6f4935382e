"""Field validation package."""

from ledger.validation.validator import (
    validate_amount,
    validate_entry_date,
    validate_text,
    validate_username,
)

__all__ = ["validate_amount", "validate_entry_date", "validate_text", "validate_username"]
