"""
Core Data Models for Personal Ledger

These models define the schemas for everything the ledger stores.
They are designed to:
1. Reject invalid amounts and dates at construction
2. Raise the ledger's own error types, not generic validation errors
3. Be serializable for the file store
4. Stay immutable once recorded (transactions, recurring items)

DESIGN DECISION: Entries are frozen Pydantic models. The only mutable
pieces are a user's Budget targets and the append-only entry lists.
"""

import datetime as dt
from decimal import Decimal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from ledger.validation import (
    validate_amount,
    validate_entry_date,
    validate_text,
    validate_username,
)


NAME_MAX_LENGTH = 200
FREQUENCY_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 500


# =============================================================================
# AUTHENTICATED LEDGER
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense entry.

    For incomes ``category`` holds the source (e.g. "Salary"),
    for expenses the spending category (e.g. "Groceries").
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    category: str = Field(
        ...,
        description="Expense category or income source"
    )
    amount: Decimal = Field(
        ...,
        description="Non-negative amount"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the entry"
    )

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, v):
        return validate_text(v, "category", NAME_MAX_LENGTH)

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v):
        return validate_amount(v)

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v):
        return validate_entry_date(v)


class RecurringExpense(BaseModel):
    """
    A recurring expense such as rent.

    ``frequency`` is a display label only ("Monthly", "Weekly", ...).
    Nothing is scheduled from it.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    category: str
    amount: Decimal
    frequency: str

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, v):
        return validate_text(v, "category", NAME_MAX_LENGTH)

    @field_validator("frequency", mode="before")
    @classmethod
    def check_frequency(cls, v):
        return validate_text(v, "frequency", FREQUENCY_MAX_LENGTH)

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v):
        return validate_amount(v)


class Budget(BaseModel):
    """Monthly and yearly spending targets. Exactly one per user."""
    model_config = ConfigDict(validate_assignment=True)

    monthly_target: Decimal = Field(default=Decimal("0"))
    yearly_target: Decimal = Field(default=Decimal("0"))

    @field_validator("monthly_target", "yearly_target", mode="before")
    @classmethod
    def check_target(cls, v):
        return validate_amount(v)


class User(BaseModel):
    """
    A registered account and everything it owns.

    CRITICAL: ``username`` is the identity key in the store and can not
    change after creation. ``budget`` is always present.
    """
    model_config = ConfigDict(validate_assignment=True)

    username: str = Field(
        ...,
        frozen=True,
        description="Unique account name"
    )
    password: str = Field(
        ...,
        description="Stored credential, as produced by the configured verifier"
    )
    incomes: list[Transaction] = Field(default_factory=list)
    expenses: list[Transaction] = Field(default_factory=list)
    recurring: list[RecurringExpense] = Field(default_factory=list)
    budget: Budget = Field(default_factory=Budget)

    @field_validator("username", mode="before")
    @classmethod
    def check_username(cls, v):
        return validate_username(v)


# =============================================================================
# SINGLE-USER LEDGER
# =============================================================================

class Expense(BaseModel):
    """An expense in the single-user ledger."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    date: dt.date
    category: str
    amount: Decimal
    description: str = ""

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, v):
        return validate_text(v, "category", NAME_MAX_LENGTH)

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, v):
        return validate_text(v, "description", DESCRIPTION_MAX_LENGTH)

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v):
        return validate_amount(v)

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v):
        return validate_entry_date(v)


class Income(BaseModel):
    """An income in the single-user ledger."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    date: dt.date
    source: str
    amount: Decimal

    @field_validator("source", mode="before")
    @classmethod
    def check_source(cls, v):
        return validate_text(v, "source", NAME_MAX_LENGTH)

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v):
        return validate_amount(v)

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v):
        return validate_entry_date(v)


class Ledger(BaseModel):
    """Root of the single-user ledger: no accounts, just two entry lists."""

    incomes: list[Income] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
