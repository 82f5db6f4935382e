"""
Read models produced by the aggregator.

These are projections only. Nothing here is persisted.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class LedgerSummary(BaseModel):
    """Totals for a user's whole ledger alongside their budget targets."""

    total_income: Decimal = Field(default=Decimal("0"))
    total_expense: Decimal = Field(default=Decimal("0"))
    balance: Decimal = Field(
        default=Decimal("0"),
        description="total_income - total_expense, may be negative"
    )
    monthly_target: Decimal = Field(default=Decimal("0"))
    yearly_target: Decimal = Field(default=Decimal("0"))


class PeriodSummary(BaseModel):
    """
    Income, expenses and savings for one period.

    ``month`` is None for a yearly summary; both are None when the
    summary covers every entry.
    """

    year: Optional[int] = None
    month: Optional[int] = None
    total_income: Decimal = Field(default=Decimal("0"))
    total_expense: Decimal = Field(default=Decimal("0"))
    savings: Decimal = Field(default=Decimal("0"))

    @property
    def label(self) -> str:
        """Human-readable period name, e.g. '2024-03' or '2024'."""
        if self.year is None:
            return "all time"
        if self.month is None:
            return f"{self.year}"
        return f"{self.year}-{self.month:02d}"
