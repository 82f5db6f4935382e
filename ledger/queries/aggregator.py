"""
Ledger Aggregation

DESIGN DECISION: Aggregation is DETERMINISTIC and side-effect free.
Every figure shown to the user is computed from stored entries on
demand; nothing derived is ever persisted.

All functions accept any entries with ``amount`` and ``date``
attributes, so they serve both the account ledger (Transaction) and
the single-user ledger (Income, Expense). Empty input yields zero or
an empty list, never an error.
"""

import datetime as dt
from decimal import Decimal
from typing import Iterable, Optional, Protocol, Sequence, TypeVar

from ledger.models.entry import RecurringExpense, User
from ledger.models.summary import LedgerSummary, PeriodSummary


class Entry(Protocol):
    amount: Decimal
    date: dt.date


E = TypeVar("E", bound=Entry)

ZERO = Decimal("0")


def total(entries: Iterable[Entry]) -> Decimal:
    """Sum of amounts."""
    return sum((entry.amount for entry in entries), ZERO)


def filter_by_month(entries: Iterable[E], year: int, month: int) -> list[E]:
    """Entries dated in the given month. A month outside 1..12 matches nothing."""
    return [
        entry for entry in entries
        if entry.date.year == year and entry.date.month == month
    ]


def filter_by_year(entries: Iterable[E], year: int) -> list[E]:
    """Entries dated in the given year."""
    return [entry for entry in entries if entry.date.year == year]


def savings(incomes: Iterable[Entry], expenses: Iterable[Entry]) -> Decimal:
    """total(incomes) - total(expenses). May be negative."""
    return total(incomes) - total(expenses)


def summarize(user: User) -> LedgerSummary:
    """Whole-ledger totals for a user, with their budget targets."""
    total_income = total(user.incomes)
    total_expense = total(user.expenses)
    return LedgerSummary(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        monthly_target=user.budget.monthly_target,
        yearly_target=user.budget.yearly_target,
    )


def period_summary(
    incomes: Sequence[Entry],
    expenses: Sequence[Entry],
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> PeriodSummary:
    """
    Income, expenses and savings for a month, a year, or everything.

    Pass both ``year`` and ``month`` for a monthly summary, only ``year``
    for a yearly one, neither for all entries.
    """
    if year is not None and month is not None:
        incomes = filter_by_month(incomes, year, month)
        expenses = filter_by_month(expenses, year, month)
    elif year is not None:
        incomes = filter_by_year(incomes, year)
        expenses = filter_by_year(expenses, year)
    else:
        month = None

    total_income = total(incomes)
    total_expense = total(expenses)
    return PeriodSummary(
        year=year,
        month=month,
        total_income=total_income,
        total_expense=total_expense,
        savings=total_income - total_expense,
    )


def totals_by_category(entries: Iterable) -> dict[str, Decimal]:
    """
    Sum amounts per category (or income source).

    Keys keep the order in which each category was first seen.
    """
    groups: dict[str, Decimal] = {}
    for entry in entries:
        key = getattr(entry, "category", None) or getattr(entry, "source", "")
        groups[key] = groups.get(key, ZERO) + entry.amount
    return groups


def recurring_total(recurring: Iterable[RecurringExpense]) -> Decimal:
    """Sum of recurring expense amounts, regardless of frequency label."""
    return sum((item.amount for item in recurring), ZERO)
