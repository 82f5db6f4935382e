"""
Data Models Package

This package contains all Pydantic models used in the Personal Ledger.
All data flowing through the system must conform to these schemas.
"""

from ledger.models.entry import (
    Budget,
    Expense,
    Income,
    Ledger,
    RecurringExpense,
    Transaction,
    User,
)
from ledger.models.summary import LedgerSummary, PeriodSummary
from ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Entry models
    "Budget",
    "Expense",
    "Income",
    "Ledger",
    "RecurringExpense",
    "Transaction",
    "User",
    # Read models
    "LedgerSummary",
    "PeriodSummary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
