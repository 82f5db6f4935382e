"""
Main Orchestrator for Personal Ledger

This module ties together all the components and defines the two
ways the ledger is used:
1. Accounts: register/login → LedgerSession (see ledger.session)
2. Single-user: one ledger with no accounts (PersonalLedgerFlow)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing invalid is ever recorded
- Every mutation is saved immediately
- Loading never fails; saving failures are surfaced, not hidden
"""

import datetime as dt
from decimal import Decimal
from typing import Callable, Optional, TypeVar, Union

from ledger.audit import AuditLogger, configure_logging
from ledger.auth import AccountService, get_verifier
from ledger.config import get_settings
from ledger.exceptions import LedgerError
from ledger.models.entry import Expense, Income, Ledger
from ledger.models.summary import PeriodSummary
from ledger.queries import aggregator
from ledger.services.storage import (
    JsonFileLedgerStorage,
    JsonFileUserStorage,
    LedgerStorageInterface,
    StorageWriteFailed,
)


T = TypeVar("T")

AmountInput = Union[Decimal, int, float, str]


class PersonalLedgerFlow:
    """
    The single-user ledger: incomes and expenses with no accounts.

    Flow for each entry:
    1. Validate → Income/Expense construction (amount, date)
    2. Append → in-memory ledger
    3. Save → storage
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._ledger = storage.load_ledger()

        if self._audit_logger:
            self._audit_logger.log_store_loaded(
                path=str(getattr(storage, "path", "")),
                record_count=len(self._ledger.incomes) + len(self._ledger.expenses),
                issues=[str(issue) for issue in storage.diagnostics],
            )

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def load_diagnostics(self) -> list[str]:
        """Human-readable problems found when the ledger was loaded."""
        return [str(issue) for issue in self._storage.diagnostics]

    @property
    def incomes(self) -> tuple[Income, ...]:
        return tuple(self._ledger.incomes)

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return tuple(self._ledger.expenses)

    def add_income(
        self,
        entry_date: Union[dt.date, str],
        source: str,
        amount: AmountInput,
    ) -> Income:
        """
        Record an income.

        Raises:
            InvalidAmount: Negative or non-numeric amount
            InvalidDate: Date not in yyyy-mm-dd form
        """
        return self._add_entry(
            "income",
            self._ledger.incomes,
            lambda: Income(date=entry_date, source=source, amount=amount),
        )

    def add_expense(
        self,
        entry_date: Union[dt.date, str],
        category: str,
        amount: AmountInput,
        description: str = "",
    ) -> Expense:
        """
        Record an expense.

        Raises:
            InvalidAmount: Negative or non-numeric amount
            InvalidDate: Date not in yyyy-mm-dd form
        """
        return self._add_entry(
            "expense",
            self._ledger.expenses,
            lambda: Expense(
                date=entry_date,
                category=category,
                amount=amount,
                description=description,
            ),
        )

    def total_income(self) -> Decimal:
        return aggregator.total(self._ledger.incomes)

    def total_expenses(self) -> Decimal:
        return aggregator.total(self._ledger.expenses)

    def savings(self) -> Decimal:
        return aggregator.savings(self._ledger.incomes, self._ledger.expenses)

    def summary(self) -> PeriodSummary:
        """All-time income, expenses and savings."""
        return aggregator.period_summary(self._ledger.incomes, self._ledger.expenses)

    def monthly_summary(self, year: int, month: int) -> PeriodSummary:
        return aggregator.period_summary(
            self._ledger.incomes, self._ledger.expenses, year=year, month=month
        )

    def yearly_summary(self, year: int) -> PeriodSummary:
        return aggregator.period_summary(
            self._ledger.incomes, self._ledger.expenses, year=year
        )

    def save(self) -> None:
        """
        Raises:
            StorageWriteFailed: In-memory ledger is kept either way
        """
        try:
            self._storage.save_ledger(self._ledger)
        except StorageWriteFailed as e:
            if self._audit_logger:
                self._audit_logger.log_save_failed(path=e.path, error_message=e.reason)
            raise

        if self._audit_logger:
            self._audit_logger.log_store_saved(str(getattr(self._storage, "path", "")))

    def _add_entry(self, kind: str, entries: list, build: Callable[[], T]) -> T:
        try:
            entry = build()
        except LedgerError as e:
            if self._audit_logger:
                self._audit_logger.log_entry_rejected(kind=kind, username=None, reason=str(e))
            raise

        entries.append(entry)
        self.save()
        return entry


def create_app_components(
    use_storage: bool = True,
) -> tuple[AccountService, PersonalLedgerFlow]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use the configured store paths. Set to
                    False to keep everything under the system temp dir.

    Returns:
        (account_service, personal_ledger_flow)
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    if use_storage:
        users_path = settings.storage.users_path
        ledger_path = settings.storage.ledger_path
    else:
        import tempfile
        from pathlib import Path

        scratch = Path(tempfile.mkdtemp(prefix="personal-ledger-"))
        users_path = scratch / "users_data.json"
        ledger_path = scratch / "ledger_data.json"

    audit_logger = AuditLogger()

    verifier = get_verifier(
        settings.security.credential_scheme,
        iterations=settings.security.pbkdf2_iterations,
    )

    account_service = AccountService(
        storage=JsonFileUserStorage(users_path),
        verifier=verifier,
        audit_logger=audit_logger,
    )
    personal_ledger = PersonalLedgerFlow(
        storage=JsonFileLedgerStorage(ledger_path),
        audit_logger=audit_logger,
    )

    return account_service, personal_ledger
