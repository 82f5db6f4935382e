"""
Ledger Session

A LedgerSession is the explicit handle for one logged-in user. It is
created by AccountService.login() and passed to whatever drives the
ledger; there is no global "current user".

Every mutating operation follows the same order:
1. Validate (construct the entry); a validation error changes nothing
2. Apply the change in memory
3. Save the whole store

If step 3 fails, StorageWriteFailed propagates but the in-memory state
stays valid and is written by the next successful save.
"""

import datetime as dt
from decimal import Decimal
from typing import Callable, Optional, TypeVar, Union
from uuid import UUID

from ledger.audit import AuditLogger, create_correlation_id
from ledger.exceptions import LedgerError
from ledger.models.entry import Budget, RecurringExpense, Transaction, User
from ledger.models.summary import LedgerSummary, PeriodSummary
from ledger.queries import aggregator
from ledger.services.storage import StorageWriteFailed, UserStorageInterface


T = TypeVar("T")

AmountInput = Union[Decimal, int, float, str]
DateInput = Union[dt.date, str, None]


class LedgerSession:
    """
    Operations available to a logged-in user.
    """

    def __init__(
        self,
        user: User,
        users: dict[str, User],
        storage: UserStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        correlation_id: Optional[UUID] = None,
    ):
        """
        Args:
            user: The authenticated user
            users: The full user map the user belongs to (saved as a whole)
            storage: Where the user map is persisted
            audit_logger: Optional audit logger
            correlation_id: Groups this session's audit events
        """
        self._user = user
        self._users = users
        self._storage = storage
        self._audit_logger = audit_logger
        self._correlation_id = correlation_id or create_correlation_id()

    @property
    def user(self) -> User:
        return self._user

    @property
    def username(self) -> str:
        return self._user.username

    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id

    # -------------------------------------------------------------------------
    # Listings (read-only copies)
    # -------------------------------------------------------------------------

    @property
    def incomes(self) -> tuple[Transaction, ...]:
        return tuple(self._user.incomes)

    @property
    def expenses(self) -> tuple[Transaction, ...]:
        return tuple(self._user.expenses)

    @property
    def recurring(self) -> tuple[RecurringExpense, ...]:
        return tuple(self._user.recurring)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_income(
        self,
        category: str,
        amount: AmountInput,
        entry_date: DateInput = None,
    ) -> Transaction:
        """Record an income. ``entry_date`` defaults to today."""
        return self._add_entry(
            "income",
            self._user.incomes,
            lambda: Transaction(
                category=category,
                amount=amount,
                date=entry_date if entry_date is not None else dt.date.today(),
            ),
        )

    def add_expense(
        self,
        category: str,
        amount: AmountInput,
        entry_date: DateInput = None,
    ) -> Transaction:
        """Record an expense. ``entry_date`` defaults to today."""
        return self._add_entry(
            "expense",
            self._user.expenses,
            lambda: Transaction(
                category=category,
                amount=amount,
                date=entry_date if entry_date is not None else dt.date.today(),
            ),
        )

    def add_recurring(
        self,
        category: str,
        amount: AmountInput,
        frequency: str,
    ) -> RecurringExpense:
        """Record a recurring expense. ``frequency`` is a label only."""
        return self._add_entry(
            "recurring",
            self._user.recurring,
            lambda: RecurringExpense(
                category=category,
                amount=amount,
                frequency=frequency,
            ),
        )

    def set_budget(self, monthly: AmountInput, yearly: AmountInput) -> Budget:
        """
        Replace both budget targets.

        Both values are validated before either is applied.
        """
        try:
            targets = Budget(monthly_target=monthly, yearly_target=yearly)
        except LedgerError as e:
            self._log_rejected("budget", e)
            raise

        budget = self._user.budget
        budget.monthly_target = targets.monthly_target
        budget.yearly_target = targets.yearly_target

        if self._audit_logger:
            self._audit_logger.log_budget_updated(
                username=self.username,
                monthly=str(budget.monthly_target),
                yearly=str(budget.yearly_target),
                correlation_id=self._correlation_id,
            )

        self.save()
        return budget

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def summary(self) -> LedgerSummary:
        """Totals, balance and budget targets."""
        return aggregator.summarize(self._user)

    def monthly_summary(self, year: int, month: int) -> PeriodSummary:
        return aggregator.period_summary(
            self._user.incomes, self._user.expenses, year=year, month=month
        )

    def yearly_summary(self, year: int) -> PeriodSummary:
        return aggregator.period_summary(
            self._user.incomes, self._user.expenses, year=year
        )

    def category_breakdown(self, kind: str = "expense") -> dict[str, Decimal]:
        """
        Totals per category for ``kind`` ('expense', 'income' or 'recurring').

        Raises:
            ValueError: For any other ``kind``
        """
        lists = {
            "expense": self._user.expenses,
            "income": self._user.incomes,
            "recurring": self._user.recurring,
        }
        if kind not in lists:
            raise ValueError(
                f"Unknown entry kind {kind!r}; expected one of {', '.join(lists)}"
            )
        return aggregator.totals_by_category(lists[kind])

    def recurring_total(self) -> Decimal:
        """Sum of all recurring expenses, whatever their frequency."""
        return aggregator.recurring_total(self._user.recurring)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self) -> None:
        """
        Write the whole user map.

        Raises:
            StorageWriteFailed: In-memory state is kept either way
        """
        try:
            self._storage.save(self._users)
        except StorageWriteFailed as e:
            if self._audit_logger:
                self._audit_logger.log_save_failed(
                    path=e.path,
                    error_message=e.reason,
                    correlation_id=self._correlation_id,
                )
            raise

        if self._audit_logger:
            self._audit_logger.log_store_saved(
                str(getattr(self._storage, "path", "")),
                correlation_id=self._correlation_id,
            )

    def logout(self) -> None:
        """Save and end the session."""
        self.save()
        if self._audit_logger:
            self._audit_logger.log_logged_out(self.username, self._correlation_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _add_entry(self, kind: str, entries: list, build: Callable[[], T]) -> T:
        try:
            entry = build()
        except LedgerError as e:
            self._log_rejected(kind, e)
            raise

        entries.append(entry)

        if self._audit_logger:
            self._audit_logger.log_entry_added(
                kind=kind,
                username=self.username,
                category=entry.category,
                amount=str(entry.amount),
                correlation_id=self._correlation_id,
            )

        self.save()
        return entry

    def _log_rejected(self, kind: str, error: LedgerError) -> None:
        if self._audit_logger:
            self._audit_logger.log_entry_rejected(
                kind=kind,
                username=self.username,
                reason=str(error),
                correlation_id=self._correlation_id,
            )
