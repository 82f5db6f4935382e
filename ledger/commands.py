"""
Command Dispatch

Maps command identifiers to handler functions so that any front end
(a text menu, the Streamlit app, a test) can drive the ledger without
knowing its API in detail.

Each handler takes the target (an AccountService, LedgerSession or
PersonalLedgerFlow) plus typed keyword arguments, and returns
``(message, data)``. Parsing raw text into those arguments is the front
end's job.

GUARANTEE: dispatch() never raises for bad input. Unknown commands,
missing arguments and every LedgerError come back as a failed
CommandResult with a message fit to show the user.
"""

import inspect
from decimal import Decimal
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ValidationError

from ledger.auth import AccountService
from ledger.exceptions import LedgerError
from ledger.models.summary import LedgerSummary, PeriodSummary
from ledger.orchestrator import PersonalLedgerFlow
from ledger.session import LedgerSession


Handler = Callable[..., tuple[str, Any]]


class CommandResult(BaseModel):
    """Outcome of one dispatched command."""

    command: str
    success: bool
    message: str
    data: Any = None


def format_amount(amount: Decimal) -> str:
    return f"{amount:.2f}"


def format_summary(summary: LedgerSummary) -> str:
    return "\n".join([
        f"Total Income  : {format_amount(summary.total_income)}",
        f"Total Expense : {format_amount(summary.total_expense)}",
        f"Balance       : {format_amount(summary.balance)}",
        f"Monthly Target: {format_amount(summary.monthly_target)}",
        f"Yearly Target : {format_amount(summary.yearly_target)}",
    ])


def format_period(summary: PeriodSummary) -> str:
    return "\n".join([
        f"Income ({summary.label}) : {format_amount(summary.total_income)}",
        f"Expenses ({summary.label}): {format_amount(summary.total_expense)}",
        f"Savings ({summary.label}) : {format_amount(summary.savings)}",
    ])


# =============================================================================
# ACCOUNT COMMANDS
# =============================================================================

def _register(accounts: AccountService, username: str, password: str):
    user = accounts.register(username, password)
    return "Registered. You can now login.", user


def _login(accounts: AccountService, username: str, password: str):
    session = accounts.login(username, password)
    return f"Login successful. Welcome {session.username}!", session


ACCOUNT_COMMANDS: dict[str, Handler] = {
    "register": _register,
    "login": _login,
}


# =============================================================================
# SESSION COMMANDS
# =============================================================================

def _add_income(session: LedgerSession, category: str, amount, entry_date=None):
    return "Income added.", session.add_income(category, amount, entry_date)


def _add_expense(session: LedgerSession, category: str, amount, entry_date=None):
    return "Expense added.", session.add_expense(category, amount, entry_date)


def _add_recurring(session: LedgerSession, category: str, amount, frequency: str):
    return "Recurring expense saved.", session.add_recurring(category, amount, frequency)


def _set_budget(session: LedgerSession, monthly, yearly):
    return "Targets updated.", session.set_budget(monthly, yearly)


def _summary(session: LedgerSession):
    summary = session.summary()
    return format_summary(summary), summary


def _monthly_summary(target, year: int, month: int):
    summary = target.monthly_summary(year, month)
    return format_period(summary), summary


def _yearly_summary(target, year: int):
    summary = target.yearly_summary(year)
    return format_period(summary), summary


def _list_incomes(target):
    incomes = target.incomes
    return ("(none)" if not incomes else f"{len(incomes)} incomes"), list(incomes)


def _list_expenses(target):
    expenses = target.expenses
    return ("(none)" if not expenses else f"{len(expenses)} expenses"), list(expenses)


def _list_recurring(session: LedgerSession):
    recurring = session.recurring
    if not recurring:
        return "(none)", []
    total = format_amount(session.recurring_total())
    return f"{len(recurring)} recurring, totalling {total}", list(recurring)


def _logout(session: LedgerSession):
    session.logout()
    return "Logging out...", None


SESSION_COMMANDS: dict[str, Handler] = {
    "add_income": _add_income,
    "add_expense": _add_expense,
    "add_recurring": _add_recurring,
    "set_budget": _set_budget,
    "summary": _summary,
    "monthly_summary": _monthly_summary,
    "yearly_summary": _yearly_summary,
    "list_incomes": _list_incomes,
    "list_expenses": _list_expenses,
    "list_recurring": _list_recurring,
    "logout": _logout,
}


# =============================================================================
# SINGLE-USER LEDGER COMMANDS
# =============================================================================

def _personal_add_income(flow: PersonalLedgerFlow, entry_date, source: str, amount):
    return "Income added.", flow.add_income(entry_date, source, amount)


def _personal_add_expense(
    flow: PersonalLedgerFlow,
    entry_date,
    category: str,
    amount,
    description: str = "",
):
    return "Expense added.", flow.add_expense(entry_date, category, amount, description)


def _personal_summary(flow: PersonalLedgerFlow):
    summary = flow.summary()
    return format_period(summary), summary


PERSONAL_COMMANDS: dict[str, Handler] = {
    "add_income": _personal_add_income,
    "add_expense": _personal_add_expense,
    "summary": _personal_summary,
    "monthly_summary": _monthly_summary,
    "yearly_summary": _yearly_summary,
    "list_incomes": _list_incomes,
    "list_expenses": _list_expenses,
}


# =============================================================================
# DISPATCH
# =============================================================================

def dispatch(
    handlers: Mapping[str, Handler],
    target: Any,
    command: str,
    **kwargs: Any,
) -> CommandResult:
    """
    Run ``command`` against ``target`` using ``handlers``.

    Returns:
        CommandResult; ``success`` is False for unknown commands, bad
        arguments and any ledger error.
    """
    handler = handlers.get(command)
    if handler is None:
        return CommandResult(command=command, success=False, message="Invalid choice.")

    try:
        inspect.signature(handler).bind(target, **kwargs)
    except TypeError as e:
        return CommandResult(
            command=command,
            success=False,
            message=f"Invalid arguments for {command}: {e}",
        )

    try:
        message, data = handler(target, **kwargs)
    except LedgerError as e:
        return CommandResult(command=command, success=False, message=str(e))
    except ValidationError as e:
        return CommandResult(
            command=command,
            success=False,
            message=f"Invalid input: {e.errors()[0]['msg']}",
        )

    return CommandResult(command=command, success=True, message=message, data=data)


def run_account_command(accounts: AccountService, command: str, **kwargs: Any) -> CommandResult:
    return dispatch(ACCOUNT_COMMANDS, accounts, command, **kwargs)


def run_session_command(session: LedgerSession, command: str, **kwargs: Any) -> CommandResult:
    return dispatch(SESSION_COMMANDS, session, command, **kwargs)


def run_personal_command(flow: PersonalLedgerFlow, command: str, **kwargs: Any) -> CommandResult:
    return dispatch(PERSONAL_COMMANDS, flow, command, **kwargs)
