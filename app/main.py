"""
Streamlit Frontend for Personal Ledger

A thin shell over ledger.commands: it turns widget input into typed
arguments, dispatches a command and shows the resulting message. All
totals and summaries come from the ledger itself.

Run with:
    streamlit run app/main.py
"""

from datetime import date
from decimal import Decimal

import streamlit as st

from ledger.commands import (
    CommandResult,
    run_account_command,
    run_personal_command,
    run_session_command,
)
from ledger.config import validate_all_settings
from ledger.orchestrator import create_app_components


st.set_page_config(
    page_title="Personal Ledger",
    page_icon="💰",
    layout="wide",
)


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components(use_storage=True)


def show_result(result: CommandResult) -> None:
    if result.success:
        st.success(result.message)
    else:
        st.error(result.message)


def money_input(label: str, key: str) -> Decimal:
    value = st.number_input(label, min_value=0.0, step=0.01, format="%.2f", key=key)
    return Decimal(str(value))


def main():
    """Main application entry point."""
    checks = validate_all_settings()
    failed = [name for name, ok in checks.items() if ok is False]
    if failed:
        for name in failed:
            st.error(f"Configuration problem ({name}): {checks.get(f'{name}_error')}")
        st.stop()

    accounts, personal = get_components()

    mode = st.sidebar.radio("Ledger", ["Accounts", "Personal ledger"])
    if mode == "Personal ledger":
        for problem in personal.load_diagnostics:
            st.warning(problem)
        render_personal_ledger(personal)
        return

    for problem in accounts.load_diagnostics:
        st.warning(problem)

    session = st.session_state.get("ledger_session")
    if session is None:
        render_login_page(accounts)
    else:
        render_ledger_page(session)


def render_login_page(accounts):
    """Register or log in."""
    st.title("💰 Personal Ledger")

    login_tab, register_tab = st.tabs(["Login", "Register"])

    with login_tab:
        username = st.text_input("Username", key="login_username")
        password = st.text_input("Password", type="password", key="login_password")
        if st.button("Login", type="primary"):
            result = run_account_command(
                accounts, "login", username=username, password=password
            )
            show_result(result)
            if result.success:
                st.session_state.ledger_session = result.data
                st.rerun()

    with register_tab:
        username = st.text_input("Username", key="register_username")
        password = st.text_input("Password", type="password", key="register_password")
        if st.button("Register"):
            show_result(run_account_command(
                accounts, "register", username=username, password=password
            ))


def render_ledger_page(session):
    """Menu for a logged-in user."""
    st.sidebar.title(f"💰 {session.username}")
    page = st.sidebar.radio(
        "Navigate to:",
        ["Add Entry", "Recurring", "Targets", "Summary", "Entries"],
    )
    if st.sidebar.button("Logout"):
        show_result(run_session_command(session, "logout"))
        del st.session_state["ledger_session"]
        st.rerun()

    if page == "Add Entry":
        render_add_entry(session)
    elif page == "Recurring":
        render_recurring(session)
    elif page == "Targets":
        render_targets(session)
    elif page == "Summary":
        render_summary(session)
    elif page == "Entries":
        render_entries(session)


def render_add_entry(session):
    st.header("Add Income / Expense")
    kind = st.radio("Type", ["Income", "Expense"], horizontal=True)
    category = st.text_input("Category / source")
    amount = money_input("Amount", key="entry_amount")
    entry_date = st.date_input("Date", value=date.today())

    if st.button("Add", type="primary"):
        command = "add_income" if kind == "Income" else "add_expense"
        show_result(run_session_command(
            session, command,
            category=category, amount=amount, entry_date=entry_date,
        ))


def render_recurring(session):
    st.header("Recurring Expenses")
    category = st.text_input("Category (e.g., Rent)")
    amount = money_input("Amount", key="recurring_amount")
    frequency = st.selectbox("Frequency", ["Monthly", "Weekly", "Yearly"])

    if st.button("Save", type="primary"):
        show_result(run_session_command(
            session, "add_recurring",
            category=category, amount=amount, frequency=frequency,
        ))

    result = run_session_command(session, "list_recurring")
    if result.data:
        st.table([item.model_dump(mode="json") for item in result.data])
    st.caption(result.message)


def render_targets(session):
    st.header("Targets")
    monthly = money_input("Monthly target amount", key="monthly_target")
    yearly = money_input("Yearly target amount", key="yearly_target")

    if st.button("Update targets", type="primary"):
        show_result(run_session_command(
            session, "set_budget", monthly=monthly, yearly=yearly,
        ))


def render_summary(session):
    st.header("Summary")
    result = run_session_command(session, "summary")
    summary = result.data

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", f"{summary.total_income:.2f}")
    col2.metric("Total Expense", f"{summary.total_expense:.2f}")
    col3.metric("Balance", f"{summary.balance:.2f}")
    st.caption(
        f"Monthly target: {summary.monthly_target:.2f} · "
        f"Yearly target: {summary.yearly_target:.2f}"
    )

    st.subheader("By period")
    render_period(run_session_command, session, key="session")


def render_period(run_command, target, key: str):
    """Yearly summary, or monthly when a month is picked."""
    today = date.today()
    year = st.number_input(
        "Year", min_value=1, max_value=9999, value=today.year, step=1,
        key=f"{key}_year",
    )
    month = st.selectbox(
        "Month", ["All"] + list(range(1, 13)), index=today.month,
        key=f"{key}_month",
    )

    if month == "All":
        period = run_command(target, "yearly_summary", year=int(year))
    else:
        period = run_command(target, "monthly_summary", year=int(year), month=int(month))
    st.text(period.message)


def render_entries(session):
    st.header("Entries")
    for command, title in (("list_incomes", "Incomes"), ("list_expenses", "Expenses")):
        st.subheader(title)
        result = run_session_command(session, command)
        if result.data:
            st.table([entry.model_dump(mode="json") for entry in result.data])
        else:
            st.write(result.message)


def render_personal_ledger(flow):
    """The single-user ledger: no accounts, just incomes and expenses."""
    st.title("💰 Personal Ledger")

    add_tab, summary_tab, entries_tab = st.tabs(["Add Entry", "Summary", "Entries"])

    with add_tab:
        kind = st.radio("Type", ["Income", "Expense"], horizontal=True, key="personal_kind")
        name = st.text_input("Source" if kind == "Income" else "Category", key="personal_name")
        amount = money_input("Amount", key="personal_amount")
        entry_date = st.date_input("Date", value=date.today(), key="personal_date")
        description = ""
        if kind == "Expense":
            description = st.text_input("Description", key="personal_description")

        if st.button("Add", type="primary", key="personal_add"):
            if kind == "Income":
                result = run_personal_command(
                    flow, "add_income",
                    entry_date=entry_date, source=name, amount=amount,
                )
            else:
                result = run_personal_command(
                    flow, "add_expense",
                    entry_date=entry_date, category=name, amount=amount,
                    description=description,
                )
            show_result(result)

    with summary_tab:
        st.text(run_personal_command(flow, "summary").message)
        st.subheader("By period")
        render_period(run_personal_command, flow, key="personal")

    with entries_tab:
        for command, title in (("list_incomes", "Incomes"), ("list_expenses", "Expenses")):
            st.subheader(title)
            result = run_personal_command(flow, command)
            if result.data:
                st.table([entry.model_dump(mode="json") for entry in result.data])
            else:
                st.write(result.message)


if __name__ == "__main__":
    main()
