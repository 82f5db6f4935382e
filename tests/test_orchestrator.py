"""Tests for the single-user ledger flow and the component factory."""

from decimal import Decimal

import pytest

from ledger.auth import AccountService, Pbkdf2Verifier
from ledger.config import get_settings
from ledger.exceptions import InvalidAmount, InvalidDate, InvalidText
from ledger.models.entry import Ledger
from ledger.orchestrator import PersonalLedgerFlow, create_app_components
from ledger.services.storage import JsonFileLedgerStorage, StorageWriteFailed


@pytest.fixture
def ledger_path(tmp_path):
    return tmp_path / "ledger_data.json"


@pytest.fixture
def flow(ledger_path):
    return PersonalLedgerFlow(JsonFileLedgerStorage(ledger_path))


class TestPersonalLedgerFlow:
    """Tests for PersonalLedgerFlow."""

    def test_totals_and_savings(self, flow):
        """Test totals and savings over incomes and expenses."""
        flow.add_income("2024-03-05", "Salary", "1000.00")
        flow.add_expense("2024-03-10", "Groceries", "200.00", "weekly shop")
        assert flow.total_income() == Decimal("1000.00")
        assert flow.total_expenses() == Decimal("200.00")
        assert flow.savings() == Decimal("800.00")
        assert flow.summary().savings == Decimal("800.00")

    def test_monthly_and_yearly_summary(self, flow):
        """Test period summaries for the single-user ledger."""
        flow.add_income("2024-03-05", "Salary", "1000.00")
        flow.add_expense("2024-03-10", "Groceries", "200.00")
        flow.add_expense("2023-11-10", "Travel", "80.00")

        march = flow.monthly_summary(2024, 3)
        assert (march.total_income, march.total_expense) == (Decimal("1000.00"), Decimal("200.00"))
        april = flow.monthly_summary(2024, 4)
        assert (april.total_income, april.total_expense) == (0, 0)
        assert flow.yearly_summary(2023).total_expense == Decimal("80.00")

    def test_empty_ledger(self, flow):
        """Test an empty ledger reports zeros."""
        assert flow.total_income() == 0
        assert flow.savings() == 0
        assert flow.monthly_summary(2024, 1).savings == 0

    def test_rejects_negative_amount(self, flow, ledger_path):
        """Test negative amounts are rejected and nothing is saved."""
        with pytest.raises(InvalidAmount):
            flow.add_expense("2024-03-10", "Food", -5)
        assert flow.expenses == ()
        assert not ledger_path.exists()

    def test_rejects_bad_date(self, flow):
        """Test a malformed date is rejected."""
        with pytest.raises(InvalidDate):
            flow.add_income("March 5th", "Salary", 10)
        assert flow.incomes == ()

    def test_persists_each_entry(self, flow, ledger_path):
        """Test entries are saved immediately and reload."""
        flow.add_income("2024-03-05", "Salary", "1000.00")
        reloaded = PersonalLedgerFlow(JsonFileLedgerStorage(ledger_path))
        assert reloaded.total_income() == Decimal("1000.00")

    def test_save_failure_surfaces(self, tmp_path):
        """Test a failing store reports StorageWriteFailed and keeps the entry."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        flow = PersonalLedgerFlow(JsonFileLedgerStorage(blocker / "ledger.json"))
        with pytest.raises(StorageWriteFailed):
            flow.add_income("2024-03-05", "Salary", 10)
        assert flow.total_income() == Decimal("10")

    def test_corrupt_store_starts_empty(self, ledger_path):
        """Test a corrupt ledger file starts an empty ledger."""
        ledger_path.write_text("%%%", encoding="utf-8")
        assert PersonalLedgerFlow(JsonFileLedgerStorage(ledger_path)).ledger == Ledger()

    def test_load_diagnostics(self, ledger_path):
        """Test load problems are exposed as messages."""
        ledger_path.write_text("%%%", encoding="utf-8")
        flow = PersonalLedgerFlow(JsonFileLedgerStorage(ledger_path))
        assert len(flow.load_diagnostics) == 1
        assert str(ledger_path) in flow.load_diagnostics[0]

    def test_rejects_long_description(self, flow, ledger_path):
        """Test an over-long description is a ledger error and nothing is saved."""
        with pytest.raises(InvalidText):
            flow.add_expense("2024-03-10", "Food", 5, "x" * 501)
        assert flow.expenses == ()
        assert not ledger_path.exists()

    def test_saves_are_audited(self, ledger_path, audit_logger, recording_logger):
        """Test a successful save logs store_saved."""
        flow = PersonalLedgerFlow(JsonFileLedgerStorage(ledger_path), audit_logger=audit_logger)
        flow.add_income("2024-03-05", "Salary", 10)
        assert recording_logger.event_types() == ["store_loaded", "store_saved"]


class TestCreateAppComponents:
    """Tests for the component factory."""

    @pytest.fixture(autouse=True)
    def isolated_settings(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LEDGER_STORAGE_USERS_PATH", str(tmp_path / "u.json"))
        monkeypatch.setenv("LEDGER_STORAGE_LEDGER_PATH", str(tmp_path / "l.json"))
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_uses_configured_paths(self, tmp_path):
        """Test the factory wires stores at the configured paths."""
        accounts, personal = create_app_components()
        assert isinstance(accounts, AccountService)
        accounts.register("alice", "pw1")
        personal.add_income("2024-01-01", "Salary", 1)
        assert (tmp_path / "u.json").exists()
        assert (tmp_path / "l.json").exists()

    def test_without_storage_uses_scratch_files(self, tmp_path):
        """Test use_storage=False leaves the configured paths alone."""
        accounts, _ = create_app_components(use_storage=False)
        accounts.register("alice", "pw1")
        assert not (tmp_path / "u.json").exists()

    def test_pbkdf2_scheme(self, monkeypatch):
        """Test the configured credential scheme is used."""
        monkeypatch.setenv("LEDGER_SECURITY_CREDENTIAL_SCHEME", "pbkdf2")
        monkeypatch.setenv("LEDGER_SECURITY_PBKDF2_ITERATIONS", "1000")
        accounts, _ = create_app_components()
        assert isinstance(accounts._verifier, Pbkdf2Verifier)
        assert accounts.register("alice", "pw1").password.startswith("pbkdf2_sha256$1000$")
