"""Tests for registration, login and credential verification."""

import pytest

from ledger.auth import AccountService, Pbkdf2Verifier, PlaintextVerifier, get_verifier
from ledger.exceptions import DuplicateUsername, EmptyUsername, InvalidCredentials, InvalidText
from ledger.models.entry import Budget
from ledger.services.storage import JsonFileUserStorage, StorageWriteFailed
from ledger.session import LedgerSession

from conftest import MemoryUserStorage


class TestRegister:
    """Tests for AccountService.register."""

    def test_register_creates_empty_user(self, accounts):
        """Test a new user has empty lists and a zero budget."""
        user = accounts.register("alice", "pw1")
        assert user.username == "alice"
        assert user.incomes == [] and user.expenses == [] and user.recurring == []
        assert user.budget == Budget()
        assert accounts.users == {"alice": user}

    def test_register_persists(self, accounts, users_path):
        """Test registration is saved immediately."""
        accounts.register("alice", "pw1")
        assert "alice" in JsonFileUserStorage(users_path).load()

    def test_register_strips_username(self, accounts):
        """Test surrounding whitespace is not part of the username."""
        assert accounts.register("  alice  ", "pw1").username == "alice"

    @pytest.mark.parametrize("username", ["", "   "])
    def test_register_rejects_blank_username(self, accounts, users_path, username):
        """Test blank usernames are rejected and nothing is stored."""
        with pytest.raises(EmptyUsername):
            accounts.register(username, "pw1")
        assert accounts.users == {}
        assert not users_path.exists()

    def test_duplicate_username_rejected(self, accounts, users_path):
        """Test registering alice twice keeps the first registration."""
        accounts.register("alice", "pw1")
        with pytest.raises(DuplicateUsername):
            accounts.register("alice", "pw2")

        stored = JsonFileUserStorage(users_path).load()
        assert list(stored) == ["alice"]
        assert stored["alice"].password == "pw1"
        assert accounts.users["alice"].password == "pw1"

    def test_duplicate_rejected_after_reload(self, users_path):
        """Test uniqueness holds across a save/load cycle."""
        AccountService(JsonFileUserStorage(users_path)).register("alice", "pw1")
        reloaded = AccountService(JsonFileUserStorage(users_path))
        with pytest.raises(DuplicateUsername):
            reloaded.register("alice", "pw2")
        assert reloaded.users["alice"].password == "pw1"

    def test_duplicate_check_uses_stripped_name(self, accounts):
        """Test ' alice' collides with 'alice'."""
        accounts.register("alice", "pw1")
        with pytest.raises(DuplicateUsername):
            accounts.register(" alice", "pw2")

    def test_register_save_failure_surfaces(self):
        """Test a failed save is reported while the user stays registered in memory."""
        storage = MemoryUserStorage()
        storage.fail_saves = True
        service = AccountService(storage)
        with pytest.raises(StorageWriteFailed):
            service.register("alice", "pw1")
        assert "alice" in service.users

    def test_register_is_audited(self, accounts, recording_logger):
        """Test registration and rejection produce audit events."""
        accounts.register("alice", "pw1")
        with pytest.raises(DuplicateUsername):
            accounts.register("alice", "pw2")
        types = recording_logger.event_types()
        assert "user_registered" in types
        assert "registration_rejected" in types

    def test_register_rejects_non_text_password(self, accounts, users_path):
        """Test a missing password is a ledger error and nothing is stored."""
        with pytest.raises(InvalidText):
            accounts.register("alice", None)
        assert accounts.users == {}
        assert not users_path.exists()

    def test_register_save_is_audited(self, accounts, recording_logger, users_path):
        """Test a successful registration save logs store_saved with the store path."""
        accounts.register("alice", "pw1")
        level, _, fields = recording_logger.calls[-1]
        assert level == "debug"
        assert fields["event_type"] == "store_saved"
        assert fields["entity_id"] == str(users_path)


class TestLogin:
    """Tests for AccountService.login."""

    def test_login_succeeds(self, accounts):
        """Test correct credentials open a session for the user."""
        user = accounts.register("alice", "pw1")
        session = accounts.login("alice", "pw1")
        assert isinstance(session, LedgerSession)
        assert session.user is user

    def test_login_wrong_password(self, accounts):
        """Test a wrong password fails."""
        accounts.register("alice", "pw1")
        with pytest.raises(InvalidCredentials):
            accounts.login("alice", "pw2")

    def test_login_unknown_user(self, accounts):
        """Test an unknown username fails the same way."""
        with pytest.raises(InvalidCredentials):
            accounts.login("nobody", "pw1")

    def test_login_is_exact_match(self, accounts):
        """Test plaintext comparison is exact, including case and spaces."""
        accounts.register("alice", "pw1")
        for attempt in ("PW1", "pw1 ", " pw1", ""):
            with pytest.raises(InvalidCredentials):
                accounts.login("alice", attempt)

    def test_login_after_reload(self, users_path):
        """Test a user registered in one run can log in the next."""
        AccountService(JsonFileUserStorage(users_path)).register("alice", "pw1")
        session = AccountService(JsonFileUserStorage(users_path)).login("alice", "pw1")
        assert session.username == "alice"

    def test_sessions_are_independent(self, accounts):
        """Test two sessions get distinct correlation ids."""
        accounts.register("alice", "pw1")
        accounts.register("bob", "pw2")
        first = accounts.login("alice", "pw1")
        second = accounts.login("bob", "pw2")
        assert first.correlation_id != second.correlation_id
        assert first.user is not second.user

    def test_failed_login_is_audited(self, accounts, recording_logger):
        """Test failed logins are logged as warnings."""
        with pytest.raises(InvalidCredentials):
            accounts.login("nobody", "pw")
        level, _, kw = recording_logger.calls[-1]
        assert level == "warning"
        assert kw["event_type"] == "login_failed"


class TestLoadDiagnostics:
    """Tests for how the service reports a degraded store."""

    def test_corrupt_store_starts_empty(self, users_path, audit_logger, recording_logger):
        """Test a corrupt store yields an empty user map plus diagnostics."""
        users_path.write_text("corrupt!", encoding="utf-8")
        service = AccountService(JsonFileUserStorage(users_path), audit_logger=audit_logger)
        assert service.users == {}
        assert len(service.load_diagnostics) == 1
        assert "store_degraded" in recording_logger.event_types()

    def test_register_over_corrupt_store(self, users_path):
        """Test registration works after a degraded load and repairs the file."""
        users_path.write_text("corrupt!", encoding="utf-8")
        AccountService(JsonFileUserStorage(users_path)).register("alice", "pw1")
        assert list(JsonFileUserStorage(users_path).load()) == ["alice"]


class TestVerifiers:
    """Tests for credential verifiers."""

    def test_plaintext(self):
        """Test plaintext encode/verify."""
        verifier = PlaintextVerifier()
        stored = verifier.encode("pw1")
        assert stored == "pw1"
        assert verifier.verify(stored, "pw1")
        assert not verifier.verify(stored, "pw2")
        assert not verifier.verify(None, "pw1")

    def test_pbkdf2(self):
        """Test pbkdf2 stores a salted digest and verifies it."""
        verifier = Pbkdf2Verifier(iterations=1_000)
        stored = verifier.encode("pw1")
        assert "pw1" not in stored
        assert stored.startswith("pbkdf2_sha256$1000$")
        assert verifier.verify(stored, "pw1")
        assert not verifier.verify(stored, "pw2")

    def test_pbkdf2_salts_differ(self):
        """Test the same password encodes differently each time."""
        verifier = Pbkdf2Verifier(iterations=1_000)
        assert verifier.encode("pw1") != verifier.encode("pw1")

    @pytest.mark.parametrize("stored", ["pw1", "", "pbkdf2_sha256$x$00$00", "md5$1$00$00"])
    def test_pbkdf2_rejects_foreign_values(self, stored):
        """Test malformed stored values never verify."""
        assert not Pbkdf2Verifier(iterations=1_000).verify(stored, "pw1")

    def test_service_uses_verifier(self, users_path):
        """Test accounts store what the verifier encodes."""
        service = AccountService(
            JsonFileUserStorage(users_path),
            verifier=Pbkdf2Verifier(iterations=1_000),
        )
        user = service.register("alice", "pw1")
        assert user.password != "pw1"
        assert service.login("alice", "pw1").user is user
        with pytest.raises(InvalidCredentials):
            service.login("alice", "pw2")

    def test_get_verifier(self):
        """Test verifier lookup by scheme name."""
        assert isinstance(get_verifier("plaintext"), PlaintextVerifier)
        assert isinstance(get_verifier("pbkdf2", iterations=1_000), Pbkdf2Verifier)
        with pytest.raises(ValueError):
            get_verifier("rot13")
