"""Shared fixtures for the ledger tests."""

import pytest

from ledger.audit import AuditLogger
from ledger.auth import AccountService
from ledger.models.entry import User
from ledger.services.storage import (
    JsonFileUserStorage,
    StorageWriteFailed,
    UserStorageInterface,
)


class RecordingLogger:
    """Stands in for a structlog logger and keeps every call."""

    def __init__(self):
        self.calls = []

    def _record(self, level, event, **kw):
        self.calls.append((level, event, kw))

    def debug(self, event, **kw):
        self._record("debug", event, **kw)

    def info(self, event, **kw):
        self._record("info", event, **kw)

    def warning(self, event, **kw):
        self._record("warning", event, **kw)

    def error(self, event, **kw):
        self._record("error", event, **kw)

    def event_types(self):
        return [kw.get("event_type") for _, _, kw in self.calls]


class MemoryUserStorage(UserStorageInterface):
    """In-memory store that can be told to fail on save."""

    def __init__(self, users=None):
        self.diagnostics = []
        self.fail_saves = False
        self.save_count = 0
        self.saved = dict(users or {})

    def load(self) -> dict[str, User]:
        return {name: user.model_copy(deep=True) for name, user in self.saved.items()}

    def save(self, users: dict[str, User]) -> None:
        if self.fail_saves:
            raise StorageWriteFailed("memory", "disk full")
        self.save_count += 1
        self.saved = {name: user.model_copy(deep=True) for name, user in users.items()}


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def audit_logger(recording_logger):
    return AuditLogger(logger=recording_logger)


@pytest.fixture
def users_path(tmp_path):
    return tmp_path / "users_data.json"


@pytest.fixture
def accounts(users_path, audit_logger):
    return AccountService(JsonFileUserStorage(users_path), audit_logger=audit_logger)


@pytest.fixture
def memory_storage():
    return MemoryUserStorage()


@pytest.fixture
def session(memory_storage, audit_logger):
    service = AccountService(memory_storage, audit_logger=audit_logger)
    service.register("alice", "pw1")
    return service.login("alice", "pw1")
