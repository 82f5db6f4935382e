"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document per store, wrapped in a small
versioned envelope:

    {"format": "personal-ledger/users", "schema_version": 1, "users": {...}}

Because every record is a plain JSON object, loading validates user by
user (or entry by entry for the single-user ledger) and skips only what
is broken, rather than accepting or rejecting the whole file.

TRADEOFFS:
- The whole file is rewritten on every save (fine for personal use)
- No locking: two processes saving the same file race, last writer wins
- Writes go to a temporary file that atomically replaces the target,
  so a failed save never leaves a half-written store behind
"""

import contextlib
import json
import os
import tempfile
from decimal import Decimal
from pathlib import Path
from typing import Any, Union

import structlog
from pydantic import BaseModel, ValidationError

from ledger.exceptions import LedgerError
from ledger.models.entry import Expense, Income, Ledger, User
from ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageCorrupt,
    StorageWriteFailed,
    UserStorageInterface,
)


SCHEMA_VERSION = 1
USERS_FORMAT = "personal-ledger/users"
LEDGER_FORMAT = "personal-ledger/ledger"


logger = structlog.get_logger(__name__)


class JsonFileStore:
    """
    Low-level JSON document reader/writer.

    Handles the envelope, degraded reads and atomic writes. The typed
    stores below turn envelope bodies into models.
    """

    def __init__(self, path: Union[str, Path], format_name: str):
        self._path = Path(path)
        self._format = format_name
        self.diagnostics: list[StorageCorrupt] = []

    @property
    def path(self) -> Path:
        return self._path

    def report(self, reason: str, entry: Any = None) -> None:
        """Record a load problem and log it. Never raises."""
        issue = StorageCorrupt(
            str(self._path),
            reason,
            None if entry is None else str(entry),
        )
        self.diagnostics.append(issue)
        logger.warning(
            "store_degraded",
            path=str(self._path),
            reason=reason,
            entry=issue.entry,
        )

    def read_body(self) -> dict:
        """
        Read the document and return its envelope body.

        Returns an empty dict when the file is missing (not a problem) or
        unusable (recorded in ``diagnostics``).
        """
        self.diagnostics = []

        if not self._path.exists():
            logger.info("store_missing", path=str(self._path))
            return {}

        try:
            raw = self._path.read_text(encoding="utf-8")
            document = json.loads(raw, parse_int=Decimal)
        except (OSError, UnicodeDecodeError, ValueError, RecursionError) as e:
            self.report(f"unreadable store, starting fresh ({e})")
            return {}

        if not isinstance(document, dict):
            self.report("storage format mismatch, starting fresh")
            return {}
        if document.get("format") != self._format:
            self.report(
                f"unexpected format {document.get('format')!r}, starting fresh"
            )
            return {}
        if document.get("schema_version") != SCHEMA_VERSION:
            self.report(
                f"unsupported schema version {document.get('schema_version')!r}, "
                "starting fresh"
            )
            return {}

        return document

    def write_body(self, body: dict) -> None:
        """
        Write ``body`` inside the envelope, atomically.

        Raises:
            StorageWriteFailed: On any OS-level error. The previous file
                (if any) is left untouched.
        """
        document = {
            "format": self._format,
            "schema_version": SCHEMA_VERSION,
            **body,
        }
        directory = self._path.parent

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=directory,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(document, fh, indent=2, ensure_ascii=False)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error("store_save_failed", path=str(self._path), error=str(e))
            raise StorageWriteFailed(str(self._path), str(e)) from e

        logger.debug("store_saved", path=str(self._path))

    def parse_record(self, model: type[BaseModel], record: Any, entry: Any):
        """Validate one record, returning None (and reporting) if malformed."""
        if not isinstance(record, dict):
            self.report("record is not an object", entry)
            return None
        try:
            return model.model_validate(record)
        except (ValidationError, LedgerError) as e:
            self.report(f"malformed record: {_first_line(e)}", entry)
            return None


class JsonFileUserStorage(UserStorageInterface):
    """
    Account store backed by one JSON file.

    Users are stored under their username; a record whose own username
    does not match its key is treated as malformed.
    """

    def __init__(self, path: Union[str, Path]):
        self._store = JsonFileStore(path, USERS_FORMAT)

    @property
    def path(self) -> Path:
        return self._store.path

    @property
    def diagnostics(self) -> list[StorageCorrupt]:
        return self._store.diagnostics

    def load(self) -> dict[str, User]:
        """Load users, skipping malformed ones."""
        body = self._store.read_body()
        if not body:
            return {}

        raw_users = body.get("users")
        if not isinstance(raw_users, dict):
            self._store.report("'users' is not a mapping, starting fresh")
            return {}

        users: dict[str, User] = {}
        for key, record in raw_users.items():
            if not isinstance(key, str) or not key.strip():
                self._store.report("username key is empty", key)
                continue
            user = self._store.parse_record(User, record, key)
            if user is None:
                continue
            if user.username != key:
                self._store.report(
                    f"record username {user.username!r} does not match its key",
                    key,
                )
                continue
            users[key] = user

        logger.info(
            "store_loaded",
            path=str(self.path),
            users=len(users),
            skipped=len(self.diagnostics),
        )
        return users

    def save(self, users: dict[str, User]) -> None:
        """Rewrite the whole account store."""
        self._store.write_body({
            "users": {
                username: user.model_dump(mode="json")
                for username, user in users.items()
            },
        })


class JsonFileLedgerStorage(LedgerStorageInterface):
    """
    Single-user ledger store backed by one JSON file.

    Entries are validated one by one, so a single bad entry costs only
    that entry.
    """

    def __init__(self, path: Union[str, Path]):
        self._store = JsonFileStore(path, LEDGER_FORMAT)

    @property
    def path(self) -> Path:
        return self._store.path

    @property
    def diagnostics(self) -> list[StorageCorrupt]:
        return self._store.diagnostics

    def _load_entries(self, body: dict, field: str, model: type[BaseModel]) -> list:
        raw_entries = body.get(field, [])
        if not isinstance(raw_entries, list):
            self._store.report(f"'{field}' is not a list")
            return []

        entries = []
        for index, record in enumerate(raw_entries):
            entry = self._store.parse_record(model, record, f"{field}[{index}]")
            if entry is not None:
                entries.append(entry)
        return entries

    def load_ledger(self) -> Ledger:
        """Load the ledger, skipping malformed entries."""
        body = self._store.read_body()
        if not body:
            return Ledger()

        ledger = Ledger(
            incomes=self._load_entries(body, "incomes", Income),
            expenses=self._load_entries(body, "expenses", Expense),
        )
        logger.info(
            "ledger_loaded",
            path=str(self.path),
            incomes=len(ledger.incomes),
            expenses=len(ledger.expenses),
            skipped=len(self.diagnostics),
        )
        return ledger

    def save_ledger(self, ledger: Ledger) -> None:
        """Rewrite the whole ledger."""
        self._store.write_body(ledger.model_dump(mode="json"))


def _first_line(error: Exception) -> str:
    return str(error).splitlines()[0] if str(error) else type(error).__name__
