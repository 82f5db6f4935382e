"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the JSON file for a database later
2. Substitute failing or in-memory stores in tests
3. Keep account and ledger logic decoupled from the file format

The contract is deliberately lopsided:
- load() NEVER raises. Missing or corrupt data degrades to an empty or
  partial result, and each problem is recorded as a diagnostic.
- save() raises StorageWriteFailed on I/O errors, and must leave the
  previously saved state loadable.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ledger.exceptions import LedgerError
from ledger.models.entry import Ledger, User


class StorageError(LedgerError):
    """Base exception for storage operations."""
    pass


class StorageCorrupt(StorageError):
    """
    Part or all of the persisted data could not be read.

    This is a diagnostic, not a failure: load() records these and carries
    on with whatever it could read.
    """

    def __init__(self, path: str, reason: str, entry: Optional[str] = None):
        self.path = path
        self.reason = reason
        self.entry = entry
        where = f" (entry {entry!r})" if entry is not None else ""
        super().__init__(f"Could not load {path}{where}: {reason}")


class StorageWriteFailed(StorageError):
    """The store could not be written. Previously saved data is intact."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error saving {path}: {reason}")


class UserStorageInterface(ABC):
    """
    Abstract interface for the account store: a map of username to User.
    """

    diagnostics: list[StorageCorrupt]

    @abstractmethod
    def load(self) -> dict[str, User]:
        """
        Read every stored user.

        Returns:
            Mapping of username to User. Empty if nothing is stored or the
            store is unreadable; malformed users are left out.
        """
        pass

    @abstractmethod
    def save(self, users: dict[str, User]) -> None:
        """
        Replace the stored users with ``users``.

        Raises:
            StorageWriteFailed: If the write fails
        """
        pass


class LedgerStorageInterface(ABC):
    """
    Abstract interface for the single-user ledger store.
    """

    diagnostics: list[StorageCorrupt]

    @abstractmethod
    def load_ledger(self) -> Ledger:
        """
        Read the stored ledger.

        Returns:
            The ledger, empty if nothing is stored or the store is
            unreadable; malformed entries are left out.
        """
        pass

    @abstractmethod
    def save_ledger(self, ledger: Ledger) -> None:
        """
        Replace the stored ledger.

        Raises:
            StorageWriteFailed: If the write fails
        """
        pass
