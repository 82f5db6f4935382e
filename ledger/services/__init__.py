"""Services package."""

from ledger.services.storage import (
    JsonFileLedgerStorage,
    JsonFileStore,
    JsonFileUserStorage,
    LedgerStorageInterface,
    StorageCorrupt,
    StorageError,
    StorageWriteFailed,
    UserStorageInterface,
)

__all__ = [
    # Storage services
    "JsonFileLedgerStorage",
    "JsonFileStore",
    "JsonFileUserStorage",
    "LedgerStorageInterface",
    "StorageCorrupt",
    "StorageError",
    "StorageWriteFailed",
    "UserStorageInterface",
]
