"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a JSON file as the backend, but designed to be swappable.
"""

from ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageCorrupt,
    StorageError,
    StorageWriteFailed,
    UserStorageInterface,
)
from ledger.services.storage.json_file import (
    JsonFileLedgerStorage,
    JsonFileStore,
    JsonFileUserStorage,
)

__all__ = [
    # Interfaces
    "LedgerStorageInterface",
    "UserStorageInterface",
    # Exceptions
    "StorageCorrupt",
    "StorageError",
    "StorageWriteFailed",
    # JSON file implementation
    "JsonFileLedgerStorage",
    "JsonFileStore",
    "JsonFileUserStorage",
]
