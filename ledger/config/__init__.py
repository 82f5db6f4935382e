"""Configuration package."""

from ledger.config.settings import (
    AppSettings,
    SecuritySettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "SecuritySettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
