"""
Configuration Management for Personal Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see where data is stored and how credentials are
checked, and ensures bad values are caught at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the ledger files live."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    users_path: Path = Field(
        default=Path("users_data.json"),
        description="Account store (all users and their entries)"
    )
    ledger_path: Path = Field(
        default=Path("ledger_data.json"),
        description="Single-user ledger store"
    )

    @field_validator("users_path", "ledger_path")
    @classmethod
    def validate_not_directory(cls, v: Path) -> Path:
        """A store path must name a file, not an existing directory."""
        if v.is_dir():
            raise ValueError(f"Store path is a directory: {v}")
        return v


class SecuritySettings(BaseSettings):
    """How stored credentials are encoded and checked."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_SECURITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credential_scheme: Literal["plaintext", "pbkdf2"] = Field(
        default="plaintext",
        description="Password storage scheme for new accounts"
    )
    pbkdf2_iterations: int = Field(
        default=240_000,
        ge=1_000,
        description="PBKDF2 iteration count (pbkdf2 scheme only)"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local logs"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def security(self) -> SecuritySettings:
        return SecuritySettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries describing failures.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "security", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
