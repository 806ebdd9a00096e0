"""
Configuration Management for Points Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The admin code, the storage backend and the date formats are the only
knobs. Base points and the catalogs are fixed data, not configuration.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Ledger and admin gate settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="POINTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    admin_code: SecretStr = Field(
        default=SecretStr("102030"),
        description="Shared code that unlocks changes for the session"
    )
    storage_backend: Literal["memory", "json"] = Field(
        default="json",
        description="Where monthly ledgers are persisted"
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory for the json storage backend"
    )
    date_format: str = Field(
        default="%m/%d/%Y",
        description="strftime format for new entry dates"
    )
    period_key_format: str = Field(
        default="%B %Y",
        description="strftime format for the monthly period key"
    )

    @field_validator('admin_code')
    @classmethod
    def validate_admin_code(cls, v: SecretStr) -> SecretStr:
        """An empty code would unlock on an empty submission."""
        if not v.get_secret_value():
            raise ValueError("Admin code must not be empty")
        return v


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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    The data directory is only checked for the json backend.
    """
    results = {}

    settings = get_settings()

    try:
        ledger = settings.ledger
        results["ledger"] = True
    except Exception as e:
        results["ledger"] = False
        results["ledger_error"] = str(e)
        return results

    if ledger.storage_backend == "json":
        # A missing directory is created on first save
        if ledger.data_dir.exists() and not ledger.data_dir.is_dir():
            results["data_dir"] = False
            results["data_dir_error"] = f"{ledger.data_dir} is not a directory"
        else:
            results["data_dir"] = True

    return results
