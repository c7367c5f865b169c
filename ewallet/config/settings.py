"""
Configuration Management for eWallet

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, logging output and display formats are the only
knobs the core exposes; everything else is fixed behaviour.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DOCUMENT_KEY = "@eWallet_app_data"


class StorageSettings(BaseSettings):
    """Key-value storage backend configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EWALLET_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["json_file", "memory"] = Field(
        default="json_file",
        description="Which key-value backend holds the persisted document"
    )
    path: Path = Field(
        default=Path.home() / ".ewallet" / "storage.json",
        description="Path to the JSON file backing the key-value store"
    )
    document_key: str = Field(
        default=DEFAULT_DOCUMENT_KEY,
        min_length=1,
        description="Storage key under which the whole document is saved"
    )

    @field_validator('path')
    @classmethod
    def expand_path(cls, v: Path) -> Path:
        """Allow ~ in configured paths."""
        return v.expanduser()


class LoggingSettings(BaseSettings):
    """structlog output configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EWALLET_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render log lines as JSON (False gives console output)"
    )

    @field_validator('level')
    @classmethod
    def normalize_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EWALLET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Display formats
    date_format: str = Field(
        default="%m/%d/%Y",
        description=(
            "strftime format of transaction and report dates; stored dates are "
            "parsed with it, so unpadded values like 1/5/2025 also match"
        )
    )
    weekday_format: str = Field(
        default="%a",
        description="strftime format of weekly report day labels"
    )
    currency_symbol: str = Field(
        default="$",
        description="Prefix used when formatting amounts"
    )

    # New card defaults
    default_credit_limit: float = Field(
        default=5000.0,
        gt=0,
        description="Credit limit used when a credit card is added without one"
    )
    default_payment_date: str = Field(
        default="1st of each month",
        description="Payment date used when a credit card is added without one"
    )
    default_expiry_date: str = Field(
        default="12/28",
        description="Expiry date stamped on newly added cards"
    )

    # Audit trail
    audit_history_size: int = Field(
        default=200,
        ge=0,
        le=10000,
        description="How many audit events are kept in memory"
    )


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
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

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


class ConfigurationError(Exception):
    """One or more settings sections failed validation."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        details = "; ".join(f"{name}: {error}" for name, error in errors.items())
        super().__init__(f"Invalid configuration ({details})")


def validate_all_settings(settings: Optional[Settings] = None) -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus an
    `<name>_error` entry for every section that failed.
    """
    results: dict[str, object] = {}
    settings = settings or get_settings()

    for name in ("storage", "logging", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results


def check_settings(settings: Optional[Settings] = None) -> None:
    """
    Start-up check over every settings section.

    Raises:
        ConfigurationError: naming each section that failed
    """
    results = validate_all_settings(settings)
    errors = {
        name: str(results[f"{name}_error"])
        for name in ("storage", "logging", "app")
        if not results[name]
    }
    if errors:
        raise ConfigurationError(errors)
