"""Configuration package."""

from ewallet.config.settings import (
    DEFAULT_DOCUMENT_KEY,
    AppSettings,
    ConfigurationError,
    LoggingSettings,
    Settings,
    StorageSettings,
    check_settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_DOCUMENT_KEY",
    "AppSettings",
    "ConfigurationError",
    "LoggingSettings",
    "Settings",
    "StorageSettings",
    "check_settings",
    "get_settings",
    "validate_all_settings",
]
