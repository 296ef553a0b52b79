"""Configuration package."""

from capital_dashboard.config.settings import (
    AppSettings,
    GoogleSheetsSettings,
    IdentitySettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GoogleSheetsSettings",
    "IdentitySettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
