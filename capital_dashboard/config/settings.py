"""
Configuration Management for Personal Capital Dashboard

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets document store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # One worksheet per collection
    months_sheet_name: str = Field(
        default="Months",
        description="Name of the sheet for monthly ledger entries"
    )
    categories_sheet_name: str = Field(
        default="Categories",
        description="Name of the sheet for expense categories"
    )
    profiles_sheet_name: str = Field(
        default="Profiles",
        description="Name of the sheet for user profiles"
    )
    investment_sheet_name: str = Field(
        default="InvestmentPlans",
        description="Name of the sheet for investment plans"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class IdentitySettings(BaseSettings):
    """
    Identity of the signed-in user.

    Authentication itself is delegated to an external identity provider;
    the dashboard only receives the opaque user identifier it produced.
    Leaving DASHBOARD_USER_ID unset means the visitor is anonymous.
    """

    model_config = SettingsConfigDict(
        env_prefix="DASHBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    user_id: Optional[str] = Field(
        default=None,
        description="Opaque authenticated user identifier"
    )
    email: str = Field(
        default="",
        description="Email of the signed-in user"
    )
    display_name: Optional[str] = Field(
        default=None,
        description="Display name of the signed-in user"
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

    # Environment
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
        pattern="^(DEBUG|INFO|WARNING|ERROR)$",
        description="Minimum level for structured logs"
    )

    # Display
    display_locale: str = Field(
        default="it",
        pattern="^(it|en)$",
        description="Locale for month labels"
    )
    default_start_year: int = Field(
        default=2025,
        ge=1900,
        le=2200,
        description="Projection start year when the ledger is empty"
    )
    wealth_alignment: str = Field(
        default="positional",
        pattern="^(positional|calendar)$",
        description="How ledger and projection rows are paired in the global view"
    )

    # Demo data for anonymous visitors
    demo_initial_capital: float = Field(
        default=5000.0,
        description="Starting capital of the generated demo ledger"
    )
    demo_base_net_salary: float = Field(
        default=2200.0,
        ge=0.0,
        description="Base net salary of the generated demo ledger"
    )
    demo_base_gross_salary: float = Field(
        default=3100.0,
        ge=0.0,
        description="Base gross salary of the generated demo ledger"
    )
    demo_months: int = Field(
        default=12,
        ge=1,
        le=120,
        description="Number of months in the generated demo ledger"
    )
    demo_seed: Optional[int] = Field(
        default=None,
        description="Random seed for demo data (None = different every run)"
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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def identity(self) -> IdentitySettings:
        return IdentitySettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


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
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.google_sheets
        results["google_sheets"] = True
    except Exception as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)

    try:
        _ = settings.identity
        results["identity"] = True
    except Exception as e:
        results["identity"] = False
        results["identity_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
