"""
Configuration Management for Finance Manager

Settings come from environment variables (and .env) through pydantic-settings.

DESIGN DECISION: Nothing else reads the environment.
The only external dependency is the record store; the app can run
without it against the in-memory backend (demo mode).
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets record store configuration."""

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
        description="ID of the spreadsheet holding the record tables"
    )

    # Capacity of newly created table worksheets
    worksheet_rows: int = Field(
        default=1000,
        ge=10,
        description="Row capacity for a newly created table worksheet"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """A missing key file only warns: without it the app runs in demo mode."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"No service account key at {v}. "
                "The app will fall back to the in-memory store."
            )
        return v


class AppSettings(BaseSettings):
    """
    Application behaviour settings.

    Storage mode, money, reports and logging. Read from the environment and .env.
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

    # Storage
    use_remote_storage: bool = Field(
        default=True,
        description="Use the Google Sheets record store (False = in-memory)"
    )
    seed_demo_data: bool = Field(
        default=True,
        description="Seed the in-memory store with sample records"
    )

    # Money
    default_currency: str = Field(
        default="USD",
        description="Currency used when a record has none"
    )
    supported_currencies: str = Field(
        default="USD,EUR,GBP,JPY",
        description="Comma-separated list of accepted currency codes"
    )

    # Reports
    report_months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="How many months the monthly trend report covers"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False = console renderer)"
    )

    @field_validator('default_currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def currency_list(self) -> list[str]:
        """Get supported currencies as a list."""
        return [
            code.strip().upper()
            for code in self.supported_currencies.split(",")
            if code.strip()
        ]


class Settings(BaseSettings):
    """
    Root settings container.

    Each section is read from the environment when first asked for.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # A broken Sheets section must not stop the app section from loading

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Process-wide settings.

    Tests change the environment and then call
    get_settings.cache_clear() to pick it up.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Try to load every settings section.

    Returns {section: loaded} plus {section}_error for the ones that failed.
    Shown in the sidebar connection panel.
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
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
