"""Configuration management for Personal Analytics.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files and is
frozen once loaded, so a single run always sees the same tracking setup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from personal_analytics.exceptions import ConfigurationError

DEFAULT_TRACKED_CALENDARS = [
    "College",
    "Morning & personal routine",
    "Productivity & Work",
    "Sleep",
    "Tennis & Health",
    "Unproductive",
]

DEFAULT_PRODUCTIVE_CALENDARS = [
    "College",
    "Productivity & Work",
    "Morning & personal routine",
    "Tennis & Health",
]

DEFAULT_UNPRODUCTIVE_CALENDARS = ["Unproductive"]

DEFAULT_GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/gmail.send",
]


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the PERSONAL_ANALYTICS_ prefix (e.g., PERSONAL_ANALYTICS_SHEET_ID).
    List settings are given as JSON arrays.
    """

    model_config = SettingsConfigDict(
        env_prefix="PERSONAL_ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Spreadsheet / report delivery
    sheet_id: str | None = Field(
        default=None,
        description="ID of the Google Sheet holding the data log (from its URL: /d/<ID>/edit)",
    )
    email_recipient: str | None = Field(
        default=None,
        description="Email address that receives the reports",
    )
    email_cc: str = Field(
        default="",
        description="Optional address to CC on reports",
    )

    # Tracking
    tracked_calendars: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TRACKED_CALENDARS),
        description="Exact (case-sensitive) names of the calendars to ingest",
    )
    productive_calendars: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PRODUCTIVE_CALENDARS),
        description="Calendars counted as productive by the report formulas",
    )
    unproductive_calendars: list[str] = Field(
        default_factory=lambda: list(DEFAULT_UNPRODUCTIVE_CALENDARS),
        description="Calendars counted as unproductive by the report formulas",
    )
    timezone: str = Field(
        default="UTC",
        description="IANA timezone used for day windows and period labels",
    )

    # Google OAuth
    google_credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="Path to the Google OAuth client secrets file",
    )
    google_token_path: Path = Field(
        default=Path("token.json"),
        description="Path to the stored Google OAuth token",
    )
    google_scopes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GOOGLE_SCOPES),
        description=(
            "OAuth scopes requested for the shared token. Calendar is only read; "
            "Sheets needs write access for the data log; Gmail only sends."
        ),
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    def require_sheet_id(self) -> str:
        """Return the configured sheet ID.

        Raises:
            ConfigurationError: If no sheet ID is configured.
        """
        if not self.sheet_id:
            raise ConfigurationError(
                "No sheet ID configured. Set PERSONAL_ANALYTICS_SHEET_ID."
            )
        return self.sheet_id

    def require_recipient(self) -> str:
        """Return the configured report recipient.

        Raises:
            ConfigurationError: If no recipient is configured.
        """
        if not self.email_recipient:
            raise ConfigurationError(
                "No report recipient configured. Set PERSONAL_ANALYTICS_EMAIL_RECIPIENT."
            )
        return self.email_recipient


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
