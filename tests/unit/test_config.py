"""Unit tests for configuration module."""

import pytest

from personal_analytics.config import DEFAULT_TRACKED_CALENDARS, Settings, get_settings
from personal_analytics.exceptions import ConfigurationError


class TestSettings:
    """Test suite for Settings class."""

    def test_default_settings(self) -> None:
        """Test that default settings are properly initialized."""
        settings = Settings()

        assert settings.sheet_id is None
        assert settings.email_cc == ""
        assert settings.tracked_calendars == DEFAULT_TRACKED_CALENDARS
        assert settings.timezone == "UTC"
        assert settings.log_level == "INFO"
        assert settings.debug is False

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test loading settings from environment variables."""
        monkeypatch.setenv("PERSONAL_ANALYTICS_SHEET_ID", "abc123")
        monkeypatch.setenv("PERSONAL_ANALYTICS_TIMEZONE", "Europe/London")
        monkeypatch.setenv("PERSONAL_ANALYTICS_TRACKED_CALENDARS", '["Work", "Gym"]')

        # Clear the cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.sheet_id == "abc123"
        assert settings.timezone == "Europe/London"
        assert settings.tracked_calendars == ["Work", "Gym"]

        # Clean up
        get_settings.cache_clear()

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

        # Clean up
        get_settings.cache_clear()

    def test_settings_are_frozen(self, mock_settings: Settings) -> None:
        """Test that settings cannot change during a run."""
        with pytest.raises(Exception):  # Pydantic ValidationError
            mock_settings.timezone = "Asia/Tokyo"

    def test_require_sheet_id(self, mock_settings: Settings) -> None:
        assert mock_settings.require_sheet_id() == "sheet-123"

        with pytest.raises(ConfigurationError):
            Settings(sheet_id=None).require_sheet_id()

    def test_require_recipient(self, mock_settings: Settings) -> None:
        assert mock_settings.require_recipient() == "me@example.com"

        with pytest.raises(ConfigurationError):
            Settings(email_recipient="").require_recipient()
