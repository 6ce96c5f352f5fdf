"""Custom exceptions for Personal Analytics."""


class PersonalAnalyticsError(Exception):
    """Base exception for all Personal Analytics errors."""


class ConfigurationError(PersonalAnalyticsError):
    """Exception raised for configuration related errors."""


class AuthenticationError(PersonalAnalyticsError):
    """Exception raised for authentication failures."""


class NoCalendarsFoundError(PersonalAnalyticsError):
    """Exception raised when none of the tracked calendars could be resolved."""


class ProviderFetchError(PersonalAnalyticsError):
    """Exception raised for Google Calendar API related errors."""


class StoreError(PersonalAnalyticsError):
    """Exception raised for Google Sheets API related errors."""


class EmailDispatchError(PersonalAnalyticsError):
    """Exception raised when a report email could not be sent."""
