"""Calendar provider access (Google Calendar API)."""

from .client import CalendarProvider, GoogleCalendarClient

__all__ = ["CalendarProvider", "GoogleCalendarClient"]
