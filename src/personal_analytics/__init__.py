"""Personal Analytics - calendar time tracking automation.

This package pulls events from tracked Google Calendars into a Google Sheets
data log, labels them by week, month, quarter and year, and emails the
reports the spreadsheet renders from that log.
"""

__version__ = "0.1.0"

from personal_analytics.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
