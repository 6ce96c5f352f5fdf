"""Event ingestion pipeline: fetch one day, append it to the data log."""

from .appender import append
from .fetcher import day_window, fetch_events, resolve_calendars

__all__ = ["append", "day_window", "fetch_events", "resolve_calendars"]
