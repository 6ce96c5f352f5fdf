"""Normalized calendar provider payloads.

These models decouple the fetch pipeline from the Google Calendar API's
dictionary shapes; see personal_analytics.calendar.parsing.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ProviderCalendar(BaseModel):
    """A calendar visible to the authenticated user."""

    id: str = Field(description="Provider calendar ID")
    name: str = Field(description="Display name (summary) of the calendar")


class ProviderEvent(BaseModel):
    """An event as returned by the provider.

    All-day events carry no start/end timestamps.
    """

    event_id: str | None = Field(default=None, description="Provider event ID")
    title: str = Field(default="", description="Event title")
    start_time: datetime | None = Field(default=None, description="Start timestamp")
    end_time: datetime | None = Field(default=None, description="End timestamp")
    is_all_day: bool = Field(default=False, description="Whether the event spans whole days")
