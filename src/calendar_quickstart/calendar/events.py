"""Upcoming-events fetching and formatting."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from calendar_quickstart.google.api_client import ApiClient

if TYPE_CHECKING:
    from calendar_quickstart.view import View

logger = logging.getLogger(__name__)

NO_EVENTS_MESSAGE = "No events found."
FETCH_FAILED_MESSAGE = "Error while fetching events."

MAX_RESULTS = 10
UNTITLED = "(No title)"
UNKNOWN_START = "no start time"


@dataclass
class EventTime:
    """Start or end of an event: a dateTime for timed events, a date for all-day ones."""

    date_time: str | None = None
    date: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> EventTime:
        if not isinstance(data, dict):
            raise ValueError(f"Event time must be an object, got {type(data).__name__}")
        # A start object with neither field still renders; a missing start does not.
        return cls(date_time=data.get("dateTime"), date=data.get("date"))

    @property
    def is_all_day(self) -> bool:
        return not self.date_time

    def display(self) -> str:
        return self.date_time or self.date or UNKNOWN_START


@dataclass
class EventItem:
    """Represents one event from events.list."""

    summary: str
    start: EventTime
    id: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> EventItem:
        if not isinstance(data, dict):
            raise ValueError(f"Event must be an object, got {type(data).__name__}")
        return cls(
            summary=data.get("summary") or UNTITLED,
            start=EventTime.from_dict(data.get("start")),
            id=data.get("id"),
        )

    def display(self) -> str:
        """Format as "<summary> (<start>)"."""
        return f"{self.summary} ({self.start.display()})"


@dataclass
class FetchResult:
    """Parsed events.list response."""

    items: list[EventItem]

    @classmethod
    def from_response(cls, response: Any) -> FetchResult:
        """Validate an events.list response body.

        Raises:
            ValueError: If the response or any item is malformed.
        """
        if not isinstance(response, dict):
            raise ValueError(f"Response must be an object, got {type(response).__name__}")
        items = response.get("items") or []
        if not isinstance(items, list):
            raise ValueError("Response items must be a list")
        return cls(items=[EventItem.from_dict(item) for item in items])

    def display(self) -> str:
        if not self.items:
            return NO_EVENTS_MESSAGE
        return "\n".join(item.display() for item in self.items)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_time_min(now: datetime) -> str:
    """Format a timestamp the way the API expects timeMin (UTC, milliseconds, Z)."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class EventsFetcher:
    """Fetches the next events on the primary calendar into the view.

    The caller must make sure the API client is initialized and has a token
    attached; this is not re-checked here.
    """

    def __init__(
        self,
        api_client: ApiClient,
        view: View,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._api = api_client
        self._view = view
        self._clock = clock

    def query(self) -> dict[str, Any]:
        return {
            "calendarId": "primary",
            "timeMin": format_time_min(self._clock()),
            "showDeleted": False,
            "singleEvents": True,
            "maxResults": MAX_RESULTS,
            "orderBy": "startTime",
        }

    async def list_events(self) -> str:
        """Fetch upcoming events and show them.

        Returns:
            The text shown in the view. Failures yield FETCH_FAILED_MESSAGE.
        """
        try:
            response = await asyncio.to_thread(self._api.list_events, **self.query())
            text = FetchResult.from_response(response).display()
        except Exception as e:
            logger.error(f"Failed to fetch events: {e}")
            text = FETCH_FAILED_MESSAGE

        self._view.show_events(text)
        return text
