"""Google Calendar upcoming-events listing.

Usage:
    from calendar_quickstart.calendar import EventsFetcher

    fetcher = EventsFetcher(api_client, view)
    text = await fetcher.list_events()
"""

from __future__ import annotations

from calendar_quickstart.calendar.events import (
    FETCH_FAILED_MESSAGE,
    NO_EVENTS_MESSAGE,
    EventItem,
    EventsFetcher,
    EventTime,
    FetchResult,
)

__all__ = [
    "EventsFetcher",
    "EventItem",
    "EventTime",
    "FetchResult",
    "NO_EVENTS_MESSAGE",
    "FETCH_FAILED_MESSAGE",
]
