"""Clock helpers so progress and summary code agree on what "today" is."""

from __future__ import annotations

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return the current timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Return the current UTC calendar day."""
    return utc_now().date()
