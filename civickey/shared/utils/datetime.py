"""
UTC datetime utilities for consistent timezone handling.

Stored timestamps are timezone-aware UTC. Calendar dates (event dates,
alert windows) are ISO 'YYYY-MM-DD' strings compared against the
municipality-local "today".
"""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of datetime.now() / datetime.utcnow().
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def local_today(tz_name: str, now: datetime | None = None) -> date:
    """Return today's date in the given IANA timezone."""
    current = ensure_utc(now) if now is not None else utc_now()
    return current.astimezone(ZoneInfo(tz_name)).date()


def parse_iso(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 timestamp ('Z' suffix accepted) into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
