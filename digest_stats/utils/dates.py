"""UTC day arithmetic over `YYYYMMDD` day-obs strings."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

DAY_OBS_FORMAT = "%Y%m%d"


def format_date(instant: datetime) -> str:
    """Format an instant as its UTC calendar day, e.g. ``20260106``."""
    if instant.tzinfo is not None:
        instant = instant.astimezone(UTC)
    return f"{instant.year:04d}{instant.month:02d}{instant.day:02d}"


def offset_date(instant: datetime, days: int) -> datetime:
    """Return a new instant moved by whole days (negative goes back)."""
    return instant + timedelta(days=days)


def parse_date_string(value: str) -> datetime:
    """Parse a `YYYYMMDD` string into UTC midnight.

    Raises:
        ValueError: if the value is not an 8-digit calendar date
    """
    text = str(value).strip()
    if len(text) != 8 or not text.isdigit():
        raise ValueError(f"Expected YYYYMMDD date string, got {value!r}")
    return datetime.strptime(text, DAY_OBS_FORMAT).replace(tzinfo=UTC)


def is_next_day(start_date: str, end_date: str) -> bool:
    """True when `end_date` is exactly one day after `start_date`. Malformed input is False."""
    try:
        day_after = offset_date(parse_date_string(start_date), 1)
    except ValueError:
        return False
    return format_date(day_after) == end_date


def today(offset_days: int = 0, *, now: datetime | None = None) -> str:
    """Current UTC day as `YYYYMMDD`, optionally offset by whole days."""
    current = now or datetime.now(UTC)
    return format_date(offset_date(current, offset_days))
