from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def coerce_date(value: Any) -> Optional[date]:
    """Best-effort conversion of a stored date value.

    Drivers and older rows hand back ``date``, ``datetime`` or ISO-like text
    (``2025-03-01``, ``2025-03-01T00:00:00``, ``2025-03-01 08:00:00``).
    Returns None for anything that cannot be read as a calendar day.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) < 10:
            return None
        try:
            return parse_iso_date(text[:10])
        except ValueError:
            return None
    return None


def coerce_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        text = value.strip().replace("T", " ")
        if text.endswith("Z"):
            text = text[:-1]
        for fmt in ("%Y-%m-%d %H:%M:%S.%f", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d"):
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
    return None


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def iter_days(start: date, end: date):
    """Yield every calendar day from start to end, both included."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def format_time(value: Any) -> Optional[str]:
    """Render a marked/responded timestamp as HH:MM, or None if unreadable."""
    dt = coerce_datetime(value)
    if dt is None:
        return None
    return dt.strftime("%H:%M")
