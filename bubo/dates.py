from __future__ import annotations

import calendar
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from feedparser.datetimes import _parse_date

INVALID_DATE = "Invalid Date"


def struct_to_datetime(value: Any) -> Optional[datetime]:
    """feedparser's *_parsed values are UTC struct_times."""
    if not isinstance(value, time.struct_time):
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    except (OverflowError, ValueError, OSError):
        return None


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a feed date string into a timezone-aware UTC datetime.

    ISO-8601 is tried first, then every format feedparser knows (RFC 822,
    W3C-DTF, ...). Returns None when nothing matches.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    s = value.strip()
    try:
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return struct_to_datetime(_parse_date(s))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def offset_zone(offset_hours: float = 0) -> timezone:
    return timezone(timedelta(hours=offset_hours))


def format_timestamp(dt: Optional[datetime], offset_hours: float = 0) -> str:
    # en-US short date, e.g. 3/7/2024
    if dt is None:
        return INVALID_DATE
    local = dt.astimezone(offset_zone(offset_hours))
    return f"{local.month}/{local.day}/{local.year}"


def now(offset_hours: float = 0) -> datetime:
    """Current wall-clock time at a fixed UTC offset, for the rendered page."""
    return datetime.now(offset_zone(offset_hours))
