"""
Timezone-aware datetime helpers.
- Store and compare in UTC in DB.
- API responses and exports expose datetimes as ISO-8601 with Z.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

UTC = timezone.utc


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware). Use for created_at, updated_at, timestamp, etc."""
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """If dt is naive, treat as UTC and return timezone-aware UTC. If already aware, convert to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    else:
        dt = dt.astimezone(UTC)
    return dt


def iso_8601_utc(dt: Optional[datetime]) -> Optional[str]:
    """ISO-8601 with Z for UTC. Naive datetimes (SQLite) are treated as UTC."""
    if dt is None:
        return None
    utc = ensure_utc(dt)
    s = utc.isoformat()
    if s.endswith("+00:00"):
        s = s[:-6] + "Z"
    return s


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a form/JSON timestamp into an aware UTC datetime.

    Accepts datetime, date, or ISO-8601 strings ("2024-01-01",
    "2024-01-01T09:30", "2024-01-01T09:30:00Z"). Blank values return None.

    Raises:
        ValueError: If the string is not a recognizable timestamp
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text))
        except ValueError:
            raise ValueError(f"Invalid timestamp: {value!r}")
    raise ValueError(f"Invalid timestamp: {value!r}")


def day_start(d: date) -> datetime:
    """First instant of a calendar day in UTC."""
    return datetime.combine(d, time.min, tzinfo=UTC)


def next_day_start(d: date) -> datetime:
    """First instant of the following calendar day in UTC (exclusive upper bound)."""
    return day_start(d) + timedelta(days=1)
