"""Date/time helpers.

Timestamps are stored as naive UTC ``DateTime`` values; date-only inputs
(``"2024-02-01"``) are widened to midnight of that day.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive ``datetime`` (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def coerce_datetime(value):
    """Pydantic ``before`` hook: accept ``date`` or ``YYYY-MM-DD`` as midnight."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and len(value.strip()) == 10:
        return datetime.combine(date.fromisoformat(value.strip()), time.min)
    return value


def day_bounds(date_from: date | None, date_to: date | None) -> tuple[datetime | None, datetime | None]:
    """Turn an inclusive date range into ``[start, end)`` datetime bounds.

    ``date.max`` as the last day leaves the range open at the top.
    """
    start = datetime.combine(date_from, time.min) if date_from else None
    if date_to is None or date_to == date.max:
        return start, None
    return start, datetime.combine(date_to + timedelta(days=1), time.min)
