"""Date and time helpers for windowed queries.

All arithmetic happens on timezone-aware UTC datetimes. Naive inputs are
assumed to already be UTC.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

TimestampLike = datetime | str


def to_utc(value: TimestampLike) -> datetime:
    """Normalize an ISO-8601 string or datetime to an aware UTC datetime."""
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def calculate_range(center: TimestampLike, window_minutes: float) -> tuple[datetime, datetime]:
    """Return ``(center - window, center + window)``."""
    moment = to_utc(center)
    delta = timedelta(minutes=float(window_minutes))
    return moment - delta, moment + delta


class DateTimeParts:
    """UTC calendar and clock components of a timestamp.

    ``year`` is an int; ``month``, ``day``, ``hour`` and ``minute`` are
    zero-padded two-character strings, ready to be dropped into archive paths.
    """

    def __init__(self, timestamp: TimestampLike, hours_to_add: float = 0) -> None:
        moment = to_utc(timestamp)
        if hours_to_add:
            moment = moment + timedelta(hours=hours_to_add)
        self.date = moment

    def __repr__(self) -> str:
        return f"DateTimeParts({self.date.isoformat()})"

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def month(self) -> str:
        return f"{self.date.month:02d}"

    @property
    def day(self) -> str:
        return f"{self.date.day:02d}"

    @property
    def hour(self) -> str:
        return f"{self.date.hour:02d}"

    @property
    def minute(self) -> str:
        return f"{self.date.minute:02d}"


def _parts(value: DateTimeParts | TimestampLike) -> DateTimeParts:
    return value if isinstance(value, DateTimeParts) else DateTimeParts(value)


def is_in_range(hhmm: str, start: DateTimeParts | TimestampLike, end: DateTimeParts | TimestampLike) -> bool:
    """Check whether an ``HHMM`` string falls inside ``[start, end]``.

    Only meaningful within a single calendar day; callers split multi-day
    ranges first.
    """
    s = _parts(start)
    e = _parts(end)
    candidate = int(hhmm[:2]) * 60 + int(hhmm[-2:])
    start_minutes = int(s.hour) * 60 + int(s.minute)
    end_minutes = int(e.hour) * 60 + int(e.minute)
    return start_minutes <= candidate <= end_minutes


def is_different_day(a: TimestampLike, b: TimestampLike) -> bool:
    return to_utc(a).date() != to_utc(b).date()


def utc_midnight_after(value: TimestampLike) -> datetime:
    """Return the UTC midnight that ends *value*'s calendar day."""
    moment = to_utc(value)
    start_of_day = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return start_of_day + timedelta(days=1)
