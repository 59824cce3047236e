"""Calendar-day helpers.

All statistics work on ``datetime.date`` values, which are immutable:
stepping a cursor back a day always produces a new value. Strings are parsed
here, at the boundary, so malformed input never reaches the arithmetic.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Iterator, Optional, Union

from ..errors import MalformedDateError

DayLike = Union[date, datetime, str]
NowLike = Union[date, datetime]


def parse_day(value: DayLike, *, field: Optional[str] = None) -> date:
    """Return the calendar day for ``value``.

    Accepts ``date``, ``datetime`` (time-of-day discarded) and ISO strings.
    Full ISO timestamps are truncated to their date part.

    Raises:
        MalformedDateError: if the value is not a recognizable date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) <= 10:
            try:
                return date.fromisoformat(text)
            except ValueError:
                raise MalformedDateError(value, field=field) from None
        return parse_instant(text, field=field).date()
    raise MalformedDateError(value, field=field)


def format_day(day: date) -> str:
    """Canonical YYYY-MM-DD form."""
    return day.isoformat()


def parse_instant(value: Union[datetime, str], *, field: Optional[str] = None) -> datetime:
    """Return a timezone-aware instant; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise MalformedDateError(value, field=field) from None
    else:
        raise MalformedDateError(value, field=field)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_instant(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def local_day(now: NowLike, tz: Optional[tzinfo] = None) -> date:
    """Collapse ``now`` to a calendar day in the reference timezone.

    A plain ``date`` is returned unchanged. Naive datetimes are assumed to
    already be expressed in the reference zone.
    """
    if isinstance(now, datetime):
        if tz is not None and now.tzinfo is not None:
            return now.astimezone(tz).date()
        return now.date()
    if isinstance(now, date):
        return now
    raise TypeError(f"Expected date or datetime for 'now', got {type(now).__name__}")


def days_between(later: date, earlier: date) -> int:
    """Signed whole-day difference ``later - earlier``."""
    return (later - earlier).days


def sunday_weekday(day: date) -> int:
    """Weekday index with 0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield each day from ``start`` through ``end`` inclusive."""
    cursor = start
    step = timedelta(days=1)
    while cursor <= end:
        yield cursor
        cursor = cursor + step


__all__ = [
    "DayLike",
    "NowLike",
    "days_between",
    "format_day",
    "format_instant",
    "iter_days",
    "local_day",
    "parse_day",
    "parse_instant",
    "sunday_weekday",
]
