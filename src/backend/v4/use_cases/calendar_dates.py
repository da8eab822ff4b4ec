"""Calendar helpers for working-day statistics.

Every function here accepts and returns timezone-aware ``datetime`` objects and
keeps the caller's ``tzinfo``. Weekdays are always expressed with the
Sunday=0..Saturday=6 index; ``weekday_index`` is the only place that knows
about Python's own Monday=0 numbering.
"""

from __future__ import annotations

import calendar
from datetime import datetime, time, timedelta, tzinfo
from typing import Iterable, Iterator

DAYS: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

DEFAULT_WORKING_DAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
)


def weekday_index(dt: datetime) -> int:
    """Return the Sunday=0 weekday index of `dt`."""

    return (dt.weekday() + 1) % 7


def weekday_name(dt: datetime) -> str:
    return DAYS[weekday_index(dt)]


def normalize_working_days(names: Iterable[str] | None) -> frozenset[int]:
    """Map weekday names to canonical indexes.

    Matching is case-insensitive; duplicates collapse and an empty selection is
    allowed. Unknown names raise ValueError.
    """

    lookup = {d.lower(): i for i, d in enumerate(DAYS)}
    out: set[int] = set()
    for name in names or ():
        idx = lookup.get(str(name).strip().lower())
        if idx is None:
            raise ValueError(f"Unknown weekday: {name!r}")
        out.add(idx)
    return frozenset(out)


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=23, minute=59, second=59, microsecond=999000)


def start_of_month(dt: datetime) -> datetime:
    return start_of_day(dt).replace(day=1)


def end_of_month(dt: datetime) -> datetime:
    last_day = calendar.monthrange(dt.year, dt.month)[1]
    return start_of_day(dt).replace(day=last_day)


def start_of_year(dt: datetime) -> datetime:
    return start_of_day(dt).replace(month=1, day=1)


def end_of_year(dt: datetime) -> datetime:
    return start_of_day(dt).replace(month=12, day=31)


def start_of_iso_week(dt: datetime) -> datetime:
    """Monday of the ISO week containing `dt`."""

    return start_of_day(dt) - timedelta(days=dt.weekday())


def end_of_iso_week(dt: datetime) -> datetime:
    """Sunday of the ISO week containing `dt`."""

    return start_of_iso_week(dt) + timedelta(days=6)


def iso_date_string(dt: datetime) -> str:
    """Return "YYYY-MM-DD" as seen in `dt`'s own offset.

    Two instants are the same calendar day iff these strings are equal.
    """

    return dt.date().isoformat()


def day_range(from_dt: datetime, to_dt: datetime) -> Iterator[datetime]:
    """Yield the start of each calendar day from `from_dt` to `to_dt` inclusive.

    Comparison happens on calendar dates, so the time of day of either bound is
    irrelevant. Nothing is yielded when `from_dt` falls on a later day.
    """

    last = to_dt.date()
    current = from_dt.date()
    tz = from_dt.tzinfo
    while current <= last:
        yield datetime.combine(current, time(0, 0), tzinfo=tz)
        current += timedelta(days=1)


def parse_datetime(value: str, default_tz: tzinfo) -> datetime:
    """Parse an ISO-8601 date or datetime string into an aware datetime.

    Accepts "2024-01-15", "2024-01-15T12:00:00", "2024-01-15T12:00:00Z" and
    explicit offsets. Naive values are placed in `default_tz`.
    """

    text = (value or "").strip()
    if not text:
        raise ValueError("Empty date value")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid ISO date: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz)
    return parsed
