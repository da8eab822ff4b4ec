"""Working-day and holiday statistics for a single date window.

No network calls here: the holiday list is fetched by the integration layer and
passed in. All comparisons happen at calendar-day granularity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

from src.backend.v4.integrations.feiertage_client import Holiday
from src.backend.v4.use_cases.calendar_dates import (
    DAYS,
    day_range,
    iso_date_string,
    normalize_working_days,
    weekday_index,
)


@dataclass(frozen=True, slots=True)
class EnrichedDay:
    date: datetime
    day: str
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"date": self.date.isoformat(), "day": self.day}
        if self.name is not None:
            out["name"] = self.name
        return out


@dataclass(frozen=True, slots=True)
class PeriodStats:
    total: int
    days: tuple[EnrichedDay, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "days": [d.to_dict() for d in self.days]}


@dataclass(frozen=True, slots=True)
class StatsTotals:
    working_days: int
    holidays: int
    working_days_excluding_public_holidays: int

    def to_dict(self) -> dict[str, int]:
        return {
            "workingDays": self.working_days,
            "holidays": self.holidays,
            "workingDaysExcludingPublicHolidays": self.working_days_excluding_public_holidays,
        }


@dataclass(frozen=True, slots=True)
class StatsReport:
    totals: StatsTotals
    working_days: PeriodStats = field(default_factory=lambda: PeriodStats(total=0))
    holidays: PeriodStats = field(default_factory=lambda: PeriodStats(total=0))

    def to_dict(self, include_breakdown: bool = True) -> dict[str, Any]:
        out: dict[str, Any] = {"totals": self.totals.to_dict()}
        if include_breakdown:
            out["workingDays"] = self.working_days.to_dict()
            out["holidays"] = self.holidays.to_dict()
        return out


def empty_report() -> StatsReport:
    return StatsReport(totals=StatsTotals(0, 0, 0))


def collect_working_days(
    from_date: datetime, to_date: datetime, working_days: frozenset[int]
) -> PeriodStats:
    days = tuple(
        EnrichedDay(date=d, day=DAYS[weekday_index(d)])
        for d in day_range(from_date, to_date)
        if weekday_index(d) in working_days
    )
    return PeriodStats(total=len(days), days=days)


def collect_holidays(
    from_date: datetime, to_date: datetime, holidays: Iterable[Holiday]
) -> PeriodStats:
    """Holidays whose calendar day lies in [from_date, to_date], any weekday."""

    first, last = from_date.date(), to_date.date()
    days = tuple(
        EnrichedDay(date=h.date, day=DAYS[weekday_index(h.date)], name=h.name)
        for h in holidays
        if first <= h.date.date() <= last
    )
    return PeriodStats(total=len(days), days=days)


def compute_stats(
    holidays: Iterable[Holiday],
    from_date: datetime,
    to_date: datetime,
    working_days: Iterable[str],
) -> StatsReport:
    """Count working days, holidays and working days that are not holidays.

    A window whose start falls on a later calendar day than its end is empty.
    """

    return compute_stats_for_selection(
        holidays, from_date, to_date, normalize_working_days(working_days)
    )


def compute_stats_for_selection(
    holidays: Iterable[Holiday],
    from_date: datetime,
    to_date: datetime,
    selection: frozenset[int],
) -> StatsReport:
    """`compute_stats` with an already normalized weekday index set."""

    if from_date.date() > to_date.date():
        return empty_report()

    working = collect_working_days(from_date, to_date, selection)
    holiday_stats = collect_holidays(from_date, to_date, holidays)

    holiday_keys = {iso_date_string(h.date) for h in holiday_stats.days}
    excluding = sum(1 for d in working.days if iso_date_string(d.date) not in holiday_keys)

    return StatsReport(
        totals=StatsTotals(
            working_days=working.total,
            holidays=holiday_stats.total,
            working_days_excluding_public_holidays=excluding,
        ),
        working_days=working,
        holidays=holiday_stats,
    )
