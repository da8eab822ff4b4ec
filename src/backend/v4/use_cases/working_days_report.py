"""Multi-period and explicit-range working-day reports.

Goal
- Fetch holidays once per top-level request.
- Run the period calculator for each window (day / ISO week / month / year), both for
  the full window and for what is left of it from "now".

This module intentionally avoids FastAPI types/exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Protocol

from src.backend.v4.integrations.feiertage_client import Holiday
from src.backend.v4.use_cases.calendar_dates import (
    end_of_day,
    end_of_iso_week,
    end_of_month,
    end_of_year,
    normalize_working_days,
    start_of_day,
    start_of_iso_week,
    start_of_month,
    start_of_year,
)
from src.backend.v4.use_cases.working_days_stats import (
    StatsReport,
    compute_stats_for_selection,
)


class InvalidWindowError(ValueError):
    """Raised in strict mode when a range starts after it ends."""


class HolidaySource(Protocol):
    def fetch_holidays(self, years: Iterable[int], jurisdiction: str) -> list[Holiday]: ...


@dataclass(frozen=True, slots=True)
class WithRemaining:
    all: StatsReport
    remaining: StatsReport

    def to_dict(self, include_breakdown: bool = True) -> dict[str, Any]:
        return {
            "all": self.all.to_dict(include_breakdown),
            "remaining": self.remaining.to_dict(include_breakdown),
        }


@dataclass(frozen=True, slots=True)
class MultiPeriodReport:
    day: WithRemaining
    week: WithRemaining
    month: WithRemaining
    year: WithRemaining

    def to_dict(self, include_breakdown: bool = True) -> dict[str, Any]:
        return {
            "day": self.day.to_dict(include_breakdown),
            "week": self.week.to_dict(include_breakdown),
            "month": self.month.to_dict(include_breakdown),
            "year": self.year.to_dict(include_breakdown),
        }


PeriodBounds = Callable[[datetime], tuple[datetime, datetime]]

PERIODS: dict[str, PeriodBounds] = {
    "day": lambda d: (start_of_day(d), end_of_day(d)),
    "week": lambda d: (start_of_iso_week(d), end_of_iso_week(d)),
    "month": lambda d: (start_of_month(d), end_of_month(d)),
    "year": lambda d: (start_of_year(d), end_of_year(d)),
}


def compute_with_remaining(
    holidays: list[Holiday],
    from_date: datetime,
    to_date: datetime,
    selection: frozenset[int],
    *,
    now: datetime,
) -> WithRemaining:
    """Full-window stats plus stats for [now, to_date].

    `remaining` is empty once `now` has passed the window end.
    """

    return WithRemaining(
        all=compute_stats_for_selection(holidays, from_date, to_date, selection),
        remaining=compute_stats_for_selection(holidays, now, to_date, selection),
    )


def period_bounds(reference_date: datetime) -> dict[str, tuple[datetime, datetime]]:
    """Window bounds for every period around `reference_date`."""

    return {period: bounds(reference_date) for period, bounds in PERIODS.items()}


def compute_multi_period_report(
    reference_date: datetime,
    jurisdiction: str,
    working_days: Iterable[str],
    *,
    holiday_client: HolidaySource,
    now: datetime | None = None,
) -> MultiPeriodReport:
    """Day, week, month and year statistics around `reference_date`.

    Holidays are fetched once, for every year any window touches (an ISO week
    can reach into the neighbouring year). `now` defaults to the current
    instant in the reference date's timezone.
    """

    selection = normalize_working_days(working_days)

    if now is None:
        now = datetime.now(reference_date.tzinfo)

    windows = period_bounds(reference_date)
    years = {bound.year for bounds in windows.values() for bound in bounds}
    holidays = holiday_client.fetch_holidays(years, jurisdiction)

    return MultiPeriodReport(
        **{
            period: compute_with_remaining(holidays, first, last, selection, now=now)
            for period, (first, last) in windows.items()
        }
    )


def validate_window(from_date: datetime, to_date: datetime) -> None:
    if from_date.date() > to_date.date():
        raise InvalidWindowError(
            f"from_date {from_date.date().isoformat()} is after to_date {to_date.date().isoformat()}"
        )


def compute_range_report(
    from_date: datetime,
    to_date: datetime,
    jurisdiction: str,
    working_days: Iterable[str],
    *,
    holiday_client: HolidaySource,
    strict: bool = False,
) -> StatsReport:
    """Statistics for an explicit [from_date, to_date] range.

    Every year touched by either bound is fetched in one call. By default an
    inverted range gives an empty report; `strict=True` raises
    InvalidWindowError instead, before anything is fetched.
    """

    selection = normalize_working_days(working_days)

    if strict:
        validate_window(from_date, to_date)

    holidays = holiday_client.fetch_holidays({from_date.year, to_date.year}, jurisdiction)
    return compute_stats_for_selection(holidays, from_date, to_date, selection)
