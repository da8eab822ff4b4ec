"""Public holiday connector for get.api-feiertage.de.

Purpose
- Fetch German public holidays for a set of years and one federal state.
- Batch all requested years into a single upstream call.
- Reuse responses through an injected `HolidayCache` (7 day TTL by default).

No retries: any failure is raised to the caller as `HolidaySourceError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, tzinfo
from typing import Any, Iterable

import requests

from src.backend.common.config.app_config import config
from src.backend.v4.integrations.holiday_cache import HolidayCache

logger = logging.getLogger(__name__)

SUCCESS_STATUS = "success"

GERMAN_STATES: dict[str, str] = {
    "Baden-Württemberg": "bw",
    "Bayern": "by",
    "Berlin": "be",
    "Brandenburg": "bb",
    "Bremen": "hb",
    "Hamburg": "hh",
    "Hessen": "he",
    "Mecklenburg-Vorpommern": "mv",
    "Niedersachsen": "ni",
    "Nordrhein-Westfalen": "nw",
    "Rheinland-Pfalz": "rp",
    "Saarland": "sl",
    "Sachsen": "sn",
    "Sachsen-Anhalt": "st",
    "Schleswig-Holstein": "sh",
    "Thüringen": "th",
}


class HolidaySourceError(Exception):
    """The holiday API failed or answered with a non-success status."""


@dataclass(frozen=True, slots=True)
class Holiday:
    date: datetime
    name: str


def resolve_state_code(state: str) -> str:
    """Map a state name or code to the API's state code.

    Unknown values are returned unchanged (stripped) so the upstream API decides
    whether it knows them.
    """

    value = (state or "").strip()
    lowered = value.lower()
    for name, code in GERMAN_STATES.items():
        if lowered in (name.lower(), code):
            return code
    return value


def normalize_years(years: Iterable[int]) -> tuple[int, ...]:
    out = tuple(sorted({int(y) for y in years}))
    if not out:
        raise ValueError("At least one year is required")
    return out


class FeiertageClient:
    def __init__(
        self,
        *,
        base_url: str,
        cache: HolidayCache,
        timezone: tzinfo,
        timeout_seconds: float = 30,
    ) -> None:
        self._base_url = base_url
        self._cache = cache
        self._timezone = timezone
        self._timeout_seconds = timeout_seconds

    @property
    def timezone(self) -> tzinfo:
        return self._timezone

    @property
    def cache(self) -> HolidayCache:
        return self._cache

    @classmethod
    def from_env(cls, cache: HolidayCache | None = None) -> "FeiertageClient":
        return cls(
            base_url=config.FEIERTAGE_API_URL,
            cache=cache or HolidayCache(ttl_seconds=config.HOLIDAY_CACHE_TTL_SECONDS),
            timezone=config.get_timezone(),
            timeout_seconds=config.HOLIDAY_HTTP_TIMEOUT_SECONDS,
        )

    def _request_json(self, params: dict[str, str]) -> dict[str, Any]:
        try:
            resp = requests.request(
                "GET",
                self._base_url,
                headers={"Accept": "application/json"},
                params=params,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as e:
            raise HolidaySourceError(f"Holiday API request failed: {e}") from e

        if resp.status_code >= 400:
            raise HolidaySourceError(f"Holiday API HTTP {resp.status_code}: {resp.text}")
        try:
            payload = resp.json()
        except ValueError as e:
            raise HolidaySourceError("Holiday API returned invalid JSON") from e
        if not isinstance(payload, dict):
            raise HolidaySourceError("Holiday API returned an unexpected payload")
        return payload

    def _parse_holidays(self, payload: dict[str, Any]) -> list[Holiday]:
        entries = payload.get("feiertage")
        if not isinstance(entries, list):
            raise HolidaySourceError("Holiday API response is missing 'feiertage'")

        holidays: list[Holiday] = []
        for entry in entries:
            try:
                day = datetime.strptime(entry["date"], "%Y-%m-%d").date()
                name = str(entry["fname"])
            except (KeyError, TypeError, ValueError) as e:
                raise HolidaySourceError(f"Malformed holiday entry: {entry!r}") from e
            holidays.append(
                Holiday(
                    date=datetime.combine(day, time(0, 0), tzinfo=self._timezone),
                    name=name,
                )
            )
        return holidays

    def fetch_holidays(self, years: Iterable[int], jurisdiction: str) -> list[Holiday]:
        """Return the holidays of `jurisdiction` for every year in `years`.

        One upstream request covers all years. A fresh cache entry for the same
        (years, jurisdiction) signature skips the network entirely.
        """

        year_key = normalize_years(years)
        state_code = resolve_state_code(jurisdiction)
        cache_key = (year_key, state_code)

        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Holiday cache hit for years=%s state=%s", year_key, state_code)
            return list(cached)

        params = {
            "years": ",".join(str(y) for y in year_key),
            "states": state_code,
        }
        logger.info("Fetching holidays for years=%s state=%s", params["years"], state_code)
        payload = self._request_json(params)

        status = payload.get("status")
        if status != SUCCESS_STATUS:
            raise HolidaySourceError(
                f"Feiertage API error (status={status!r}): {payload.get('message') or payload}"
            )

        holidays = self._parse_holidays(payload)
        logger.info("Received %d holidays for years=%s state=%s", len(holidays), params["years"], state_code)

        self._cache.set(cache_key, tuple(holidays))
        return holidays
