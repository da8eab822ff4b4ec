from __future__ import annotations

import pytest

from src.backend.v4.integrations.holiday_cache import DEFAULT_TTL_SECONDS, HolidayCache


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_default_ttl_is_seven_days() -> None:
    assert DEFAULT_TTL_SECONDS == 604800
    assert HolidayCache().ttl_seconds == 604800


def test_entry_expires_after_ttl_from_insertion() -> None:
    clock = _Clock()
    cache = HolidayCache(ttl_seconds=10, clock=clock)

    cache.set(("2024", "be"), ["x"])
    clock.now = 9.9
    assert cache.get(("2024", "be")) == ["x"]

    clock.now = 10.0
    assert cache.get(("2024", "be")) is None


def test_set_replaces_entry_and_restarts_ttl() -> None:
    clock = _Clock()
    cache = HolidayCache(ttl_seconds=10, clock=clock)

    cache.set("k", "old")
    clock.now = 8
    cache.set("k", "new")
    clock.now = 15
    assert cache.get("k") == "new"
    assert len(cache) == 1


def test_clear_and_missing_keys() -> None:
    cache = HolidayCache()
    assert cache.get("missing") is None

    cache.set("a", 1)
    cache.clear()
    assert len(cache) == 0


def test_negative_ttl_rejected() -> None:
    with pytest.raises(ValueError):
        HolidayCache(ttl_seconds=-1)


def test_expired_entries_are_not_counted() -> None:
    clock = _Clock()
    cache = HolidayCache(ttl_seconds=5, clock=clock)

    cache.set("a", 1)
    clock.now = 3
    cache.set("b", 2)
    clock.now = 6
    assert len(cache) == 1
    assert cache.get("a") is None
    assert cache.get("b") == 2


def test_many_keys_are_kept_until_they_expire() -> None:
    cache = HolidayCache(ttl_seconds=60, clock=_Clock())

    for year in range(1900, 2100):
        cache.set(((year,), "be"), [year])

    assert len(cache) == 200
    assert cache.get(((1900,), "be")) == [1900]
