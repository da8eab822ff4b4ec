from __future__ import annotations

import json
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest
import requests

from src.backend.v4.integrations.feiertage_client import (
    GERMAN_STATES,
    FeiertageClient,
    HolidaySourceError,
    normalize_years,
    resolve_state_code,
)
from src.backend.v4.integrations.holiday_cache import HolidayCache

BERLIN = ZoneInfo("Europe/Berlin")


class _FakeResp:
    def __init__(self, status_code: int, payload, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text or json.dumps(payload)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


SUCCESS_PAYLOAD = {
    "status": "success",
    "feiertage": [
        {"date": "2024-01-01", "fname": "Neujahr", "be": "1", "all_states": "1"},
        {"date": "2024-03-08", "fname": "Internationaler Frauentag", "be": "1"},
    ],
}


def _client(cache: HolidayCache | None = None) -> FeiertageClient:
    return FeiertageClient(
        base_url="https://get.api-feiertage.de/",
        cache=cache or HolidayCache(),
        timezone=BERLIN,
    )


def test_fetch_holidays_batches_years_into_one_request(monkeypatch) -> None:
    seen = SimpleNamespace(calls=[])

    def fake_request(method, url, headers=None, params=None, timeout=None):
        seen.calls.append((method, url, params))
        return _FakeResp(200, SUCCESS_PAYLOAD)

    monkeypatch.setattr("requests.request", fake_request)

    holidays = _client().fetch_holidays([2024, 2023, 2024], "be")

    assert seen.calls == [
        ("GET", "https://get.api-feiertage.de/", {"years": "2023,2024", "states": "be"})
    ]
    assert [h.name for h in holidays] == ["Neujahr", "Internationaler Frauentag"]
    assert holidays[0].date.isoformat() == "2024-01-01T00:00:00+01:00"
    assert holidays[0].date.tzinfo is BERLIN


def test_fetch_holidays_resolves_state_names(monkeypatch) -> None:
    seen = SimpleNamespace(params=None)

    def fake_request(method, url, headers=None, params=None, timeout=None):
        seen.params = params
        return _FakeResp(200, {"status": "success", "feiertage": []})

    monkeypatch.setattr("requests.request", fake_request)

    assert _client().fetch_holidays([2024], "Bayern") == []
    assert seen.params == {"years": "2024", "states": "by"}


def test_fetch_holidays_uses_cache_until_expiry(monkeypatch) -> None:
    calls = {"n": 0}

    def fake_request(method, url, headers=None, params=None, timeout=None):
        calls["n"] += 1
        return _FakeResp(200, SUCCESS_PAYLOAD)

    monkeypatch.setattr("requests.request", fake_request)

    clock = _Clock()
    client = _client(HolidayCache(ttl_seconds=60, clock=clock))

    first = client.fetch_holidays([2024], "be")
    # Same signature, name or code.
    second = client.fetch_holidays({2024}, "Berlin")
    assert calls["n"] == 1
    assert first == second

    # Different signature misses.
    client.fetch_holidays([2023, 2024], "be")
    assert calls["n"] == 2

    clock.now += 61
    client.fetch_holidays([2024], "be")
    assert calls["n"] == 3

    client.fetch_holidays([2024], "be")
    assert calls["n"] == 3


def test_non_success_status_raises(monkeypatch) -> None:
    def fake_request(method, url, headers=None, params=None, timeout=None):
        return _FakeResp(200, {"status": "error", "message": "Invalid state code"})

    monkeypatch.setattr("requests.request", fake_request)

    with pytest.raises(HolidaySourceError, match="Feiertage API error"):
        _client().fetch_holidays([2024], "XX")


def test_failures_are_not_cached(monkeypatch) -> None:
    responses = [
        _FakeResp(200, {"status": "error"}),
        _FakeResp(200, SUCCESS_PAYLOAD),
    ]

    def fake_request(method, url, headers=None, params=None, timeout=None):
        return responses.pop(0)

    monkeypatch.setattr("requests.request", fake_request)

    client = _client()
    with pytest.raises(HolidaySourceError):
        client.fetch_holidays([2024], "be")
    assert len(client.fetch_holidays([2024], "be")) == 2


def test_transport_failure_raises(monkeypatch) -> None:
    def fake_request(method, url, headers=None, params=None, timeout=None):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr("requests.request", fake_request)

    with pytest.raises(HolidaySourceError, match="request failed"):
        _client().fetch_holidays([2024], "be")


def test_http_error_and_bad_payloads_raise(monkeypatch) -> None:
    responses = [
        _FakeResp(503, {}, text="Service Unavailable"),
        _FakeResp(200, ValueError("no json"), text="<html>"),
        _FakeResp(200, {"status": "success"}),
        _FakeResp(200, {"status": "success", "feiertage": [{"date": "01.01.2024", "fname": "x"}]}),
    ]

    def fake_request(method, url, headers=None, params=None, timeout=None):
        return responses.pop(0)

    monkeypatch.setattr("requests.request", fake_request)

    client = _client()
    with pytest.raises(HolidaySourceError, match="HTTP 503"):
        client.fetch_holidays([2024], "be")
    with pytest.raises(HolidaySourceError, match="invalid JSON"):
        client.fetch_holidays([2024], "be")
    with pytest.raises(HolidaySourceError, match="feiertage"):
        client.fetch_holidays([2024], "be")
    with pytest.raises(HolidaySourceError, match="Malformed holiday entry"):
        client.fetch_holidays([2024], "be")


def test_duplicate_holidays_are_preserved(monkeypatch) -> None:
    payload = {
        "status": "success",
        "feiertage": [
            {"date": "2024-01-01", "fname": "Neujahr"},
            {"date": "2024-01-01", "fname": "New Year"},
        ],
    }
    monkeypatch.setattr(
        "requests.request",
        lambda method, url, headers=None, params=None, timeout=None: _FakeResp(200, payload),
    )

    assert len(_client().fetch_holidays([2024], "be")) == 2


def test_resolve_state_code() -> None:
    assert resolve_state_code("Berlin") == "be"
    assert resolve_state_code("schleswig-holstein") == "sh"
    assert resolve_state_code("BY") == "by"
    assert resolve_state_code("nw") == "nw"
    assert resolve_state_code(" xx ") == "xx"
    assert len(GERMAN_STATES) == 16


def test_normalize_years() -> None:
    assert normalize_years([2024, 2023, 2024]) == (2023, 2024)
    with pytest.raises(ValueError):
        normalize_years([])


def test_from_env_reads_config(monkeypatch) -> None:
    from src.backend.common.config import app_config

    monkeypatch.setattr(app_config.config, "FEIERTAGE_API_URL", "http://localhost:9999/")
    monkeypatch.setattr(app_config.config, "HOLIDAY_CACHE_TTL_SECONDS", 120.0)

    client = FeiertageClient.from_env()

    assert client.cache.ttl_seconds == 120.0
    assert str(client.timezone) == app_config.config.WORKING_DAYS_TIMEZONE
