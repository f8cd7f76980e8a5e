"""Tests for the weatherapi.com forecast client request shape and normalization."""

from __future__ import annotations

import asyncio
import logging
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from forecast_viewer.exceptions import DecodeError, HTTPError, TransportError
from forecast_viewer.weather.models import ForecastSnapshot
from forecast_viewer.weather.weatherapi import WeatherAPIClient

ICON = "//cdn.weatherapi.com/weather/64x64/day/116.png"


def _make_settings(**overrides: Any) -> Any:
    defaults = {
        "weather_api_key": "test-key-123",
        "weather_api_base_url": "https://api.weatherapi.com/",
        "weather_forecast_endpoint": "/v1/forecast.json",
        "weather_forecast_days": 7,
        "weather_lang": "ru",
        "weather_timeout_seconds": 5.0,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _hour(epoch: int, label: str, temp: float) -> dict[str, Any]:
    return {"time_epoch": epoch, "time": label, "temp_c": temp, "condition": {"icon": ICON}}


def _payload(**current_overrides: Any) -> dict[str, Any]:
    current = {"temp_c": -3.5, "condition": {"text": "Переменная облачность", "icon": ICON}}
    current.update(current_overrides)
    return {
        "location": {"name": "Москва", "region": "Moscow City", "lat": 55.75, "lon": 37.62},
        "current": current,
        "forecast": {
            "forecastday": [
                {
                    "date_epoch": 1771977600,
                    "day": {"mintemp_c": -7.2, "maxtemp_c": -1.4, "condition": {"icon": ICON}},
                    "hour": [
                        _hour(1771977600, "2026-02-25 00:00", -6.1),
                        _hour(1771981200, "2026-02-25 01:00", -6.4),
                    ],
                },
                {
                    "date_epoch": 1772064000,
                    "day": {"mintemp_c": -9.0, "maxtemp_c": 0.3, "condition": {"icon": ICON}},
                    "hour": [_hour(1772064000, "2026-02-26 00:00", -8.8)],
                },
            ]
        },
        "alerts": {"alert": []},
    }


def _make_client(handler: Any, **settings_overrides: Any) -> WeatherAPIClient:
    transport = httpx.MockTransport(handler)
    return WeatherAPIClient(
        settings=_make_settings(**settings_overrides),
        logger=logging.getLogger("test_weatherapi_client"),
        client=httpx.AsyncClient(transport=transport),
    )


def _fetch(client: WeatherAPIClient, query: str) -> ForecastSnapshot:
    async def scenario() -> ForecastSnapshot:
        async with client:
            return await client.fetch(query)

    return asyncio.run(scenario())


def test_request_uses_fixed_parameters_and_passes_query_verbatim() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_payload())

    _fetch(_make_client(handler), "55.75,37.62")

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "GET"
    assert request.url.host == "api.weatherapi.com"
    assert request.url.path == "/v1/forecast.json"
    assert dict(request.url.params) == {
        "key": "test-key-123",
        "q": "55.75,37.62",
        "days": "7",
        "lang": "ru",
        "aqi": "no",
        "alerts": "no",
    }


def test_place_name_query_is_not_validated_or_rewritten() -> None:
    queries: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        queries.append(request.url.params["q"])
        return httpx.Response(200, json=_payload())

    _fetch(_make_client(handler), "Санкт-Петербург")
    assert queries == ["Санкт-Петербург"]


def test_payload_is_normalized_without_rounding() -> None:
    snapshot = _fetch(_make_client(lambda request: httpx.Response(200, json=_payload())), "Moscow")

    assert snapshot.location.name == "Москва"
    assert snapshot.location.latitude == 55.75
    assert snapshot.current.temperature_c == -3.5
    assert snapshot.current.condition_text == "Переменная облачность"
    assert snapshot.current.condition_icon_ref == ICON
    assert snapshot.current.icon_url == "https:" + ICON

    assert [day.date_epoch for day in snapshot.days] == [1771977600, 1772064000]
    first_day = snapshot.days[0]
    assert first_day.min_temp_c == -7.2
    assert first_day.max_temp_c == -1.4
    assert [hour.timestamp_epoch for hour in first_day.hours] == [1771977600, 1771981200]
    assert first_day.hours[1].temperature_c == -6.4
    assert first_day.hours[1].local_time_label == "2026-02-25 01:00"
    assert first_day.hours[1].hour_label == "01:00"


def test_non_2xx_status_raises_http_error_with_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": {"code": 2008, "message": "API key disabled"}})

    with pytest.raises(HTTPError) as exc_info:
        _fetch(_make_client(handler), "Moscow")
    assert exc_info.value.status_code == 403
    assert "403" in str(exc_info.value)


def test_network_failure_raises_transport_error_without_leaking_key() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError(f"connection refused for {request.url}", request=request)

    with pytest.raises(TransportError) as exc_info:
        _fetch(_make_client(handler), "Moscow")
    assert "test-key-123" not in str(exc_info.value)
    assert "ConnectError" in str(exc_info.value)


def test_non_json_body_raises_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(DecodeError, match="non-JSON"):
        _fetch(_make_client(handler), "Moscow")


def test_schema_mismatch_raises_decode_error() -> None:
    payload = _payload()
    del payload["current"]["temp_c"]

    with pytest.raises(DecodeError, match="current.temp_c"):
        _fetch(_make_client(lambda request: httpx.Response(200, json=payload)), "Moscow")


def test_single_forecast_day_is_accepted() -> None:
    payload = _payload()
    payload["forecast"]["forecastday"] = payload["forecast"]["forecastday"][:1]

    snapshot = _fetch(_make_client(lambda request: httpx.Response(200, json=payload)), "Moscow")
    assert len(snapshot.days) == 1


def test_injected_client_is_not_closed_by_provider() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=_payload()))
    http_client = httpx.AsyncClient(transport=transport)

    async def scenario() -> bool:
        async with WeatherAPIClient(settings=_make_settings(), client=http_client):
            pass
        closed = http_client.is_closed
        await http_client.aclose()
        return closed

    assert asyncio.run(scenario()) is False
