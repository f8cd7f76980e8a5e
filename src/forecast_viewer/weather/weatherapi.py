"""weatherapi.com forecast provider implementation."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..exceptions import DecodeError, HTTPError, TransportError
from ..redaction import sanitize_text
from .base import ForecastProvider
from .models import CurrentConditions, DayForecast, ForecastSnapshot, HourlyPoint, Location
from .schema import ForecastResponse, WireForecastDay


class WeatherAPIClient(ForecastProvider):
    """Fetches and normalizes forecast snapshots from api.weatherapi.com.

    One call is one HTTP round trip: no retries and no caching. The query is
    passed through verbatim since the API accepts both place names and
    "lat,lon" pairs.
    """

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)
        self._api_key = settings.weather_api_key
        self._url = (
            str(settings.weather_api_base_url).rstrip("/") + settings.weather_forecast_endpoint
        )
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.weather_timeout_seconds)

    async def __aenter__(self) -> WeatherAPIClient:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def build_params(self, query: str) -> dict[str, str]:
        return {
            "key": self._api_key,
            "q": query,
            "days": str(self.settings.weather_forecast_days),
            "lang": self.settings.weather_lang,
            "aqi": "no",
            "alerts": "no",
        }

    async def fetch(self, query: str) -> ForecastSnapshot:
        payload = await self._request_json(query)
        try:
            response = ForecastResponse.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(
                f"Forecast payload did not match the expected schema: "
                f"{exc.error_count()} error(s), first at "
                f"{'.'.join(str(part) for part in exc.errors()[0]['loc'])}"
            ) from exc
        snapshot = self._normalize(response)
        self.logger.debug(
            "Forecast fetched for %s: %d day(s)", snapshot.location.name, len(snapshot.days)
        )
        return snapshot

    async def _request_json(self, query: str) -> Any:
        params = self.build_params(query)
        self.logger.debug(
            "Requesting forecast", extra={"context": {"url": self._url, "params": params}}
        )
        try:
            response = await self._client.get(self._url, params=params)
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Forecast request failed ({type(exc).__name__}): {sanitize_text(str(exc))}"
            ) from exc

        status = response.status_code
        if not (200 <= status <= 299):
            raise HTTPError(
                f"Forecast request failed with status {status}: "
                f"{sanitize_text(response.text[:300])}",
                status_code=status,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError("Forecast API returned a non-JSON response.") from exc

    def _normalize(self, response: ForecastResponse) -> ForecastSnapshot:
        wire_location = response.location
        location = Location(
            name=wire_location.name,
            region=wire_location.region,
            country=wire_location.country,
            latitude=wire_location.lat,
            longitude=wire_location.lon,
        )
        current = CurrentConditions(
            temperature_c=response.current.temp_c,
            condition_text=response.current.condition.text,
            condition_icon_ref=response.current.condition.icon,
        )
        days = tuple(self._normalize_day(day) for day in response.forecast.forecastday)
        return ForecastSnapshot(location=location, current=current, days=days)

    @staticmethod
    def _normalize_day(day: WireForecastDay) -> DayForecast:
        hours = tuple(
            HourlyPoint(
                timestamp_epoch=hour.time_epoch,
                temperature_c=hour.temp_c,
                condition_icon_ref=hour.condition.icon,
                local_time_label=hour.time,
            )
            for hour in day.hour
        )
        return DayForecast(
            date_epoch=day.date_epoch,
            min_temp_c=day.day.mintemp_c,
            max_temp_c=day.day.maxtemp_c,
            condition_icon_ref=day.day.condition.icon,
            hours=hours,
        )
