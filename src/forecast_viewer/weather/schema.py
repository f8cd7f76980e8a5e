"""Wire schema for the weatherapi.com `forecast.json` response.

Only the fields the viewer consumes are declared; everything else in the
payload is ignored. Validation failures are turned into `DecodeError` by the
client.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class WireCondition(_WireModel):
    text: str = ""
    icon: str


class WireLocation(_WireModel):
    name: str
    region: str | None = None
    country: str | None = None
    lat: float | None = None
    lon: float | None = None


class WireCurrent(_WireModel):
    temp_c: float
    condition: WireCondition


class WireHour(_WireModel):
    time_epoch: int
    time: str
    temp_c: float
    condition: WireCondition


class WireDay(_WireModel):
    mintemp_c: float
    maxtemp_c: float
    condition: WireCondition


class WireForecastDay(_WireModel):
    date_epoch: int
    day: WireDay
    hour: list[WireHour]


class WireForecast(_WireModel):
    forecastday: list[WireForecastDay]


class ForecastResponse(_WireModel):
    location: WireLocation
    current: WireCurrent
    forecast: WireForecast
