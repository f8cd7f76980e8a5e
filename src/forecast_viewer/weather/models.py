"""Typed models for normalized forecast snapshots."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

ICON_SCHEME = "https:"


def icon_url(ref: str) -> str:
    """Turn a scheme-relative icon ref (``//cdn...``) into a usable URL."""
    if not ref or "://" in ref:
        return ref
    return f"{ICON_SCHEME}{ref}"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Location(_FrozenModel):
    """Place the forecast was resolved to by the upstream API."""

    name: str
    region: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class CurrentConditions(_FrozenModel):
    """Conditions at the time of the request."""

    temperature_c: float
    condition_text: str
    condition_icon_ref: str

    @property
    def icon_url(self) -> str:
        return icon_url(self.condition_icon_ref)


class HourlyPoint(_FrozenModel):
    """One hourly forecast entry."""

    timestamp_epoch: int
    temperature_c: float
    condition_icon_ref: str
    local_time_label: str

    @property
    def hour_label(self) -> str:
        """`HH:MM` part of the local time label."""
        return self.local_time_label.split(" ")[-1]

    @property
    def icon_url(self) -> str:
        return icon_url(self.condition_icon_ref)


class DayForecast(_FrozenModel):
    """Daily aggregate plus its hourly breakdown, in chronological order."""

    date_epoch: int
    min_temp_c: float
    max_temp_c: float
    condition_icon_ref: str
    hours: tuple[HourlyPoint, ...] = Field(default_factory=tuple)

    @property
    def icon_url(self) -> str:
        return icon_url(self.condition_icon_ref)


class ForecastSnapshot(_FrozenModel):
    """One complete, internally consistent forecast result."""

    location: Location
    current: CurrentConditions
    days: tuple[DayForecast, ...] = Field(default_factory=tuple)
