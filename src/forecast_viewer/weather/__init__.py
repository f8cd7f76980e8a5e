"""Forecast provider integrations."""

from .base import ForecastProvider
from .models import CurrentConditions, DayForecast, ForecastSnapshot, HourlyPoint, Location, icon_url
from .weatherapi import WeatherAPIClient

__all__ = [
    "CurrentConditions",
    "DayForecast",
    "ForecastProvider",
    "ForecastSnapshot",
    "HourlyPoint",
    "Location",
    "WeatherAPIClient",
    "icon_url",
]
