"""Forward-looking hourly strip derived from a multi-day forecast."""

from __future__ import annotations

from collections.abc import Sequence

from .weather.models import DayForecast, HourlyPoint


def derive_hourly_window(days: Sequence[DayForecast], now: float) -> tuple[HourlyPoint, ...]:
    """Remaining hours of today followed by all of tomorrow's hours.

    `now` is a Unix epoch in seconds. Hours strictly after `now` are kept from
    the first day; the second day, if any, is appended unfiltered.
    """
    if not days:
        return ()
    rest_of_today = tuple(hour for hour in days[0].hours if hour.timestamp_epoch > now)
    tomorrow = days[1].hours if len(days) > 1 else ()
    return rest_of_today + tuple(tomorrow)
