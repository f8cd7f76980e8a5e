"""Observable load state published by the forecast controller."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .exceptions import ForecastError, LocationError
from .weather.models import CurrentConditions, DayForecast, HourlyPoint, Location

StateListener = Callable[["LoadState"], None]


@dataclass(frozen=True, slots=True)
class LoadState:
    """Everything the presentation layer may render.

    The four data fields are only ever replaced together, from one snapshot.
    """

    location: Location | None = None
    current: CurrentConditions | None = None
    hourly_window: tuple[HourlyPoint, ...] | None = None
    days: tuple[DayForecast, ...] | None = None
    loading: bool = False
    error: ForecastError | None = None
    warning: LocationError | None = None

    @property
    def has_data(self) -> bool:
        return self.location is not None


class StateStore:
    """Holds the current LoadState and notifies subscribers on every publish."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self._state = LoadState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> LoadState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear_listeners(self) -> None:
        self._listeners.clear()

    def publish(self, state: LoadState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                self.logger.exception("State listener %r failed", listener)
