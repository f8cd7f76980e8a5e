"""Orchestrates location resolution, forecast loading and state publishing."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Coroutine
from dataclasses import replace
from typing import Any

from .exceptions import ConfigError, ForecastError, LocationError
from .hourly import derive_hourly_window
from .location.base import AuthorizationStatus
from .location.resolver import LocationResolver, PermissionPending, Query, Unavailable
from .state import LoadState, StateListener, StateStore
from .weather.base import ForecastProvider
from .weather.models import ForecastSnapshot


class ForecastController:
    """Single writer of the published LoadState.

    `load_data()` may be called any number of times (initial load, refresh,
    retry). Each call is an independent attempt; nothing is cancelled. With
    `discard_stale=False` overlapping attempts are last-writer-wins. With
    `discard_stale=True` every fetch gets a sequence number and completions
    from superseded fetches are dropped.
    """

    def __init__(
        self,
        forecast_provider: ForecastProvider,
        resolver: LocationResolver,
        default_city: str,
        *,
        store: StateStore | None = None,
        clock: Callable[[], float] = time.time,
        discard_stale: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        if not default_city or not default_city.strip():
            raise ConfigError("A default city query is required.")
        self.forecast_provider = forecast_provider
        self.resolver = resolver
        self.default_city = default_city
        self.discard_stale = discard_stale
        self.logger = logger or logging.getLogger(__name__)
        self._store = store or StateStore(logger=self.logger)
        self._clock = clock
        self._latest_attempt = 0
        self._background: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> LoadState:
        return self._store.state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        return self._store.subscribe(listener)

    async def load_data(self) -> None:
        """Resolve a query and fetch its forecast into the published state."""
        self._publish(loading=True)
        resolution = await self.resolver.resolve()

        if isinstance(resolution, PermissionPending):
            # The decision callback drives the fetch; re-entering load_data
            # from there would go through the permission branch again.
            self._spawn(self._continue_after_prompt(resolution.decision))
            return
        if isinstance(resolution, Query):
            await self._load_forecast(resolution.text)
            return
        await self._load_default_city(resolution)

    async def handle_authorization_change(self, status: AuthorizationStatus) -> None:
        """React to a permission decision reported by the platform."""
        if status.is_granted:
            resolution = await self.resolver.locate()
            if isinstance(resolution, Query):
                await self._load_forecast(resolution.text)
            else:
                await self._load_default_city(resolution)
        elif status.is_refused:
            await self._load_forecast(self.default_city)
        else:
            self.logger.debug("Ignoring authorization change to %s", status.value)

    async def wait_idle(self) -> None:
        """Wait until every background continuation has finished."""
        while self._background:
            await asyncio.gather(*list(self._background))

    async def aclose(self) -> None:
        """Finish background work, close the forecast provider and drop listeners."""
        await self.wait_idle()
        await self.forecast_provider.aclose()
        self._store.clear_listeners()

    async def _continue_after_prompt(
        self, decision: asyncio.Task[AuthorizationStatus]
    ) -> None:
        try:
            status = await decision
        except LocationError as exc:
            await self._load_default_city(
                Unavailable(status=AuthorizationStatus.UNKNOWN, error=exc)
            )
            return
        if status.is_granted or status.is_refused:
            await self.handle_authorization_change(status)
        else:
            await self._load_default_city(Unavailable(status=status))

    async def _load_default_city(self, resolution: Unavailable) -> None:
        if resolution.error is not None:
            self.logger.warning(
                "Geolocation unavailable (%s); using default city", resolution.error
            )
        else:
            self.logger.info(
                "Location permission is %s; using default city", resolution.status.value
            )
        await self._load_forecast(self.default_city, warning=resolution.error)

    async def _load_forecast(self, query: str, *, warning: LocationError | None = None) -> None:
        self._latest_attempt += 1
        attempt = self._latest_attempt
        self._publish(loading=True, warning=warning)
        self.logger.info("Fetching forecast (attempt %d) for %s", attempt, query)

        try:
            snapshot = await self.forecast_provider.fetch(query)
        except ForecastError as exc:
            if self._is_superseded(attempt):
                return
            self.logger.warning(
                "Forecast fetch failed (%s): %s", type(exc).__name__, exc
            )
            self._publish(loading=False, error=exc)
            return

        if self._is_superseded(attempt):
            return
        self._apply_snapshot(snapshot)
        self.logger.info(
            "Forecast loaded for %s: %d day(s)", snapshot.location.name, len(snapshot.days)
        )

    def _apply_snapshot(self, snapshot: ForecastSnapshot) -> None:
        self._publish(
            location=snapshot.location,
            current=snapshot.current,
            hourly_window=derive_hourly_window(snapshot.days, self._clock()),
            days=snapshot.days,
            loading=False,
            error=None,
        )

    def _is_superseded(self, attempt: int) -> bool:
        if self.discard_stale and attempt != self._latest_attempt:
            self.logger.debug(
                "Dropping result of attempt %d; attempt %d is newer",
                attempt,
                self._latest_attempt,
            )
            return True
        return False

    def _publish(self, **changes: Any) -> None:
        current = self._store.state
        updated = replace(current, **changes)
        if updated != current:
            self._store.publish(updated)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
