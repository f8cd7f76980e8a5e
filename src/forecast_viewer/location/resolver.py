"""Turns device location permission and position into a forecast query."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal

from ..exceptions import LocationError
from .base import AuthorizationStatus, LocationProvider


@dataclass(frozen=True, slots=True)
class Query:
    """Coordinates resolved into a "lat,lon" query string."""

    text: str


@dataclass(frozen=True, slots=True)
class Unavailable:
    """No coordinates; `error` is set when geolocation itself failed."""

    status: AuthorizationStatus
    error: LocationError | None = None


@dataclass(frozen=True, slots=True)
class PermissionPending:
    """A first-time permission prompt is on screen; `decision` completes with the answer."""

    decision: asyncio.Task[AuthorizationStatus]


Resolution = Query | Unavailable | PermissionPending


def _decimal_degrees(value: float) -> str:
    # Shortest round-trip digits, always in positional notation.
    return format(Decimal(repr(value)), "f")


def format_query(latitude: float, longitude: float) -> str:
    """Full-precision "lat,lon" form accepted by the forecast API."""
    return f"{_decimal_degrees(latitude)},{_decimal_degrees(longitude)}"


class LocationResolver:
    """Resolves the device location into a forecast query.

    The permission prompt is issued at most once per resolver. While a
    position request is in flight, further resolutions await the same request
    instead of asking the provider again.
    """

    def __init__(self, provider: LocationProvider, logger: logging.Logger | None = None) -> None:
        self.provider = provider
        self.logger = logger or logging.getLogger(__name__)
        self._has_requested_permission = False
        self._position_request: asyncio.Task[tuple[float, float]] | None = None

    @property
    def has_requested_permission(self) -> bool:
        return self._has_requested_permission

    async def resolve(self) -> Resolution:
        status = self.provider.authorization_status
        if status is AuthorizationStatus.NOT_DETERMINED and not self._has_requested_permission:
            self._has_requested_permission = True
            self.logger.info("Requesting location permission")
            return PermissionPending(
                decision=asyncio.create_task(self.provider.request_permission())
            )
        if status.is_granted:
            return await self.locate()
        return Unavailable(status=status)

    async def locate(self) -> Query | Unavailable:
        """Request a one-shot position fix, assuming permission is granted."""
        if self._position_request is None:
            self._position_request = asyncio.create_task(self.provider.request_position())
        request = self._position_request
        try:
            latitude, longitude = await request
        except LocationError as exc:
            return Unavailable(status=self.provider.authorization_status, error=exc)
        finally:
            if self._position_request is request:
                self._position_request = None
        return Query(format_query(latitude, longitude))
