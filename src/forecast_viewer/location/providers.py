"""Concrete location providers for terminal use."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from rich.console import Console
from rich.prompt import Confirm

from ..exceptions import LocationError
from ..redaction import sanitize_text
from .base import AuthorizationStatus, LocationProvider


class StaticLocationProvider(LocationProvider):
    """Provider with a fixed status, position and prompt answer."""

    def __init__(
        self,
        *,
        status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED,
        position: tuple[float, float] | None = None,
        decision: AuthorizationStatus = AuthorizationStatus.GRANTED,
    ) -> None:
        self._status = status
        self._position = position
        self._decision = decision

    @property
    def authorization_status(self) -> AuthorizationStatus:
        return self._status

    async def request_permission(self) -> AuthorizationStatus:
        self._status = self._decision
        return self._status

    async def request_position(self) -> tuple[float, float]:
        if not self._status.is_granted:
            raise LocationError(f"Location permission is {self._status.value}.")
        if self._position is None:
            raise LocationError("No location fix available.")
        return self._position


class IPGeolocationProvider(LocationProvider):
    """Approximates the device position from its public IP address.

    The permission prompt is a yes/no question on the terminal; the answer is
    kept for the lifetime of the provider.
    """

    def __init__(
        self,
        *,
        lookup_url: str,
        timeout_seconds: float = 10.0,
        status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED,
        console: Console | None = None,
        logger: logging.Logger | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.lookup_url = lookup_url
        self.logger = logger or logging.getLogger(__name__)
        self._status = status
        self._console = console or Console()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    @property
    def authorization_status(self) -> AuthorizationStatus:
        return self._status

    async def request_permission(self) -> AuthorizationStatus:
        try:
            allowed = await asyncio.to_thread(
                Confirm.ask,
                "Allow the forecast viewer to use your approximate location?",
                console=self._console,
                default=True,
            )
        except (EOFError, OSError) as exc:
            # No interactive stdin (cron, pipes); the question stays unanswered.
            raise LocationError(
                f"Location permission prompt failed ({type(exc).__name__})."
            ) from exc
        self._status = AuthorizationStatus.GRANTED if allowed else AuthorizationStatus.DENIED
        self.logger.info("Location permission decided: %s", self._status.value)
        return self._status

    async def request_position(self) -> tuple[float, float]:
        try:
            response = await self._client.get(self.lookup_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise LocationError(
                f"IP geolocation failed with status {exc.response.status_code}."
            ) from exc
        except httpx.HTTPError as exc:
            raise LocationError(
                f"IP geolocation request failed: {sanitize_text(str(exc))}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise LocationError("IP geolocation returned a non-JSON response.") from exc
        return self._extract_position(payload)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def _extract_position(payload: Any) -> tuple[float, float]:
        if not isinstance(payload, dict):
            raise LocationError("IP geolocation payload is not an object.")
        if payload.get("error"):
            reason = payload.get("reason") or "unknown reason"
            raise LocationError(f"IP geolocation refused the lookup: {reason}")
        lat = payload.get("latitude")
        lon = payload.get("longitude")
        # bool is an int subclass; reject it explicitly.
        if (
            not isinstance(lat, (int, float))
            or not isinstance(lon, (int, float))
            or isinstance(lat, bool)
            or isinstance(lon, bool)
        ):
            raise LocationError("IP geolocation payload has no usable coordinates.")
        return float(lat), float(lon)
