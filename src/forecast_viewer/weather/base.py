"""Provider-agnostic forecast interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import ForecastSnapshot


class ForecastProvider(ABC):
    """Base contract for forecast sources used by the controller."""

    @abstractmethod
    async def fetch(self, query: str) -> ForecastSnapshot:
        """Fetch and normalize a forecast for a place name or "lat,lon" query."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release provider resources."""
