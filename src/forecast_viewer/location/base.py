"""Platform-agnostic location permission and geolocation interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum


class AuthorizationStatus(StrEnum):
    """Location permission states reported by a platform provider."""

    NOT_DETERMINED = "not_determined"
    GRANTED = "granted"
    DENIED = "denied"
    RESTRICTED = "restricted"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> AuthorizationStatus:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        # Unrecognized platform statuses are treated like a refusal downstream.
        return cls.UNKNOWN

    @property
    def is_granted(self) -> bool:
        return self is AuthorizationStatus.GRANTED

    @property
    def is_refused(self) -> bool:
        return self in {AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED}


class LocationProvider(ABC):
    """Base contract for device location sources."""

    @property
    @abstractmethod
    def authorization_status(self) -> AuthorizationStatus:
        """Current permission state."""

    @abstractmethod
    async def request_permission(self) -> AuthorizationStatus:
        """Prompt for permission and return the decision once it is known."""

    @abstractmethod
    async def request_position(self) -> tuple[float, float]:
        """Return a one-shot (latitude, longitude) fix or raise LocationError."""

    async def aclose(self) -> None:
        """Release provider resources."""
