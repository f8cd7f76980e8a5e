"""Device location permission, geolocation and query resolution."""

from .base import AuthorizationStatus, LocationProvider
from .providers import IPGeolocationProvider, StaticLocationProvider
from .resolver import LocationResolver, PermissionPending, Query, Resolution, Unavailable

__all__ = [
    "AuthorizationStatus",
    "IPGeolocationProvider",
    "LocationProvider",
    "LocationResolver",
    "PermissionPending",
    "Query",
    "Resolution",
    "StaticLocationProvider",
    "Unavailable",
]
