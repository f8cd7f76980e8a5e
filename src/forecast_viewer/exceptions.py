"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class ForecastError(Exception):
    """Raised when a forecast request fails or returns unusable data."""


class TransportError(ForecastError):
    """Raised when the forecast request never produced an HTTP response."""


class HTTPError(ForecastError):
    """Raised when the forecast API answers with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ForecastError):
    """Raised when the forecast payload does not match the expected schema."""


class LocationError(Exception):
    """Raised when device geolocation is denied, restricted or fails."""
