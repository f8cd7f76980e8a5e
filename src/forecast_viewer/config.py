"""Typed settings loader for the forecast viewer."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError
from .location.base import AuthorizationStatus


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    weather_api_key: str = Field(alias="WEATHER_API_KEY", repr=False)
    weather_default_city: str = Field(alias="WEATHER_DEFAULT_CITY")
    weather_api_base_url: AnyUrl = Field(
        default=AnyUrl("https://api.weatherapi.com"),
        alias="WEATHER_API_BASE_URL",
    )
    weather_forecast_endpoint: str = Field(
        default="/v1/forecast.json",
        alias="WEATHER_FORECAST_ENDPOINT",
    )
    weather_forecast_days: int = Field(default=7, alias="WEATHER_FORECAST_DAYS")
    weather_lang: str = Field(default="ru", alias="WEATHER_LANG")
    weather_timeout_seconds: float = Field(default=15.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_discard_stale_responses: bool = Field(
        default=False,
        alias="WEATHER_DISCARD_STALE_RESPONSES",
    )

    location_mode: Literal["ip", "static", "off"] = Field(default="ip", alias="LOCATION_MODE")
    location_permission: AuthorizationStatus = Field(
        default=AuthorizationStatus.NOT_DETERMINED,
        alias="LOCATION_PERMISSION",
    )
    location_latitude: float | None = Field(default=None, alias="LOCATION_LATITUDE")
    location_longitude: float | None = Field(default=None, alias="LOCATION_LONGITUDE")
    location_lookup_url: AnyUrl = Field(
        default=AnyUrl("https://ipapi.co/json/"),
        alias="LOCATION_LOOKUP_URL",
    )
    location_timeout_seconds: float = Field(default=10.0, alias="LOCATION_TIMEOUT_SECONDS")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
    )

    @field_validator("location_latitude", "location_longitude", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset optional coordinates."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("location_permission", mode="before")
    @classmethod
    def parse_permission(cls, value: Any) -> Any:
        if isinstance(value, str):
            return AuthorizationStatus(value)
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_values(self) -> Settings:
        """Validate cross-field constraints."""
        if not self.weather_api_key.strip():
            raise ValueError("WEATHER_API_KEY must not be empty.")
        if not self.weather_default_city.strip():
            raise ValueError("WEATHER_DEFAULT_CITY must not be empty.")
        if not self.weather_forecast_endpoint.startswith("/"):
            raise ValueError("WEATHER_FORECAST_ENDPOINT must start with '/'.")
        if not (1 <= self.weather_forecast_days <= 14):
            raise ValueError("WEATHER_FORECAST_DAYS must be between 1 and 14.")
        if not self.weather_lang.strip():
            raise ValueError("WEATHER_LANG must not be empty.")
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.location_timeout_seconds <= 0:
            raise ValueError("LOCATION_TIMEOUT_SECONDS must be > 0.")

        has_lat = self.location_latitude is not None
        has_lon = self.location_longitude is not None
        if has_lat != has_lon:
            raise ValueError("LOCATION_LATITUDE and LOCATION_LONGITUDE must be set together.")
        if has_lat and not (-90 <= self.location_latitude <= 90):
            raise ValueError("LOCATION_LATITUDE must be between -90 and 90.")
        if has_lon and not (-180 <= self.location_longitude <= 180):
            raise ValueError("LOCATION_LONGITUDE must be between -180 and 180.")
        if self.location_mode == "static" and not has_lat:
            raise ValueError(
                "LOCATION_LATITUDE and LOCATION_LONGITUDE are required when LOCATION_MODE='static'."
            )
        return self

    @property
    def default_position(self) -> tuple[float, float] | None:
        if self.location_latitude is None or self.location_longitude is None:
            return None
        return self.location_latitude, self.location_longitude

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "base_url": str(self.weather_api_base_url),
            "forecast_endpoint": self.weather_forecast_endpoint,
            "forecast_days": self.weather_forecast_days,
            "lang": self.weather_lang,
            "default_city": self.weather_default_city,
            "timeout_seconds": self.weather_timeout_seconds,
            "discard_stale_responses": self.weather_discard_stale_responses,
            "location_mode": self.location_mode,
            "location_permission": self.location_permission.value,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        # Error inputs are omitted so the API key never lands in a message.
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'settings'}: {error['msg']}"
            for error in exc.errors(include_input=False)
        )
        raise ConfigError(f"Invalid configuration: {problems}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
