"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from forecast_viewer.config import load_settings
from forecast_viewer.exceptions import ConfigError
from forecast_viewer.location.base import AuthorizationStatus

_ENV_VARS = (
    "WEATHER_API_KEY",
    "WEATHER_DEFAULT_CITY",
    "WEATHER_API_BASE_URL",
    "WEATHER_FORECAST_ENDPOINT",
    "WEATHER_FORECAST_DAYS",
    "WEATHER_LANG",
    "WEATHER_TIMEOUT_SECONDS",
    "WEATHER_DISCARD_STALE_RESPONSES",
    "LOCATION_MODE",
    "LOCATION_PERMISSION",
    "LOCATION_LATITUDE",
    "LOCATION_LONGITUDE",
    "LOG_LEVEL",
)


def _set_required_env(monkeypatch: Any, tmp_path: Path) -> None:
    # Run from an empty directory so a developer's .env never leaks in.
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("WEATHER_API_KEY", "secret-key-value")
    monkeypatch.setenv("WEATHER_DEFAULT_CITY", "Moscow")


def test_defaults_match_upstream_request_shape(monkeypatch: Any, tmp_path: Path) -> None:
    _set_required_env(monkeypatch, tmp_path)
    settings = load_settings()

    assert settings.weather_default_city == "Moscow"
    assert str(settings.weather_api_base_url).startswith("https://api.weatherapi.com")
    assert settings.weather_forecast_endpoint == "/v1/forecast.json"
    assert settings.weather_forecast_days == 7
    assert settings.weather_lang == "ru"
    assert settings.weather_discard_stale_responses is False
    assert settings.location_mode == "ip"
    assert settings.location_permission is AuthorizationStatus.NOT_DETERMINED
    assert settings.default_position is None


def test_api_key_is_hidden_from_repr_and_summary(monkeypatch: Any, tmp_path: Path) -> None:
    _set_required_env(monkeypatch, tmp_path)
    settings = load_settings()
    assert "secret-key-value" not in repr(settings)
    assert "secret-key-value" not in str(settings.safe_summary())


@pytest.mark.parametrize("missing", ["WEATHER_API_KEY", "WEATHER_DEFAULT_CITY"])
def test_missing_required_value_is_config_error(
    monkeypatch: Any, tmp_path: Path, missing: str
) -> None:
    _set_required_env(monkeypatch, tmp_path)
    monkeypatch.delenv(missing)
    with pytest.raises(ConfigError, match=missing):
        load_settings()


def test_blank_default_city_is_config_error_without_leaking_key(
    monkeypatch: Any, tmp_path: Path
) -> None:
    _set_required_env(monkeypatch, tmp_path)
    monkeypatch.setenv("WEATHER_DEFAULT_CITY", "   ")
    with pytest.raises(ConfigError) as exc_info:
        load_settings()
    assert "WEATHER_DEFAULT_CITY must not be empty" in str(exc_info.value)
    assert "secret-key-value" not in str(exc_info.value)


def test_static_mode_requires_coordinates(monkeypatch: Any, tmp_path: Path) -> None:
    _set_required_env(monkeypatch, tmp_path)
    monkeypatch.setenv("LOCATION_MODE", "static")
    with pytest.raises(ConfigError, match="required when LOCATION_MODE='static'"):
        load_settings()

    monkeypatch.setenv("LOCATION_LATITUDE", "55.7558")
    monkeypatch.setenv("LOCATION_LONGITUDE", "37.6173")
    monkeypatch.setenv("LOCATION_PERMISSION", "GRANTED")
    settings = load_settings()
    assert settings.default_position == (55.7558, 37.6173)
    assert settings.location_permission is AuthorizationStatus.GRANTED


def test_coordinates_must_be_set_together(monkeypatch: Any, tmp_path: Path) -> None:
    _set_required_env(monkeypatch, tmp_path)
    monkeypatch.setenv("LOCATION_LATITUDE", "55.0")
    monkeypatch.setenv("LOCATION_LONGITUDE", "")
    with pytest.raises(ConfigError, match="must be set together"):
        load_settings()


def test_discard_stale_flag_and_log_level_parse(monkeypatch: Any, tmp_path: Path) -> None:
    _set_required_env(monkeypatch, tmp_path)
    monkeypatch.setenv("WEATHER_DISCARD_STALE_RESPONSES", "true")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.weather_discard_stale_responses is True
    assert settings.log_level == "DEBUG"
