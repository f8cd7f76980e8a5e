"""CLI: resolve the device location, fetch the forecast and render it."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console

from .config import Settings, load_settings
from .controller import ForecastController
from .exceptions import ConfigError
from .location.base import AuthorizationStatus, LocationProvider
from .location.providers import IPGeolocationProvider, StaticLocationProvider
from .location.resolver import LocationResolver
from .log_setup import setup_logger
from .ui.forecast_view import ForecastView
from .weather.weatherapi import WeatherAPIClient


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse forecast viewer CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Show current, hourly and daily weather for your location."
    )
    parser.add_argument(
        "--query",
        type=str,
        default=None,
        help="Place name or 'lat,lon' to fetch directly, skipping geolocation.",
    )
    parser.add_argument(
        "--no-location",
        action="store_true",
        help="Do not use geolocation; fetch the configured default city.",
    )
    parser.add_argument(
        "--refresh",
        type=int,
        default=0,
        help="Number of extra reloads after the first one.",
    )
    parser.add_argument(
        "--discard-stale",
        action="store_true",
        help="Drop results of superseded overlapping loads.",
    )
    args = parser.parse_args(argv)
    if args.refresh < 0:
        parser.error("--refresh must be >= 0.")
    if args.query is not None and not args.query.strip():
        parser.error("--query must not be empty.")
    return args


def build_location_provider(
    args: argparse.Namespace,
    settings: Settings,
    console: Console,
    logger: logging.Logger,
) -> LocationProvider:
    if args.query is not None or args.no_location or settings.location_mode == "off":
        return StaticLocationProvider(status=AuthorizationStatus.DENIED)
    if settings.location_mode == "static":
        return StaticLocationProvider(
            status=settings.location_permission,
            position=settings.default_position,
        )
    return IPGeolocationProvider(
        lookup_url=str(settings.location_lookup_url),
        timeout_seconds=settings.location_timeout_seconds,
        status=settings.location_permission,
        console=console,
        logger=logger,
    )


async def run(
    args: argparse.Namespace,
    settings: Settings,
    console: Console,
    logger: logging.Logger,
) -> int:
    location_provider = build_location_provider(args, settings, console, logger)
    try:
        async with WeatherAPIClient(settings=settings, logger=logger) as client:
            controller = ForecastController(
                client,
                LocationResolver(location_provider, logger=logger),
                args.query or settings.weather_default_city,
                discard_stale=args.discard_stale or settings.weather_discard_stale_responses,
                logger=logger,
            )
            controller.subscribe(ForecastView(console))

            for _ in range(args.refresh + 1):
                await controller.load_data()
                await controller.wait_idle()

            state = controller.state
            await controller.aclose()
    finally:
        await location_provider.aclose()

    if state.error is not None and not state.has_data:
        return 4
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the forecast viewer."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    logger.setLevel(settings.log_level)
    logger.info("Starting forecast viewer", extra={"context": settings.safe_summary()})

    try:
        return asyncio.run(run(args, settings, console, logger))
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    except Exception as exc:  # pragma: no cover - last-resort handler for CLI runtime
        logger.exception("Unexpected forecast viewer failure: %s", exc)
        return 99


if __name__ == "__main__":
    sys.exit(main())
