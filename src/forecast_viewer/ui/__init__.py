"""Terminal presentation of the published forecast state."""

from .forecast_view import ForecastView

__all__ = ["ForecastView"]
