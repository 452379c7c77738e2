"""Interfaces and helpers for weather data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Protocol

from weatherdash.models import ForecastResult, Place


class WeatherDataSource(Protocol):
    """Interface for anything that can geocode text and fetch forecasts."""

    def geocode(self, query: str, *, limit: int = 5) -> List[Place]:
        """Return up to `limit` places matching `query`, best match first."""
        ...

    def fetch_forecast(
        self,
        latitude: float,
        longitude: float,
        *,
        timezone: str = "auto",
        forecast_days: int = 7,
    ) -> ForecastResult:
        """Return current conditions and a daily forecast."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap a geocoder and a forecast fetcher so providers can be swapped."""

    geocoder: Callable[..., List[Place]]
    forecaster: Callable[..., ForecastResult]

    def geocode(self, *args, **kwargs) -> List[Place]:
        """Delegate to the configured geocoding callable."""
        return self.geocoder(*args, **kwargs)

    def fetch_forecast(self, *args, **kwargs) -> ForecastResult:
        """Delegate to the configured forecast callable."""
        return self.forecaster(*args, **kwargs)
