"""Geocoding, forecast and one-shot search on top of a weather data source."""
from __future__ import annotations

import math
from typing import Any, List, Optional

import requests

from weatherdash.data_sources import WeatherDataSource
from weatherdash.errors import NotFoundError, UpstreamError, ValidationError
from weatherdash.models import ForecastResult, Place, SearchWeatherResponse
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="weather_service")

AUTO_TIMEZONE = "auto"

# What a misbehaving upstream can raise: transport errors, bad statuses,
# undecodable JSON, missing keys, or records that fail model validation.
UPSTREAM_FAILURES = (requests.RequestException, KeyError, TypeError, ValueError)


def parse_coordinate(value: Any) -> float:
    """Parse a query-string coordinate into a finite float or raise ValidationError."""
    if value is None or isinstance(value, bool):
        raise ValidationError("lat/lon required")
    try:
        parsed = float(str(value).strip())
    except ValueError:
        raise ValidationError("lat/lon required")
    if not math.isfinite(parsed):
        raise ValidationError("lat/lon required")
    return parsed


class WeatherService:
    """Stateless gateway facade; every call goes straight to the upstream services."""

    def __init__(
        self,
        data_source: WeatherDataSource,
        *,
        suggestion_limit: int = 5,
        forecast_days: int = 7,
        default_timezone: str = AUTO_TIMEZONE,
    ) -> None:
        self.data_source = data_source
        self.suggestion_limit = suggestion_limit
        self.forecast_days = forecast_days
        self.default_timezone = default_timezone

    def _resolve_timezone(self, timezone: Optional[str]) -> str:
        if timezone is None or not timezone.strip():
            return self.default_timezone
        return timezone.strip()

    def _geocode(self, query: str, limit: int) -> List[Place]:
        try:
            return self.data_source.geocode(query, limit=limit)[:limit]
        except UPSTREAM_FAILURES as exc:
            logger.warning(f"Geocoding failed for {query!r}: {exc}")
            raise UpstreamError("Geocoding failed") from exc

    def _forecast(self, lat: float, lon: float, timezone: str) -> ForecastResult:
        try:
            return self.data_source.fetch_forecast(
                lat, lon, timezone=timezone, forecast_days=self.forecast_days
            )
        except UPSTREAM_FAILURES as exc:
            logger.warning(f"Forecast failed for ({lat}, {lon}): {exc}")
            raise UpstreamError("Forecast failed") from exc

    def geocode(self, query: Optional[str]) -> List[Place]:
        """Suggestions for `query`; blank text never reaches upstream."""
        q = (query or "").strip()
        if not q:
            return []
        places = self._geocode(q, self.suggestion_limit)
        logger.info(f"Geocoded {q!r} to {len(places)} place(s)")
        return places

    def forecast(self, lat: Any, lon: Any, timezone: Optional[str] = None) -> ForecastResult:
        """
        Forecast for raw query-string coordinates.

        Only "is a finite number" is checked; out-of-range values are left to
        the upstream service to judge.
        """
        lat_f = parse_coordinate(lat)
        lon_f = parse_coordinate(lon)
        tz = self._resolve_timezone(timezone)
        logger.info(f"Fetching forecast for ({lat_f}, {lon_f}) tz={tz}")
        return self._forecast(lat_f, lon_f, tz)

    def search_weather(self, query: Optional[str], timezone: Optional[str] = None) -> SearchWeatherResponse:
        """Resolve the best match for `query` and fetch its forecast in one round trip."""
        q = (query or "").strip()
        if not q:
            raise ValidationError("q required")
        tz = self._resolve_timezone(timezone)

        try:
            places = self._geocode(q, 1)
            if not places:
                logger.info(f"No place found for {q!r}")
                raise NotFoundError("Place not found")
            place = places[0]
            forecast = self._forecast(place.lat, place.lon, tz)
        except UpstreamError as exc:
            raise UpstreamError("Search failed") from exc

        logger.info(f"Search {q!r} resolved to {place.name!r}")
        return SearchWeatherResponse(place=place, forecast=forecast)
