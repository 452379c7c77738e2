"""Helpers for fetching forecasts and place matches from the Open-Meteo APIs."""
from __future__ import annotations

from typing import List

import requests

from weatherdash.models import ForecastResult, Place
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag='open_meteo_client')

session = requests.Session()

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
OPEN_METEO_GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"

CURRENT_VARS = [
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "wind_speed_10m",
    "precipitation",
]

DAILY_VARS = [
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "uv_index_max",
    "wind_speed_10m_max",
]

# Open-Meteo defaults when no unit parameters are sent.
EXPECTED_UNITS = {
    "temperature_2m": "°C",
    "relative_humidity_2m": "%",
    "apparent_temperature": "°C",
    "wind_speed_10m": "km/h",
    "precipitation": "mm",
    "temperature_2m_max": "°C",
    "temperature_2m_min": "°C",
    "precipitation_sum": "mm",
    "wind_speed_10m_max": "km/h",
}

ALLOWED_UNIT_SYNONYMS = {
    "relative_humidity_2m": {"%", "percent"},
    "wind_speed_10m": {"km/h", "kmh"},
    "wind_speed_10m_max": {"km/h", "kmh"},
}


def _warn_on_unexpected_units(units: dict | None, *, context: str):
    """Log a warning if Open-Meteo reports units the dashboard does not display."""
    if not units:
        return
    for field, expected in EXPECTED_UNITS.items():
        actual = units.get(field)
        if not actual or actual == expected:
            continue
        allowed = ALLOWED_UNIT_SYNONYMS.get(field, set())
        if actual not in allowed:
            logger.warning(
                f"Unexpected Open-Meteo unit for {field}: {actual!r} (expected {expected!r})",
                extra={"context": context, "field": field, "unit": actual, "expected": expected},
            )


def fetch_forecast(latitude: float,
                   longitude: float,
                   *,
                   timezone: str = "auto",
                   forecast_days: int = 7,
                   url: str = OPEN_METEO_FORECAST_URL,
                   timeout: float = 10,
                   ) -> ForecastResult:
    """Fetch current conditions plus a daily summary for the next `forecast_days` days."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current": ",".join(CURRENT_VARS),
        "daily": ",".join(DAILY_VARS),
        "timezone": timezone,
        "forecast_days": forecast_days,
    }

    resp = session.get(url, params=params, timeout=timeout)
    resp.raise_for_status()
    result = ForecastResult.model_validate(resp.json())

    _warn_on_unexpected_units(result.current_units, context="forecast_current")
    _warn_on_unexpected_units(result.daily_units, context="forecast_daily")
    return result


def _display_label(record: dict) -> str:
    """Join name, region and country the way a full display label reads."""
    parts = [record.get("name"), record.get("admin1"), record.get("country")]
    return ", ".join(str(p) for p in parts if p)


def geocode_open_meteo(query: str,
                       *,
                       limit: int = 5,
                       url: str = OPEN_METEO_GEOCODING_URL,
                       timeout: float = 10,
                       ) -> List[Place]:
    """Resolve free text with the Open-Meteo geocoding API, keeping its ranking."""
    params = {
        "name": query,
        "count": limit,
        "language": "en",
        "format": "json",
    }

    resp = session.get(url, params=params, timeout=timeout)
    resp.raise_for_status()
    data = resp.json()

    if not isinstance(data, dict):
        raise ValueError(f"Unexpected Open-Meteo geocoding payload: {type(data).__name__}")

    # No "results" key at all when nothing matched.
    out: List[Place] = []
    for record in (data.get("results") or [])[:limit]:
        if not isinstance(record, dict):
            raise ValueError(f"Unexpected Open-Meteo geocoding record: {record!r}")
        out.append(
            Place(
                name=_display_label(record),
                lat=float(record["latitude"]),
                lon=float(record["longitude"]),
            )
        )
    return out
