"""Display values derived from dashboard state: now panel, 7-day rows, map viewport."""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import List, Optional

from weatherdash.dashboard.state import DashboardState
from weatherdash.models import ForecastResult, Place

DEFAULT_CENTER = (16.7049, 74.2433)
DEFAULT_ZOOM = 6
PLACE_ZOOM = 9


@dataclass
class NowMetrics:
    """Formatted "now" panel values."""
    temperature: str
    feels_like: str
    humidity: str
    wind: str
    precipitation: str


@dataclass
class DailyRow:
    """One day of the 7-day panel, transposed out of the daily arrays."""
    date: str
    tmax: Optional[float]
    tmin: Optional[float]
    precip: Optional[float]
    uv: Optional[float]
    windmax: Optional[float]

    @property
    def label(self) -> str:
        return format_day_label(self.date)

    @property
    def bar_height(self) -> float:
        return precip_bar_height(self.precip)

    @property
    def temps(self) -> tuple[str, str]:
        return pretty_temp(self.tmax), pretty_temp(self.tmin)

    @property
    def uv_text(self) -> str:
        return f"UV {_round(self.uv)}"

    @property
    def wind_text(self) -> str:
        return f"Wind {pretty_wind(self.windmax)}"


@dataclass
class MapViewport:
    center: tuple[float, float]
    zoom: int
    marker: Optional[tuple[float, float]]


def _round(value: Optional[float]) -> int:
    # halves round up (2.5 -> 3, -2.5 -> -2), not to even
    if value is None:
        return 0
    return math.floor(value + 0.5)


def pretty_temp(value: Optional[float]) -> str:
    return f"{_round(value)}°C"


def pretty_wind(value: Optional[float]) -> str:
    return f"{_round(value)} km/h"


def precip_bar_height(precip_mm: Optional[float]) -> float:
    """Bar height in percent: 10% per millimetre, capped at 100."""
    return min(100.0, (precip_mm or 0.0) * 10)


def format_day_label(date: str) -> str:
    """Render an ISO date as e.g. `Mon, Jan 1`; unparseable dates are shown as given."""
    try:
        day = dt.date.fromisoformat(date)
    except ValueError:
        return date
    return f"{day:%a, %b} {day.day}"


def map_click_place(lat: float, lon: float) -> Place:
    """Synthesize a place for a map click, wrapping longitude into [-180, 180)."""
    lon = ((lon + 180.0) % 360.0) - 180.0
    return Place(name=f"Lat {lat:.3f}, Lon {lon:.3f}", lat=lat, lon=lon)


def daily_rows(forecast: Optional[ForecastResult]) -> List[DailyRow]:
    """Transpose the forecast's parallel day arrays into one record per day."""
    daily = forecast.daily if forecast else None
    if daily is None:
        return []

    def at(values: Optional[list], i: int):
        if values is None or i >= len(values):
            return None
        return values[i]

    return [
        DailyRow(
            date=day,
            tmax=at(daily.temperature_2m_max, i),
            tmin=at(daily.temperature_2m_min, i),
            precip=at(daily.precipitation_sum, i),
            uv=at(daily.uv_index_max, i),
            windmax=at(daily.wind_speed_10m_max, i),
        )
        for i, day in enumerate(daily.time)
    ]


def now_metrics(state: DashboardState) -> Optional[NowMetrics]:
    """Current conditions, shown only once a forecast is loaded and nothing is loading."""
    if state.loading or state.forecast is None or state.forecast.current is None:
        return None
    current = state.forecast.current
    humidity = current.relative_humidity_2m
    return NowMetrics(
        temperature=pretty_temp(current.temperature_2m),
        feels_like=f"Feels {pretty_temp(current.apparent_temperature)}",
        humidity=f"{humidity:g}%" if humidity is not None else "",
        wind=pretty_wind(current.wind_speed_10m),
        precipitation=f"{current.precipitation if current.precipitation is not None else 0:g} mm",
    )


def map_viewport(state: DashboardState) -> MapViewport:
    """Where the map should look and where the marker sits."""
    if state.selected is None:
        return MapViewport(center=DEFAULT_CENTER, zoom=DEFAULT_ZOOM, marker=None)
    point = (state.selected.lat, state.selected.lon)
    return MapViewport(center=point, zoom=PLACE_ZOOM, marker=point)
