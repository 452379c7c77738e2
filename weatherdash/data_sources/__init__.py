"""Upstream geocoding and forecast providers."""

from .base import CallableWeatherDataSource, WeatherDataSource
from .factory import build_data_source
from .nominatim_client import geocode_nominatim
from .open_meteo_client import fetch_forecast, geocode_open_meteo

__all__ = [
    "build_data_source",
    "WeatherDataSource",
    "CallableWeatherDataSource",
    "geocode_nominatim",
    "geocode_open_meteo",
    "fetch_forecast",
]
