"""Factory helpers for choosing the geocoding provider at startup."""

from __future__ import annotations

from functools import partial

from weatherdash import config
from weatherdash.data_sources.base import CallableWeatherDataSource, WeatherDataSource
from weatherdash.data_sources.nominatim_client import geocode_nominatim
from weatherdash.data_sources.open_meteo_client import fetch_forecast, geocode_open_meteo
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_GEOCODER_NAME = "nominatim"


def build_data_source(settings: config.Settings | None = None) -> WeatherDataSource:
    """Bind the configured geocoder and the Open-Meteo forecast fetcher."""
    settings = settings or config.settings
    geocoder_name = (settings.geocoder or DEFAULT_GEOCODER_NAME).lower()
    timeout = settings.http_timeout_seconds

    forecaster = partial(fetch_forecast, url=settings.open_meteo_forecast_url, timeout=timeout)

    if geocoder_name == "nominatim":
        logger.info(f"Using Nominatim geocoder at {settings.nominatim_url}")
        geocoder = partial(
            geocode_nominatim,
            url=settings.nominatim_url,
            user_agent=settings.user_agent,
            timeout=timeout,
        )
        return CallableWeatherDataSource(geocoder=geocoder, forecaster=forecaster)

    if geocoder_name == "open_meteo":
        logger.info(f"Using Open-Meteo geocoder at {settings.open_meteo_geocoding_url}")
        geocoder = partial(geocode_open_meteo, url=settings.open_meteo_geocoding_url, timeout=timeout)
        return CallableWeatherDataSource(geocoder=geocoder, forecaster=forecaster)

    raise ValueError(f"Unknown geocoder '{geocoder_name}'")
