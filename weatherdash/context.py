"""Process-wide handles built once at boot and handed to the API layer."""

from dataclasses import dataclass

from weatherdash import config
from weatherdash.data_sources import build_data_source
from weatherdash.favorites_store import FavoritesStore, build_favorites_store
from weatherdash.weather_service import WeatherService
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="context")


@dataclass
class AppContext:
    """Everything a request handler needs; no handler keeps state of its own."""
    settings: config.Settings
    weather: WeatherService
    favorites: FavoritesStore


def build_context(settings: config.Settings | None = None) -> AppContext:
    """
    Build the weather service and favorites store from settings.

    The favorites store is pinged here so a missing or unreachable database
    fails the boot rather than the first request. Raises ValueError for a bad
    configuration and StoreError for an unreachable store.
    """
    settings = settings or config.settings
    weather = WeatherService(
        build_data_source(settings),
        suggestion_limit=settings.suggestion_limit,
        forecast_days=settings.forecast_days,
        default_timezone=settings.default_timezone,
    )
    favorites = build_favorites_store(settings)
    favorites.ping()
    logger.info("Favorites store reachable")
    return AppContext(settings=settings, weather=weather, favorites=favorites)
