"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the WeatherDash API server."""
    model_config = SettingsConfigDict(env_prefix="WEATHERDASH_", env_file=".env", extra="ignore")

    favorites_store: str = "sql"  # options: sql, redis, memory
    favorites_database_url: str | None = None
    favorites_redis_url: str | None = None
    favorites_redis_prefix: str = "favorite:"

    geocoder: str = "nominatim"  # options: nominatim, open_meteo
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    open_meteo_geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    open_meteo_forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    user_agent: str = "WeatherDash/1.0 (weather dashboard)"
    http_timeout_seconds: float = 10.0

    forecast_days: int = 7
    suggestion_limit: int = 5
    default_timezone: str = "auto"

    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000

    @field_validator("nominatim_url", "open_meteo_geocoding_url", "open_meteo_forecast_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize endpoint URLs to avoid double slashes."""
        return str(v).rstrip("/")


class DashboardSettings(BaseSettings):
    """Environment-driven configuration for the dashboard client."""
    model_config = SettingsConfigDict(env_prefix="WEATHERDASH_DASHBOARD_", env_file=".env", extra="ignore")

    api_base_url: str = "http://localhost:5000"
    debounce_seconds: float = 0.35
    timezone: str = "auto"
    http_timeout_seconds: float = 10.0

    @field_validator("api_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
