"""Build the configured favorites store at startup."""

from __future__ import annotations

from weatherdash import config
from weatherdash.favorites_store.base import FavoritesStore
from weatherdash.favorites_store.memory import InMemoryFavoritesStore
from utils.logging_utils import get_tagged_logger, mask_db_url

logger = get_tagged_logger(__name__, tag="favorites_store/factory")


DEFAULT_STORE_NAME = "sql"


def build_favorites_store(settings: config.Settings | None = None) -> FavoritesStore:
    """Instantiate the configured favorites backend without checking connectivity."""
    settings = settings or config.settings
    backend = (settings.favorites_store or DEFAULT_STORE_NAME).lower()

    if backend == "sql":
        from .sql import SqlFavoritesStore

        db_url = settings.favorites_database_url
        if not db_url:
            raise ValueError("favorites_database_url must be set for the SQL favorites store")
        logger.info("Using SQL favorites store", extra={"db_url": mask_db_url(db_url)})
        return SqlFavoritesStore.from_url(db_url)

    if backend == "redis":
        import redis

        from .redis import RedisFavoritesStore

        redis_url = settings.favorites_redis_url
        if not redis_url:
            raise ValueError("favorites_redis_url must be set for the Redis favorites store")
        logger.info(f"Using Redis favorites store at {mask_db_url(redis_url)}")
        return RedisFavoritesStore(redis.Redis.from_url(redis_url), prefix=settings.favorites_redis_prefix)

    if backend == "memory":
        logger.warning("Using InMemoryFavoritesStore; favorites are lost on restart")
        return InMemoryFavoritesStore()

    raise ValueError(f"Unknown favorites store '{backend}'")
