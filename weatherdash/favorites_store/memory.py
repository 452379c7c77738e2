"""In-memory favorites store, intended for development and tests."""

import threading
from typing import List

from weatherdash.favorites_store.base import FavoritesStore, new_favorite, validate_favorite_fields
from weatherdash.models import Favorite
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="favorites_store/in_memory")


class InMemoryFavoritesStore(FavoritesStore):
    """Thread-safe dict-backed store; contents vanish with the process."""

    def __init__(self) -> None:
        logger.debug("Initializing InMemoryFavoritesStore")
        self._favorites: dict[str, Favorite] = {}
        self._by_coords: dict[tuple[float, float], str] = {}
        self._lock = threading.Lock()

    def list_favorites(self) -> List[Favorite]:
        """Return favorites newest first."""
        with self._lock:
            favorites = list(self._favorites.values())
        # reversed insertion order breaks created_at ties
        return sorted(reversed(favorites), key=lambda f: f.created_at, reverse=True)

    def create_favorite(self, name, lat, lon) -> Favorite:
        """Insert unless the coordinates are already saved."""
        name, lat, lon = validate_favorite_fields(name, lat, lon)
        with self._lock:
            existing_id = self._by_coords.get((lat, lon))
            if existing_id is not None:
                return self._favorites[existing_id]
            favorite = new_favorite(name, lat, lon)
            self._favorites[favorite.id] = favorite
            self._by_coords[(lat, lon)] = favorite.id
            return favorite

    def delete_favorite(self, favorite_id: str) -> None:
        """Remove a favorite if it exists."""
        with self._lock:
            favorite = self._favorites.pop(favorite_id, None)
            if favorite is not None:
                self._by_coords.pop((favorite.lat, favorite.lon), None)

    def ping(self) -> None:
        return None

    def clear(self) -> None:
        """Clear all favorites."""
        with self._lock:
            self._favorites.clear()
            self._by_coords.clear()
