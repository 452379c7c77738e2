"""Favorites storage backends."""

from .base import FavoritesStore, validate_favorite_fields
from .factory import build_favorites_store
from .memory import InMemoryFavoritesStore

__all__ = [
    "FavoritesStore",
    "InMemoryFavoritesStore",
    "build_favorites_store",
    "validate_favorite_fields",
]
