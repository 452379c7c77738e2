"""Shared protocol and helpers for favorites storage backends."""

import math
import numbers
import uuid
from datetime import datetime, timezone
from typing import Any, List, Protocol

from weatherdash.errors import ValidationError
from weatherdash.models import Favorite


class FavoritesStore(Protocol):
    """Protocol for favorites storage backends.

    Implementations hold at most one favorite per (lat, lon); `create_favorite`
    returns the existing record for a known pair instead of inserting.
    """

    def list_favorites(self) -> List[Favorite]:
        """Return all favorites, newest first."""

    def create_favorite(self, name: Any, lat: Any, lon: Any) -> Favorite:
        """Insert a favorite, or return the one already stored for (lat, lon)."""

    def delete_favorite(self, favorite_id: str) -> None:
        """Delete a favorite without raising if it is absent."""

    def ping(self) -> None:
        """Raise StoreError if the backend is unreachable."""

    def clear(self) -> None:
        """Remove all favorites; raise StoreError if the backend fails."""


def _is_number(value: Any) -> bool:
    # NaN and infinity have no JSON form and would come back as null
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def validate_favorite_fields(name: Any, lat: Any, lon: Any) -> tuple[str, float, float]:
    """Check a create request and return normalized (name, lat, lon)."""
    if not isinstance(name, str) or not name.strip() or not _is_number(lat) or not _is_number(lon):
        raise ValidationError("name, lat, lon required")
    return name, float(lat), float(lon)


def new_favorite(name: str, lat: float, lon: float) -> Favorite:
    """Build a favorite with a generated id and the current UTC time."""
    return Favorite(
        id=uuid.uuid4().hex,
        name=name,
        lat=lat,
        lon=lon,
        created_at=datetime.now(timezone.utc),
    )
