"""Redis-backed favorites store.

Layout under the configured prefix:
- `<prefix><id>`: JSON document for one favorite
- `<prefix>index`: sorted set of ids scored by creation time
- `<prefix>coords:<lat>:<lon>`: id owning those coordinates, claimed with SET NX
"""

import json
from typing import List, Optional

from redis.exceptions import RedisError

from weatherdash.errors import StoreError
from weatherdash.favorites_store.base import FavoritesStore, new_favorite, validate_favorite_fields
from weatherdash.models import Favorite
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="favorites_store/redis")

# Compare-and-delete: drop a coordinate claim only while it still names ARGV[1].
RELEASE_CLAIM_SCRIPT = """
if redis.call("GET", KEYS[1]) == ARGV[1] then
    return redis.call("DEL", KEYS[1])
end
return 0
"""


def _text(raw) -> Optional[str]:
    if raw is None:
        return None
    if isinstance(raw, bytes):
        return raw.decode("utf-8")
    return str(raw)


class RedisFavoritesStore(FavoritesStore):
    """Favorites as JSON documents in Redis."""

    def __init__(self, client, prefix: str = "favorite:") -> None:
        """Initialize with a Redis client and key prefix."""
        logger.debug("Initializing RedisFavoritesStore")
        self.client = client
        self.prefix = prefix

    def _key(self, favorite_id: str) -> str:
        return f"{self.prefix}{favorite_id}"

    @property
    def _index_key(self) -> str:
        return f"{self.prefix}index"

    def _coords_key(self, lat: float, lon: float) -> str:
        return f"{self.prefix}coords:{lat!r}:{lon!r}"

    @staticmethod
    def _dump(favorite: Favorite) -> str:
        return json.dumps(favorite.model_dump(mode="json", by_alias=True))

    @staticmethod
    def _load(raw) -> Optional[Favorite]:
        text = _text(raw)
        if not text:
            return None
        try:
            return Favorite.model_validate(json.loads(text))
        except ValueError as exc:
            logger.error(f"Skipping corrupt favorite document: {exc}")
            return None

    def _get(self, favorite_id: str) -> Optional[Favorite]:
        return self._load(self.client.get(self._key(favorite_id)))

    def _release_claim(self, coords_key: str, owner_id: str) -> None:
        self.client.eval(RELEASE_CLAIM_SCRIPT, 1, coords_key, owner_id)

    def list_favorites(self) -> List[Favorite]:
        """Return favorites newest first."""
        try:
            ids = [_text(i) for i in self.client.zrevrange(self._index_key, 0, -1)]
            if not ids:
                return []
            raws = self.client.mget([self._key(i) for i in ids])
        except RedisError as exc:
            logger.error(f"Failed to list favorites from Redis: {exc}")
            raise StoreError("Failed to load favorites") from exc
        return [fav for fav in (self._load(raw) for raw in raws) if fav is not None]

    def create_favorite(self, name, lat, lon) -> Favorite:
        """Insert unless the coordinates are already claimed; first name wins."""
        name, lat, lon = validate_favorite_fields(name, lat, lon)
        coords_key = self._coords_key(lat, lon)
        try:
            existing_id = _text(self.client.get(coords_key))
            if existing_id:
                existing = self._get(existing_id)
                if existing:
                    return existing
                # claim outlived its document, e.g. a delete interrupted halfway
                logger.warning(f"Releasing dangling claim on ({lat}, {lon}) held by {existing_id}")
                self._release_claim(coords_key, existing_id)
                self.client.zrem(self._index_key, existing_id)

            favorite = new_favorite(name, lat, lon)
            # write the document before claiming so a claimed id always resolves
            self.client.set(self._key(favorite.id), self._dump(favorite))
            if not self.client.set(coords_key, favorite.id, nx=True):
                self.client.delete(self._key(favorite.id))
                winner = self._get(_text(self.client.get(coords_key)) or "")
                if winner is None:
                    raise StoreError("Save failed")
                return winner
            self.client.zadd(self._index_key, {favorite.id: favorite.created_at.timestamp()})
        except RedisError as exc:
            logger.error(f"Failed to save favorite to Redis: {exc}")
            raise StoreError("Save failed") from exc
        logger.info(f"Saved favorite {favorite.id} ({lat}, {lon})")
        return favorite

    def delete_favorite(self, favorite_id: str) -> None:
        """Delete by id; failures are logged and not raised."""
        try:
            favorite = self._get(favorite_id)
            self.client.delete(self._key(favorite_id))
            self.client.zrem(self._index_key, favorite_id)
            if favorite is not None:
                self._release_claim(self._coords_key(favorite.lat, favorite.lon), favorite_id)
        except RedisError as exc:
            logger.warning(f"Failed to delete favorite {favorite_id} from Redis: {exc}")

    def ping(self) -> None:
        try:
            self.client.ping()
        except RedisError as exc:
            raise StoreError("Favorites database unavailable") from exc

    def clear(self) -> None:
        """Delete every key under the configured prefix."""
        try:
            for key in self.client.scan_iter(f"{self.prefix}*"):
                self.client.delete(key)
        except RedisError as exc:
            logger.error(f"Failed to clear favorites from Redis: {exc}")
            raise StoreError("Failed to clear favorites") from exc
