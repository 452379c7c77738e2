"""SQL-backed favorites store (SQLite, Postgres, or anything SQLAlchemy speaks).

Uniqueness of (lat, lon) is enforced by the database, so two concurrent saves of
the same coordinates cannot both insert; the loser re-reads the winner's row.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    create_engine,
    delete,
    select,
    text,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from weatherdash.errors import StoreError
from weatherdash.favorites_store.base import FavoritesStore, new_favorite, validate_favorite_fields
from weatherdash.models import Favorite
from utils.logging_utils import get_tagged_logger, mask_db_url

logger = get_tagged_logger(__name__, tag="favorites_store/sql")

metadata = MetaData()

favorites_table = Table(
    "favorites",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("name", String(512), nullable=False),
    Column("lat", Float, nullable=False),
    Column("lon", Float, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, index=True),
    UniqueConstraint("lat", "lon", name="uq_favorites_lat_lon"),
)


class SqlFavoritesStore(FavoritesStore):
    """Persist favorites in a single `favorites` table."""

    def __init__(self, engine: Engine, *, create_schema: bool = True) -> None:
        """Bind to an engine and create the table if it does not exist yet."""
        self.engine = engine
        if create_schema:
            try:
                metadata.create_all(engine)
            except SQLAlchemyError as exc:
                raise StoreError("Favorites database unavailable") from exc

    @classmethod
    def from_url(cls, database_url: str, **kwargs) -> "SqlFavoritesStore":
        """Create an engine from a URL and build the store."""
        url = make_url(database_url)
        engine_kwargs = {}
        if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
            # one shared connection, otherwise each thread sees its own empty database
            engine_kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
        logger.info(f"Connecting favorites store to {mask_db_url(database_url)}")
        engine = create_engine(database_url, future=True, **engine_kwargs)
        return cls(engine, **kwargs)

    @staticmethod
    def _to_favorite(row) -> Favorite:
        created_at: dt.datetime = row.created_at
        # SQLite drops tzinfo on the way back
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=dt.timezone.utc)
        return Favorite(id=row.id, name=row.name, lat=row.lat, lon=row.lon, created_at=created_at)

    def _find_by_coords(self, conn, lat: float, lon: float) -> Optional[Favorite]:
        row = conn.execute(
            select(favorites_table).where(favorites_table.c.lat == lat, favorites_table.c.lon == lon)
        ).first()
        return self._to_favorite(row) if row else None

    def list_favorites(self) -> List[Favorite]:
        """Return favorites newest first."""
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(
                    select(favorites_table).order_by(favorites_table.c.created_at.desc())
                ).all()
        except SQLAlchemyError as exc:
            logger.error(f"Failed to list favorites: {exc}")
            raise StoreError("Failed to load favorites") from exc
        return [self._to_favorite(row) for row in rows]

    def create_favorite(self, name, lat, lon) -> Favorite:
        """Insert unless the coordinates are already saved; first name wins."""
        name, lat, lon = validate_favorite_fields(name, lat, lon)
        try:
            with self.engine.begin() as conn:
                existing = self._find_by_coords(conn, lat, lon)
                if existing:
                    return existing
                favorite = new_favorite(name, lat, lon)
                conn.execute(
                    favorites_table.insert().values(
                        id=favorite.id,
                        name=favorite.name,
                        lat=favorite.lat,
                        lon=favorite.lon,
                        created_at=favorite.created_at,
                    )
                )
                logger.info(f"Saved favorite {favorite.id} ({lat}, {lon})")
                return favorite
        except IntegrityError:
            logger.info(f"Concurrent save for ({lat}, {lon}); returning stored favorite")
            try:
                with self.engine.connect() as conn:
                    existing = self._find_by_coords(conn, lat, lon)
            except SQLAlchemyError as exc:
                raise StoreError("Save failed") from exc
            if existing is None:
                raise StoreError("Save failed")
            return existing
        except SQLAlchemyError as exc:
            logger.error(f"Failed to save favorite: {exc}")
            raise StoreError("Save failed") from exc

    def delete_favorite(self, favorite_id: str) -> None:
        """Delete by id; failures are logged and not raised."""
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(favorites_table).where(favorites_table.c.id == favorite_id))
        except SQLAlchemyError as exc:
            logger.warning(f"Failed to delete favorite {favorite_id}: {exc}")

    def ping(self) -> None:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise StoreError("Favorites database unavailable") from exc

    def clear(self) -> None:
        """Remove every favorite."""
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(favorites_table))
        except SQLAlchemyError as exc:
            raise StoreError("Failed to clear favorites") from exc
