import types
import unittest

from weatherdash.favorites_store import factory
from weatherdash.favorites_store.factory import build_favorites_store
from weatherdash.favorites_store.memory import InMemoryFavoritesStore


class DummySettings:
    def __init__(self, **kwargs):
        self.favorites_store = "sql"
        self.favorites_database_url = None
        self.favorites_redis_url = None
        self.favorites_redis_prefix = "favorite:"
        for k, v in kwargs.items():
            setattr(self, k, v)


class TestFavoritesStoreFactory(unittest.TestCase):
    def test_memory_backend(self):
        store = build_favorites_store(DummySettings(favorites_store="memory"))
        self.assertIsInstance(store, InMemoryFavoritesStore)

    def test_sql_requires_url(self):
        with self.assertRaises(ValueError):
            build_favorites_store(DummySettings(favorites_store="sql"))

    def test_sql_backend_uses_from_url(self):
        sentinel = object()
        from weatherdash.favorites_store import sql as sql_module
        orig_class = sql_module.SqlFavoritesStore
        try:
            sql_module.SqlFavoritesStore = types.SimpleNamespace(from_url=lambda url: sentinel)
            store = build_favorites_store(DummySettings(favorites_database_url="postgresql://u:p@h/db"))
            self.assertIs(store, sentinel)
        finally:
            sql_module.SqlFavoritesStore = orig_class

    def test_sql_backend_with_sqlite(self):
        store = build_favorites_store(DummySettings(favorites_database_url="sqlite://"))
        store.ping()
        self.assertEqual(store.list_favorites(), [])

    def test_redis_requires_url(self):
        with self.assertRaises(ValueError):
            build_favorites_store(DummySettings(favorites_store="redis"))

    def test_redis_backend_uses_prefix(self):
        store = build_favorites_store(
            DummySettings(favorites_store="redis", favorites_redis_url="redis://localhost:6379/0",
                          favorites_redis_prefix="wd:")
        )
        self.assertEqual(store.prefix, "wd:")

    def test_unknown_backend_raises(self):
        with self.assertRaises(ValueError):
            build_favorites_store(DummySettings(favorites_store="mongo"))

    def test_default_name(self):
        self.assertEqual(factory.DEFAULT_STORE_NAME, "sql")


if __name__ == "__main__":
    unittest.main()
