import threading
import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from weatherdash.errors import ValidationError
from weatherdash.favorites_store import base
from weatherdash.favorites_store.memory import InMemoryFavoritesStore


class TestInMemoryFavoritesStore(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryFavoritesStore()

    def test_empty_store_lists_nothing(self):
        self.assertEqual(self.store.list_favorites(), [])

    def test_create_generates_id_and_timestamp(self):
        fav = self.store.create_favorite("Kolhapur", 16.7, 74.24)
        self.assertTrue(fav.id)
        self.assertEqual(fav.name, "Kolhapur")
        self.assertIsNotNone(fav.created_at.tzinfo)

    def test_create_is_idempotent_by_coordinates(self):
        first = self.store.create_favorite("Kolhapur", 16.7, 74.24)
        second = self.store.create_favorite("Somewhere else", 16.7, 74.24)
        self.assertEqual(first, second)
        self.assertEqual(second.name, "Kolhapur")
        self.assertEqual(len(self.store.list_favorites()), 1)

    def test_list_newest_first(self):
        t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
        times = iter([t0, t0 + timedelta(minutes=1), t0 + timedelta(minutes=2)])

        class FakeDatetime(datetime):
            @classmethod
            def now(cls, tz=None):
                return next(times)

        with patch.object(base, "datetime", FakeDatetime):
            self.store.create_favorite("A", 1.0, 1.0)
            self.store.create_favorite("B", 2.0, 2.0)
            self.store.create_favorite("C", 3.0, 3.0)
        self.assertEqual([f.name for f in self.store.list_favorites()], ["C", "B", "A"])

    def test_validation(self):
        for name, lat, lon in [("", 1.0, 1.0), ("  ", 1.0, 1.0), (None, 1.0, 1.0),
                               ("x", "16.7", 1.0), ("x", 1.0, None), ("x", True, 1.0),
                               ("x", float("nan"), 1.0), ("x", 1.0, float("inf")), ("x", float("-inf"), 0.0)]:
            with self.assertRaises(ValidationError):
                self.store.create_favorite(name, lat, lon)
        self.assertEqual(self.store.list_favorites(), [])

    def test_integer_coordinates_accepted(self):
        fav = self.store.create_favorite("Null Island", 0, 0)
        self.assertEqual((fav.lat, fav.lon), (0.0, 0.0))

    def test_delete_is_idempotent(self):
        fav = self.store.create_favorite("Kolhapur", 16.7, 74.24)
        self.store.delete_favorite(fav.id)
        self.store.delete_favorite(fav.id)
        self.store.delete_favorite("does-not-exist")
        self.assertEqual(self.store.list_favorites(), [])

    def test_delete_frees_coordinates(self):
        fav = self.store.create_favorite("Kolhapur", 16.7, 74.24)
        self.store.delete_favorite(fav.id)
        again = self.store.create_favorite("Kolhapur again", 16.7, 74.24)
        self.assertNotEqual(again.id, fav.id)
        self.assertEqual(again.name, "Kolhapur again")

    def test_concurrent_identical_saves_create_one_record(self):
        results = []

        def save():
            results.append(self.store.create_favorite("Kolhapur", 16.7, 74.24))

        threads = [threading.Thread(target=save) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len({r.id for r in results}), 1)
        self.assertEqual(len(self.store.list_favorites()), 1)

    def test_clear(self):
        self.store.create_favorite("Kolhapur", 16.7, 74.24)
        self.store.clear()
        self.assertEqual(self.store.list_favorites(), [])


if __name__ == "__main__":
    unittest.main()
