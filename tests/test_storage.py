from __future__ import annotations

import sqlite3
import tempfile
import unittest
from datetime import date
from pathlib import Path

from pricetracker.adapters import PriceEntrySQLiteRepository
from pricetracker.core.models import PriceEntry


class PriceEntrySQLiteRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = Path(self._tmp.name) / "nested" / "prices.db"
        self.repo = PriceEntrySQLiteRepository(self.db_path)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _entry(self, title: str = "牛奶", price: float = 12.5, observed_on: date = date(2026, 1, 1)) -> PriceEntry:
        return PriceEntry(
            title=title,
            brand="伊利",
            category="食品",
            price=price,
            url="https://item.jd.com/1.html",
            specification="净含量: 250ml",
            observed_on=observed_on,
        )

    def test_add_assigns_identity(self) -> None:
        stored = self.repo.add(self._entry())

        self.assertIsNotNone(stored.id)
        self.assertIsNotNone(stored.created_at)
        self.assertEqual(self.repo.get(stored.id), stored)
        self.assertTrue(self.db_path.exists())

    def test_list_entries_newest_first(self) -> None:
        first = self.repo.add(self._entry("first"))
        second = self.repo.add(self._entry("second"))

        self.assertEqual([entry.id for entry in self.repo.list_entries()], [second.id, first.id])

    def test_add_many_is_one_transaction(self) -> None:
        stored = self.repo.add_many([self._entry("a"), self._entry("b")])

        self.assertEqual(len(stored), 2)
        self.assertEqual(len(self.repo.list_entries()), 2)
        self.assertEqual(self.repo.add_many([]), [])

    def test_add_many_rolls_back_on_failure(self) -> None:
        broken = self._entry("broken")
        broken.title = None  # type: ignore[assignment]

        with self.assertRaises(sqlite3.IntegrityError):
            self.repo.add_many([self._entry("ok"), broken])

        self.assertEqual(self.repo.list_entries(), [])

    def test_delete(self) -> None:
        stored = self.repo.add(self._entry())

        self.repo.delete(stored.id)

        self.assertIsNone(self.repo.get(stored.id))
        with self.assertRaises(KeyError):
            self.repo.delete(stored.id)

    def test_price_history_is_ordered_by_date(self) -> None:
        self.repo.add(self._entry(price=13.0, observed_on=date(2026, 2, 1)))
        self.repo.add(self._entry(price=11.0, observed_on=date(2026, 1, 1)))
        self.repo.add(self._entry(title="其他", price=99.0))

        history = self.repo.price_history("牛奶")

        self.assertEqual([(entry.observed_on, entry.price) for entry in history], [
            (date(2026, 1, 1), 11.0),
            (date(2026, 2, 1), 13.0),
        ])

    def test_reopening_keeps_entries(self) -> None:
        self.repo.add(self._entry())

        reopened = PriceEntrySQLiteRepository(self.db_path)

        self.assertEqual(len(reopened.list_entries()), 1)


if __name__ == "__main__":
    unittest.main()
