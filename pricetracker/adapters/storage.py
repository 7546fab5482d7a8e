from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from pathlib import Path

from pricetracker.core.models import PriceEntry, utcnow

LOGGER = logging.getLogger(__name__)


def _safe_str(value: object) -> str | None:
    if value is None:
        return None
    token = str(value).strip()
    return token or None


class PriceEntrySQLiteRepository:
    """
    Local store for tracked price entries.

    One row per observation; the same product seen on different days is kept
    as separate rows so `price_history` can chart it.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def add(self, entry: PriceEntry) -> PriceEntry:
        return self.add_many([entry])[0]

    def add_many(self, entries: list[PriceEntry]) -> list[PriceEntry]:
        if not entries:
            return []

        stored: list[PriceEntry] = []
        conn = self._connect()
        try:
            conn.execute("BEGIN")
            for entry in entries:
                created_at = entry.created_at or utcnow()
                cursor = conn.execute(
                    """
                    INSERT INTO price_entries(
                        url,
                        title,
                        brand,
                        category,
                        price,
                        specification,
                        observed_on,
                        remark,
                        created_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        entry.url,
                        entry.title,
                        entry.brand,
                        entry.category,
                        float(entry.price),
                        _safe_str(entry.specification),
                        entry.observed_on.isoformat(),
                        _safe_str(entry.remark),
                        created_at.isoformat(),
                    ],
                )
                stored.append(entry.with_identity(int(cursor.lastrowid), created_at))
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

        LOGGER.info("Stored %d price entries in %s", len(stored), self._db_path)
        return stored

    def list_entries(self) -> list[PriceEntry]:
        conn = self._connect()
        try:
            rows = conn.execute(
                """
                SELECT *
                FROM price_entries
                ORDER BY created_at DESC, id DESC
                """
            ).fetchall()
        finally:
            conn.close()
        return [self._row_to_entry(row) for row in rows]

    def get(self, entry_id: int) -> PriceEntry | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM price_entries WHERE id = ?", [int(entry_id)]).fetchone()
        finally:
            conn.close()
        return self._row_to_entry(row) if row is not None else None

    def delete(self, entry_id: int) -> None:
        conn = self._connect()
        try:
            cursor = conn.execute("DELETE FROM price_entries WHERE id = ?", [int(entry_id)])
            if cursor.rowcount == 0:
                raise KeyError(entry_id)
            conn.commit()
        finally:
            conn.close()

    def price_history(self, title: str) -> list[PriceEntry]:
        conn = self._connect()
        try:
            rows = conn.execute(
                """
                SELECT *
                FROM price_entries
                WHERE title = ?
                ORDER BY observed_on ASC, id ASC
                """,
                [title.strip()],
            ).fetchall()
        finally:
            conn.close()
        return [self._row_to_entry(row) for row in rows]

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> PriceEntry:
        return PriceEntry(
            id=int(row["id"]),
            url=row["url"] or "",
            title=row["title"],
            brand=row["brand"],
            category=row["category"],
            price=float(row["price"]),
            specification=_safe_str(row["specification"]),
            observed_on=date.fromisoformat(row["observed_on"]),
            remark=_safe_str(row["remark"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        conn = self._connect()
        try:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS price_entries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    url TEXT NOT NULL DEFAULT '',
                    title TEXT NOT NULL,
                    brand TEXT NOT NULL,
                    category TEXT NOT NULL,
                    price REAL NOT NULL,
                    specification TEXT,
                    observed_on TEXT NOT NULL,
                    remark TEXT,
                    created_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS ix_price_entries_title_observed
                ON price_entries(title, observed_on);
                """
            )
            conn.commit()
        finally:
            conn.close()
