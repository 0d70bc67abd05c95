from __future__ import annotations

import sqlite3
from typing import Optional

from domain.errors import StorageUnavailable
from domain.models import StatsRecord
from domain.repositories import StatsRepository


class SqliteStatsRepository(StatsRepository):
    """
    SQLite-backed implementation of `StatsRepository`.

    Self-initialising: the `pvpstats` table is created if needed so a local
    database file can be seeded by hand. Reads only.
    """

    def __init__(self, db_path: str, timeout_seconds: float = 5.0) -> None:
        self._db_path = db_path
        self._timeout = timeout_seconds
        self._ensure_table()

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path, timeout=self._timeout)

    def _ensure_table(self) -> None:
        with self._get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS pvpstats (
                    uuid TEXT NOT NULL,
                    kills INTEGER NOT NULL DEFAULT 0,
                    deaths INTEGER NOT NULL DEFAULT 0,
                    coins INTEGER NOT NULL DEFAULT 0,
                    killstreak INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            conn.commit()

    @staticmethod
    def _to_domain(row: tuple) -> StatsRecord:
        return StatsRecord(
            uuid=str(row[0]),
            kills=int(row[1]),
            deaths=int(row[2]),
            coins=int(row[3]),
            killstreak=int(row[4]),
        )

    def find_by_identifier(self, canonical_id: str) -> Optional[StatsRecord]:
        try:
            conn = self._get_connection()
            try:
                cur = conn.cursor()
                cur.execute(
                    """
                    SELECT uuid,
                           COALESCE(kills, 0),
                           COALESCE(deaths, 0),
                           COALESCE(coins, 0),
                           COALESCE(killstreak, 0)
                    FROM pvpstats
                    WHERE uuid = ?
                    """,
                    (canonical_id,),
                )
                row = cur.fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageUnavailable(f"Failed to read from database: {exc}") from exc

        if not row:
            return None
        try:
            return self._to_domain(row)
        except (TypeError, ValueError) as exc:
            raise StorageUnavailable(f"Unreadable stats row for {canonical_id!r}: {exc}") from exc
