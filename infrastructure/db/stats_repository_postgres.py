from __future__ import annotations

from typing import Optional

import psycopg2

from domain.errors import StorageUnavailable
from domain.models import StatsRecord
from domain.repositories import StatsRepository


class PostgresStatsRepository(StatsRepository):
    """
    Postgres-backed implementation of `StatsRepository`.

    Reads the `pvpstats` table, which is owned and written by the game
    servers. This repository never creates or modifies rows.
    """

    def __init__(self, db_params: dict, timeout_seconds: int = 5) -> None:
        self._db_params = dict(db_params)
        self._db_params.setdefault("connect_timeout", timeout_seconds)
        # statement_timeout is in milliseconds.
        self._db_params.setdefault("options", f"-c statement_timeout={int(timeout_seconds * 1000)}")

    def _get_connection(self):
        return psycopg2.connect(**self._db_params)

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
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        SELECT uuid,
                               COALESCE(kills, 0),
                               COALESCE(deaths, 0),
                               COALESCE(coins, 0),
                               COALESCE(killstreak, 0)
                        FROM pvpstats
                        WHERE uuid = %s
                        """,
                        (canonical_id,),
                    )
                    row = cur.fetchone()
            finally:
                conn.close()
        except psycopg2.Error as exc:
            raise StorageUnavailable(f"Failed to read from database: {exc}") from exc

        if not row:
            return None
        try:
            return self._to_domain(row)
        except (TypeError, ValueError) as exc:
            raise StorageUnavailable(f"Unreadable stats row for {canonical_id!r}: {exc}") from exc
