import os
import sqlite3
import tempfile
import unittest

from domain.errors import StorageUnavailable
from domain.models import StatsRecord
from infrastructure.db.stats_repository_sqlite import SqliteStatsRepository


ALICE_UUID = "01234567-89ab-cdef-0123-456789abcdef"


class SqliteStatsRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        fd, self.db_path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        self.repo = SqliteStatsRepository(self.db_path)

    def tearDown(self) -> None:
        os.remove(self.db_path)

    def _insert(self, *rows):
        with sqlite3.connect(self.db_path) as conn:
            conn.executemany(
                "INSERT INTO pvpstats (uuid, kills, deaths, coins, killstreak) VALUES (?, ?, ?, ?, ?)",
                rows,
            )
            conn.commit()
        conn.close()

    def test_returns_matching_row(self):
        self._insert((ALICE_UUID, 10, 2, 500, 3))
        self.assertEqual(
            self.repo.find_by_identifier(ALICE_UUID),
            StatsRecord(uuid=ALICE_UUID, kills=10, deaths=2, coins=500, killstreak=3),
        )

    def test_missing_row_is_none_not_error(self):
        self._insert((ALICE_UUID, 10, 2, 500, 3))
        self.assertIsNone(self.repo.find_by_identifier("ffffffff-ffff-ffff-ffff-ffffffffffff"))
        self.assertIsNone(self.repo.find_by_identifier(""))

    def test_duplicates_return_a_single_record(self):
        self._insert((ALICE_UUID, 10, 2, 500, 3), (ALICE_UUID, 99, 99, 99, 99))
        record = self.repo.find_by_identifier(ALICE_UUID)
        self.assertIsInstance(record, StatsRecord)
        self.assertEqual(record.uuid, ALICE_UUID)

    def test_null_counters_are_read_as_zero(self):
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DROP TABLE pvpstats")
            conn.execute(
                "CREATE TABLE pvpstats (uuid TEXT, kills INTEGER, deaths INTEGER, coins INTEGER, killstreak INTEGER)"
            )
            conn.execute("INSERT INTO pvpstats (uuid, kills) VALUES (?, ?)", (ALICE_UUID, 7))
            conn.commit()
        conn.close()
        self.assertEqual(
            self.repo.find_by_identifier(ALICE_UUID),
            StatsRecord(uuid=ALICE_UUID, kills=7, deaths=0, coins=0, killstreak=0),
        )

    def test_query_failure_raises_storage_unavailable(self):
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DROP TABLE pvpstats")
            conn.commit()
        conn.close()
        with self.assertRaises(StorageUnavailable):
            self.repo.find_by_identifier(ALICE_UUID)


if __name__ == "__main__":
    unittest.main()
