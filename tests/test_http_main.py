import os
import tempfile
import unittest
from unittest.mock import patch

import http_main
from infrastructure.cache.identity_cache_memory import InMemoryIdentityCache
from infrastructure.cache.identity_cache_redis import RedisIdentityCache
from infrastructure.db.stats_repository_postgres import PostgresStatsRepository
from infrastructure.db.stats_repository_sqlite import SqliteStatsRepository


class ListenAddressTests(unittest.TestCase):
    def test_port_only_listens_on_all_interfaces(self):
        self.assertEqual(http_main.parse_listen_address(":3000"), ("0.0.0.0", 3000))

    def test_host_and_port(self):
        self.assertEqual(http_main.parse_listen_address("127.0.0.1:8080"), ("127.0.0.1", 8080))

    def test_invalid_address(self):
        for address in ("3000", "localhost:", "localhost:http"):
            with self.assertRaises(RuntimeError):
                http_main.parse_listen_address(address)


class WiringTests(unittest.TestCase):
    def test_memory_cache_backend(self):
        with patch.object(http_main, "CACHE_BACKEND", "memory"):
            self.assertIsInstance(http_main.build_identity_cache(), InMemoryIdentityCache)

    def test_redis_cache_backend(self):
        with patch.object(http_main, "CACHE_BACKEND", "redis"):
            self.assertIsInstance(http_main.build_identity_cache(), RedisIdentityCache)

    def test_unknown_cache_backend(self):
        with patch.object(http_main, "CACHE_BACKEND", "memcached"):
            with self.assertRaises(RuntimeError):
                http_main.build_identity_cache()

    def test_sqlite_store_without_database_host(self):
        with tempfile.TemporaryDirectory() as tmp:
            db_path = os.path.join(tmp, "stats.db")
            with patch.dict(os.environ, {"DATABASE_HOST": ""}), patch.object(http_main, "DB_PATH", db_path):
                self.assertIsInstance(http_main.build_stats_repository(), SqliteStatsRepository)

    def test_postgres_store_with_database_host(self):
        env = {"DATABASE_HOST": "db", "DATABASE_NAME": "stats"}
        with patch.dict(os.environ, env):
            self.assertIsInstance(http_main.build_stats_repository(), PostgresStatsRepository)


if __name__ == "__main__":
    unittest.main()
