import argparse
import logging
import os

from dotenv import load_dotenv

from application.services import DEFAULT_IDENTITY_TTL_SECONDS
from infrastructure.cache.identity_cache_memory import InMemoryIdentityCache
from infrastructure.cache.identity_cache_redis import RedisIdentityCache, create_redis_client
from infrastructure.db.stats_repository_postgres import PostgresStatsRepository
from infrastructure.db.stats_repository_sqlite import SqliteStatsRepository
from infrastructure.mojang.identity_provider_http import MojangIdentityProvider
from interfaces.http.handlers import create_http_app


load_dotenv()

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
CACHE_BACKEND = os.environ.get("CACHE_BACKEND", "redis")
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
DB_PATH = os.environ.get("DB_PATH", "pvpstats.db")
IDENTITY_CACHE_TTL_SECONDS = int(
    os.environ.get("IDENTITY_CACHE_TTL_SECONDS", DEFAULT_IDENTITY_TTL_SECONDS)
)
PROVIDER_TIMEOUT_SECONDS = float(os.environ.get("PROVIDER_TIMEOUT_SECONDS", "5"))
STORE_TIMEOUT_SECONDS = int(os.environ.get("STORE_TIMEOUT_SECONDS", "5"))

logger = logging.getLogger(__name__)


def parse_listen_address(address: str):
    """Split `host:port` (host may be empty, meaning all interfaces)."""

    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise RuntimeError(f"Invalid listen address {address!r}, expected host:port.")
    return host or "0.0.0.0", int(port)


def build_stats_repository():
    if not os.environ.get("DATABASE_HOST"):
        logger.info("DATABASE_HOST not set, reading stats from SQLite file %s", DB_PATH)
        return SqliteStatsRepository(DB_PATH, STORE_TIMEOUT_SECONDS)

    db_params = {
        "host": os.environ["DATABASE_HOST"],
        "port": int(os.environ.get("DATABASE_PORT", "5432")),
        "user": os.environ.get("DATABASE_USER"),
        "password": os.environ.get("DATABASE_PASSWORD"),
        "dbname": os.environ.get("DATABASE_NAME"),
    }
    return PostgresStatsRepository(db_params, STORE_TIMEOUT_SECONDS)


def build_identity_cache():
    if CACHE_BACKEND == "memory":
        return InMemoryIdentityCache()
    if CACHE_BACKEND == "redis":
        return RedisIdentityCache(create_redis_client(REDIS_URL, STORE_TIMEOUT_SECONDS))
    raise RuntimeError(f"Unknown CACHE_BACKEND {CACHE_BACKEND!r}, expected 'redis' or 'memory'.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve player PvP stats over HTTP.")
    parser.add_argument("--listen", default=":3000", help="The address the server will listen on.")
    args = parser.parse_args()

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    host, port = parse_listen_address(args.listen)

    app = create_http_app(
        identity_cache=build_identity_cache(),
        identity_provider=MojangIdentityProvider(timeout=PROVIDER_TIMEOUT_SECONDS),
        stats_repo=build_stats_repository(),
        ttl_seconds=IDENTITY_CACHE_TTL_SECONDS,
    )

    logger.info("Starting HTTP server on %s:%d", host, port)
    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    main()
