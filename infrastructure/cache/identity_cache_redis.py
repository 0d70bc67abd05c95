from __future__ import annotations

import json
import logging
from typing import Optional

import redis

from domain.errors import CacheUnavailable
from domain.models import IdentityRecord
from domain.repositories import IdentityCache

logger = logging.getLogger(__name__)

KEY_PREFIX = "players:"


def create_redis_client(url: str, timeout: float) -> redis.Redis:
    """Build a client whose connects and commands are bounded by `timeout`."""

    return redis.Redis.from_url(
        url,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
        decode_responses=True,
    )


class RedisIdentityCache(IdentityCache):
    """
    Redis-backed implementation of `IdentityCache`.

    Entries live under `players:<display name>` as JSON using the identity
    provider's field names, and expire through Redis' own TTL. Any Redis
    failure degrades to a cache miss.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @staticmethod
    def _key(display_name: str) -> str:
        return KEY_PREFIX + display_name

    @staticmethod
    def _serialize(record: IdentityRecord) -> str:
        return json.dumps({"name": record.display_name, "id": record.external_id})

    @staticmethod
    def _deserialize(raw) -> IdentityRecord:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("cached identity is not a JSON object")
        return IdentityRecord(
            display_name=str(data.get("name", "")),
            external_id=str(data.get("id", "")),
        )

    def _read(self, display_name: str) -> Optional[IdentityRecord]:
        try:
            raw = self._client.get(self._key(display_name))
        except redis.RedisError as exc:
            raise CacheUnavailable(str(exc)) from exc

        if raw is None:
            return None

        try:
            return self._deserialize(raw)
        except ValueError as exc:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors.
            raise CacheUnavailable(f"undecodable entry: {exc}") from exc

    def get(self, display_name: str) -> Optional[IdentityRecord]:
        try:
            return self._read(display_name)
        except CacheUnavailable as exc:
            logger.warning("Identity cache read failed for %r, treating as miss: %s", display_name, exc)
            return None

    def put(self, display_name: str, record: IdentityRecord, ttl_seconds: int) -> None:
        try:
            self._client.set(self._key(display_name), self._serialize(record), ex=ttl_seconds)
        except redis.RedisError as exc:
            logger.warning("Identity cache write failed for %r: %s", display_name, exc)
