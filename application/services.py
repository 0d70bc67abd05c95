from __future__ import annotations

import logging

from domain.errors import StatsNotFound
from domain.identifiers import canonicalize
from domain.models import IdentityRecord, PlayerStats
from domain.repositories import IdentityCache, IdentityProvider, StatsRepository

logger = logging.getLogger(__name__)

# Identity records are cached for 15 minutes after each provider lookup.
DEFAULT_IDENTITY_TTL_SECONDS = 15 * 60


def resolve_identity(
    display_name: str,
    identity_cache: IdentityCache,
    identity_provider: IdentityProvider,
    ttl_seconds: int = DEFAULT_IDENTITY_TTL_SECONDS,
) -> IdentityRecord:
    """
    Resolve a display name using the cache-aside pattern.

    - A cached, unexpired record is always returned without contacting
      the provider.
    - On a miss the provider is asked once and its answer is written back
      with `ttl_seconds`.

    Provider errors propagate to the caller and nothing is cached for them.
    """

    cached = identity_cache.get(display_name)
    if cached is not None:
        logger.debug("Identity cache hit for %r", display_name)
        return cached

    logger.debug("Identity cache miss for %r, asking provider", display_name)
    record = identity_provider.fetch(display_name)
    identity_cache.put(display_name, record, ttl_seconds)
    return record


def get_player_stats(
    display_name: str,
    identity_cache: IdentityCache,
    identity_provider: IdentityProvider,
    stats_repo: StatsRepository,
    ttl_seconds: int = DEFAULT_IDENTITY_TTL_SECONDS,
) -> PlayerStats:
    """
    Handle one stats lookup:
    - Resolve the display name to an identity.
    - Canonicalize the identity's UUID.
    - Read the stats row stored under that UUID.

    Raises `StatsNotFound` when no row exists, which is the normal outcome
    for unknown or never-tracked players.
    """

    identity = resolve_identity(display_name, identity_cache, identity_provider, ttl_seconds)
    uuid = canonicalize(identity.external_id)
    logger.info("Looking up stats of user %s (%s)", uuid, display_name)
    record = stats_repo.find_by_identifier(uuid)
    if record is None:
        raise StatsNotFound(display_name)

    return PlayerStats(
        uuid=record.uuid,
        username=display_name,
        kills=record.kills,
        deaths=record.deaths,
        coins=record.coins,
        killstreak=record.killstreak,
    )
