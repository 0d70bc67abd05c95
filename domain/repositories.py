from __future__ import annotations

from typing import Optional, Protocol

from .models import IdentityRecord, StatsRecord


class IdentityProvider(Protocol):
    """
    Abstraction over the external name -> identity lookup service.

    Implementations perform exactly one outbound call per `fetch` and
    never retry. An unknown player is not an error: it is returned as an
    `IdentityRecord` with an empty `external_id`.
    """

    def fetch(self, display_name: str) -> IdentityRecord:
        """
        Look up `display_name` upstream.

        Raises `ProviderUnavailable` on transport failure and
        `ProviderDecodeError` on a body that cannot be decoded.
        """

        ...


class IdentityCache(Protocol):
    """
    Cache of identity records keyed by display name.

    The cache is an optimisation only. Implementations must fail open:
    backend errors are reported as a miss from `get` and swallowed by `put`.
    """

    def get(self, display_name: str) -> Optional[IdentityRecord]:
        """Return the cached record, or None on miss or expiry."""

        ...

    def put(self, display_name: str, record: IdentityRecord, ttl_seconds: int) -> None:
        """Store `record`, overwriting any previous entry and resetting its TTL."""

        ...


class StatsRepository(Protocol):
    """
    Read-only access to persisted PvP stats.

    Implementations are responsible for:
    - Mapping database rows to the `StatsRecord` domain model.
    - Hiding any SQL / driver details from the application layer.
    """

    def find_by_identifier(self, canonical_id: str) -> Optional[StatsRecord]:
        """
        Return the first row stored for `canonical_id`, or None if there is none.

        Raises `StorageUnavailable` when the store cannot be queried.
        """

        ...
