from __future__ import annotations


class StatsServiceError(Exception):
    """Base class for failures scoped to a single stats lookup."""


class ProviderUnavailable(StatsServiceError):
    """The identity provider could not be reached or answered with an error."""


class ProviderDecodeError(StatsServiceError):
    """The identity provider answered with a body we could not decode."""


class MalformedIdentifier(StatsServiceError):
    """An identifier has neither the compact nor the canonical UUID shape."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Malformed player identifier: {identifier!r}")
        self.identifier = identifier


class CacheUnavailable(StatsServiceError):
    """
    The identity cache backend failed.

    Cache adapters log this and degrade to a miss; it never reaches callers
    of the application layer.
    """


class StatsNotFound(StatsServiceError):
    """No stats row exists for the resolved player."""

    message = "No stats available for this player."

    def __init__(self, display_name: str) -> None:
        super().__init__(self.message)
        self.display_name = display_name


class StorageUnavailable(StatsServiceError):
    """The persisted stats store failed to answer a query."""
