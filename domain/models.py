from dataclasses import dataclass


@dataclass(frozen=True)
class IdentityRecord:
    """
    Point-in-time mapping from a player's display name to the identifier
    issued by the identity provider.

    `external_id` may be compact (32 hex characters) or canonical
    (hyphenated). An empty `external_id` means the provider does not know
    the player.
    """

    display_name: str
    external_id: str

    @property
    def is_known(self) -> bool:
        return self.external_id != ""


@dataclass(frozen=True)
class StatsRecord:
    """Persisted PvP statistics for one player, keyed by canonical UUID."""

    uuid: str
    kills: int
    deaths: int
    coins: int
    killstreak: int


@dataclass(frozen=True)
class PlayerStats:
    """A `StatsRecord` joined with the display name it was looked up by."""

    uuid: str
    username: str
    kills: int
    deaths: int
    coins: int
    killstreak: int
