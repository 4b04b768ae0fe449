"""Faction identifiers."""

from enum import Enum


class Faction(str, Enum):
    """The two competing factions.

    A planet owner is either a Faction or None (neutral).
    """

    PLAYER = "player"
    ENEMY = "enemy"

    @property
    def opponent(self) -> "Faction":
        return Faction.ENEMY if self is Faction.PLAYER else Faction.PLAYER


def parse_owner(value: str | None) -> Faction | None:
    """Convert a serialized owner ("player", "enemy" or None) to a Faction."""
    if value is None:
        return None
    return Faction(value)
