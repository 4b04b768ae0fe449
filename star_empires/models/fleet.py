"""Fleet data model for ships in transit."""

from dataclasses import dataclass
from typing import List

from .faction import Faction
from .ship import Ship


@dataclass
class Fleet:
    """Represents ships travelling between planets.

    Fleets are created when a faction sends ships from one planet to another
    and are removed when they arrive, whether they land peacefully or fight.
    """

    id: str  # Unique identifier (e.g., "f-0003")
    owner: Faction
    ships: List[Ship]
    source_id: int  # Source planet ID
    destination_id: int  # Destination planet ID
    turns_remaining: int  # Turns until arrival
    total_turns: int  # Journey length, for progress display

    def __post_init__(self):
        """Validate fleet data after initialization."""
        if not isinstance(self.owner, Faction):
            self.owner = Faction(self.owner)
        if not self.ships:
            raise ValueError("Fleet must carry at least one ship")
        if self.turns_remaining < 0:
            raise ValueError(
                f"Invalid turns_remaining: {self.turns_remaining} (must be >= 0)"
            )
        if self.total_turns < 1:
            raise ValueError(f"Invalid total_turns: {self.total_turns} (must be >= 1)")

    @property
    def has_colonizer(self) -> bool:
        return any(s.is_colonizer for s in self.ships)
