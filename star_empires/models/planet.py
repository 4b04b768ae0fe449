"""Planet data model and its build queue."""

from dataclasses import dataclass, field
from typing import List, Optional

from .faction import Faction
from .resources import Resources
from .ship import Ship, ShipKind


@dataclass
class BuildQueueEntry:
    """A ship under construction. Only the head of a queue counts down."""

    id: str  # Unique identifier (e.g., "b-0003")
    kind: ShipKind
    turns_remaining: int

    def __post_init__(self):
        """Validate build entry after initialization."""
        if not isinstance(self.kind, ShipKind):
            self.kind = ShipKind(self.kind)
        if self.turns_remaining < 0:
            raise ValueError(
                f"Invalid turns_remaining: {self.turns_remaining} (must be >= 0)"
            )


@dataclass
class Planet:
    """Represents a planet on the galaxy map.

    Planets are the strategic locations of the game. They can be owned by a
    faction or remain neutral, yield resources to their owner every turn,
    host a garrison and run a FIFO build queue.
    """

    id: int
    name: str
    x: float
    y: float
    size: float
    owner: Optional[Faction]  # None for neutral planets
    population: int
    max_population: int
    yields: Resources  # Per-turn resource income for the owner
    ships: List[Ship] = field(default_factory=list)  # Garrison
    build_queue: List[BuildQueueEntry] = field(default_factory=list)
    contested_by: Optional[Faction] = None  # Previous owner, set when occupied this turn

    def __post_init__(self):
        """Validate planet data after initialization."""
        if self.owner is not None and not isinstance(self.owner, Faction):
            self.owner = Faction(self.owner)
        if self.population < 0:
            raise ValueError(f"Invalid population: {self.population} (must be >= 0)")
        if self.max_population < 0:
            raise ValueError(
                f"Invalid max_population: {self.max_population} (must be >= 0)"
            )
        if self.size <= 0:
            raise ValueError(f"Invalid size: {self.size} (must be > 0)")

    def ships_of(self, faction: Faction) -> List[Ship]:
        """Garrisoned ships belonging to ``faction``."""
        return [s for s in self.ships if s.owner == faction]

    def hostile_ships(self, faction: Faction) -> List[Ship]:
        """Garrisoned ships not belonging to ``faction``."""
        return [s for s in self.ships if s.owner != faction]

    def find_ship(self, ship_id: str) -> Optional[Ship]:
        return next((s for s in self.ships if s.id == ship_id), None)

    def remove_ships(self, ships: List[Ship]) -> None:
        """Remove the given ships (matched by id) from the garrison."""
        ids = {s.id for s in ships}
        self.ships = [s for s in self.ships if s.id not in ids]
