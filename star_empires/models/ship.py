"""Ship kinds, their static stats, and the Ship data model."""

from dataclasses import dataclass
from enum import Enum

from .faction import Faction
from .resources import Resources


class ShipKind(str, Enum):
    """Enumerated ship types. Stats live in SHIP_STATS."""

    SCOUT = "scout"
    COLONIZER = "colonizer"
    FRIGATE = "frigate"
    BATTLESHIP = "battleship"

    @property
    def stats(self) -> "ShipStats":
        return SHIP_STATS[self]

    @property
    def is_colonizer(self) -> bool:
        return self is ShipKind.COLONIZER


@dataclass(frozen=True)
class ShipStats:
    """Static capability table row for one ship kind.

    Attributes:
        name: Display name
        attack: Damage contributed to fleet power each round
        max_hit_points: Full health
        cost: Resources paid when the build is queued
        speed: Travel speed (1.0 = 100 world units per turn)
        base_build_time: Turns to build at zero population
        min_build_time: Lower bound on build time
    """

    name: str
    attack: int
    max_hit_points: int
    cost: Resources
    speed: float
    base_build_time: int
    min_build_time: int


SHIP_STATS: dict[ShipKind, ShipStats] = {
    ShipKind.SCOUT: ShipStats(
        name="Scout",
        attack=2,
        max_hit_points=3,
        cost=Resources(energy=10, minerals=5, food=0),
        speed=1.5,
        base_build_time=2,
        min_build_time=1,
    ),
    ShipKind.COLONIZER: ShipStats(
        name="Colonizer",
        attack=0,
        max_hit_points=1,
        cost=Resources(energy=30, minerals=20, food=20),
        speed=1.0,
        base_build_time=5,
        min_build_time=2,
    ),
    ShipKind.FRIGATE: ShipStats(
        name="Frigate",
        attack=4,
        max_hit_points=6,
        cost=Resources(energy=25, minerals=30, food=5),
        speed=1.2,
        base_build_time=4,
        min_build_time=2,
    ),
    ShipKind.BATTLESHIP: ShipStats(
        name="Battleship",
        attack=8,
        max_hit_points=15,
        cost=Resources(energy=50, minerals=60, food=10),
        speed=0.9,
        base_build_time=8,
        min_build_time=4,
    ),
}

MILITARY_KINDS = [kind for kind in ShipKind if not kind.is_colonizer]


@dataclass
class Ship:
    """A single ship, stationed at a planet or travelling in a fleet.

    Ships are created by build-queue completion or initial setup and are
    destroyed only by combat.
    """

    id: str  # Unique identifier (e.g., "s-0007")
    kind: ShipKind
    hit_points: float  # Current health, 0 < hp <= max
    owner: Faction

    def __post_init__(self):
        """Validate ship data after initialization."""
        if not isinstance(self.kind, ShipKind):
            self.kind = ShipKind(self.kind)
        if not isinstance(self.owner, Faction):
            self.owner = Faction(self.owner)
        if not (0 < self.hit_points <= self.max_hit_points):
            raise ValueError(
                f"Invalid hit_points: {self.hit_points} "
                f"(must be > 0 and <= {self.max_hit_points})"
            )

    @property
    def max_hit_points(self) -> int:
        return self.kind.stats.max_hit_points

    @property
    def attack(self) -> int:
        return self.kind.stats.attack

    @property
    def is_colonizer(self) -> bool:
        return self.kind.is_colonizer
