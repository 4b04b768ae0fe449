"""World state container."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..utils.constants import DEFAULT_MAP_SIZE, MAP_SIZES
from .account import FactionAccount
from .battle import PendingBattle, PendingRetreat
from .conquest import AttackRecord, PendingConquest
from .faction import Faction
from .fleet import Fleet
from .planet import Planet
from .ship import Ship


class TurnPhase(str, Enum):
    """Cursor of the turn state machine.

    IDLE means no turn is in progress. The *_QUEUE phases drain work items
    (completed builds, arriving fleets) one at a time and are where a turn
    can pause for a battle decision.
    """

    IDLE = "idle"
    BUILD = "build"
    BUILD_QUEUE = "build_queue"
    TRAVEL = "travel"
    ARRIVAL_QUEUE = "arrival_queue"
    HEAL = "heal"
    COLLECT = "collect"
    CONQUEST = "conquest"
    NEUTRALIZE = "neutralize"


@dataclass
class CompletedBuild:
    """A freshly built ship waiting to be placed at its planet."""

    planet_id: int
    ship: Ship


@dataclass
class World:
    """Main game state container.

    The World holds every piece of mutable simulation state: planets, fleets,
    accounts, queues, pending conquests and the pending battle. All engine
    functions receive it explicitly and mutate it in place; outer layers only
    read snapshots of it and submit commands.
    """

    map_seed: int | str  # Seed of the map layout RNG
    turn: int = 1
    map_size: str = DEFAULT_MAP_SIZE
    difficulty: str = "medium"
    width: int = MAP_SIZES[DEFAULT_MAP_SIZE]["width"]
    height: int = MAP_SIZES[DEFAULT_MAP_SIZE]["height"]
    human_faction: Optional[Faction] = Faction.PLAYER  # None for AI-vs-AI games
    planets: list[Planet] = field(default_factory=list)
    fleets: list[Fleet] = field(default_factory=list)
    accounts: dict[Faction, FactionAccount] = field(
        default_factory=lambda: {f: FactionAccount(faction=f) for f in Faction}
    )
    pending_conquests: list[PendingConquest] = field(default_factory=list)
    pending_battle: Optional[PendingBattle] = None
    pending_retreat: Optional[PendingRetreat] = None
    turn_phase: TurnPhase = TurnPhase.IDLE
    completed_builds: list[CompletedBuild] = field(default_factory=list)  # BUILD_QUEUE items
    arrivals: list[Fleet] = field(default_factory=list)  # ARRIVAL_QUEUE items
    attack_log: list[AttackRecord] = field(default_factory=list)
    events: list[dict[str, Any]] = field(default_factory=list)  # Events of the current turn
    command_errors: list[str] = field(default_factory=list)  # Rejected commands since last turn
    winner: Optional[Faction] = None
    id_counters: dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        """Validate world data after initialization."""
        if self.turn < 0:
            raise ValueError(f"Invalid turn: {self.turn} (must be >= 0)")
        if self.map_size not in MAP_SIZES:
            raise ValueError(
                f"Invalid map_size: {self.map_size} (must be one of {', '.join(MAP_SIZES)})"
            )
        if self.human_faction is not None and not isinstance(self.human_faction, Faction):
            self.human_faction = Faction(self.human_faction)

    # Identity

    def next_id(self, prefix: str) -> str:
        """Generate a unique ID such as "s-0001" for the given prefix."""
        self.id_counters[prefix] = self.id_counters.get(prefix, 0) + 1
        return f"{prefix}-{self.id_counters[prefix]:04d}"

    # Lookups

    def get_planet(self, planet_id: int) -> Optional[Planet]:
        return next((p for p in self.planets if p.id == planet_id), None)

    def get_fleet(self, fleet_id: str) -> Optional[Fleet]:
        return next((f for f in self.fleets if f.id == fleet_id), None)

    def account(self, faction: Faction) -> FactionAccount:
        return self.accounts[faction]

    def planets_owned_by(self, faction: Optional[Faction]) -> list[Planet]:
        return [p for p in self.planets if p.owner == faction]

    def fleets_of(self, faction: Faction) -> list[Fleet]:
        return [f for f in self.fleets if f.owner == faction]

    def ships_of(self, faction: Faction) -> list[Ship]:
        """Every ship the faction owns, stationed anywhere or in transit."""
        stationed = [s for p in self.planets for s in p.ships if s.owner == faction]
        travelling = [s for f in self.fleets_of(faction) for s in f.ships]
        return stationed + travelling

    def has_colonizer(self, faction: Faction) -> bool:
        """True if the faction has a colonizer anywhere."""
        return any(s.is_colonizer for s in self.ships_of(faction))

    def military_count(self, faction: Faction) -> int:
        return sum(1 for s in self.ships_of(faction) if not s.is_colonizer)

    def is_human(self, faction: Optional[Faction]) -> bool:
        return faction is not None and faction == self.human_faction

    @property
    def awaiting_decision(self) -> bool:
        return self.pending_battle is not None or self.pending_retreat is not None

    # Event log

    def record_event(self, event_type: str, **data: Any) -> None:
        """Append an event for the current turn (shown to players afterwards)."""
        self.events.append({"type": event_type, "turn": self.turn, **data})
