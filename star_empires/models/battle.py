"""Battle decisions that suspend turn processing."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .faction import Faction
from .ship import Ship


class BattleDecision(str, Enum):
    FIGHT = "fight"
    WITHDRAW = "withdraw"


@dataclass
class PendingBattle:
    """An unresolved fight/withdraw decision for the human faction.

    Attributes:
        planet_id: Planet where the battle takes place
        attacker: Faction initiating the battle
        incoming: Attacking ships that are not yet on the planet (an arriving
            fleet). Empty when the attackers already occupy the garrison, as in
            a build-completion contest.
        is_defending: True if the human faction is the defender
        source_id: Planet the incoming fleet came from, if any
    """

    planet_id: int
    attacker: Faction
    incoming: List[Ship] = field(default_factory=list)
    is_defending: bool = False
    source_id: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.attacker, Faction):
            self.attacker = Faction(self.attacker)

    @property
    def is_build_contest(self) -> bool:
        """True if the attackers were already stationed when the battle began."""
        return not self.incoming


@dataclass
class PendingRetreat:
    """Withdrawn survivors waiting for the caller to pick a destination."""

    faction: Faction
    ships: List[Ship]
    from_planet_id: int
    candidates: List[int]  # Friendly planet IDs that may receive the ships

    def __post_init__(self):
        if not isinstance(self.faction, Faction):
            self.faction = Faction(self.faction)
        if len(self.candidates) < 2:
            raise ValueError("A retreat choice needs at least two candidate planets")
