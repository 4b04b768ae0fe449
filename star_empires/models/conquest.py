"""Multi-turn capture of an owned planet."""

from dataclasses import dataclass

from ..utils.constants import CONQUEST_TURNS
from .faction import Faction


@dataclass
class PendingConquest:
    """Countdown before an occupied enemy planet changes hands.

    Created when a colonizer-carrying fleet defeats the defenders of a planet
    owned by the other faction. Cancelled if the claimant's ships leave or die.
    """

    planet_id: int
    claimant: Faction
    turns_remaining: int = CONQUEST_TURNS

    def __post_init__(self):
        if not isinstance(self.claimant, Faction):
            self.claimant = Faction(self.claimant)
        if self.turns_remaining < 0:
            raise ValueError(
                f"Invalid turns_remaining: {self.turns_remaining} (must be >= 0)"
            )


@dataclass
class AttackRecord:
    """A successful attack on a planet owned by the other faction."""

    turn: int
    planet_id: int
    attacker: Faction

    def __post_init__(self):
        if not isinstance(self.attacker, Faction):
            self.attacker = Faction(self.attacker)
