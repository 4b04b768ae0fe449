"""Target selection for the automated opponent.

Three strategies:
- random: uniform choice among the candidates
- nearest: closest planet for colonization, weakest defended for attack
- optimal: colonization scored by sum(yields) - distance/100, attack scored
  by population * 10 - defense * 2; the highest score wins
"""

from typing import List, Optional

from ..engine.combat import planet_defense
from ..engine.movement import planet_distance
from ..models.difficulty import TargetingStrategy
from ..models.faction import Faction
from ..models.planet import Planet
from ..utils.constants import COLONIZATION_DISTANCE_DIVISOR
from ..utils.rng import RandomSource, pick


def colonization_score(source: Planet, candidate: Planet) -> float:
    return candidate.yields.total - planet_distance(source, candidate) / COLONIZATION_DISTANCE_DIVISOR


def attack_score(candidate: Planet, attacker: Faction) -> float:
    return candidate.population * 10 - planet_defense(candidate, attacker) * 2


def select_colonization_target(
    source: Planet,
    candidates: List[Planet],
    strategy: TargetingStrategy,
    rng: RandomSource,
) -> Optional[Planet]:
    """Choose a neutral planet to colonize from ``source``.

    Returns:
        The chosen planet, or None if there are no candidates
    """
    if not candidates:
        return None
    if strategy is TargetingStrategy.RANDOM:
        return pick(rng, candidates)
    if strategy is TargetingStrategy.OPTIMAL:
        return max(candidates, key=lambda p: colonization_score(source, p))
    return min(candidates, key=lambda p: planet_distance(source, p))


def select_attack_target(
    source: Planet,
    candidates: List[Planet],
    strategy: TargetingStrategy,
    rng: RandomSource,
    attacker: Faction,
) -> Optional[Planet]:
    """Choose an enemy planet to attack.

    Under ``nearest`` the weakest defended planet is chosen, with distance
    from ``source`` breaking ties.

    Returns:
        The chosen planet, or None if there are no candidates
    """
    if not candidates:
        return None
    if strategy is TargetingStrategy.RANDOM:
        return pick(rng, candidates)
    if strategy is TargetingStrategy.OPTIMAL:
        return max(candidates, key=lambda p: attack_score(p, attacker))
    return min(
        candidates,
        key=lambda p: (planet_defense(p, attacker), planet_distance(source, p)),
    )


def nearest_planet(origin: Planet, candidates: List[Planet]) -> Optional[Planet]:
    if not candidates:
        return None
    return min(candidates, key=lambda p: planet_distance(origin, p))
