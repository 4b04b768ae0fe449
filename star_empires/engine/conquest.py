"""Conquest & territory control.

This module handles the two late phases of a turn:
1. Conquest tick: pending multi-turn captures count down, transfer, or are
   cancelled when the claimant's ships are gone
2. Territory neutralization: contested planets lost by their previous owner,
   and owned planets abandoned with no way back, revert to neutral

Neutralization rules:
- A planet flagged ``contested_by`` becomes neutral (queue cleared) if the
  previous owner has no ships left there; every flag is cleared afterwards
- An owned planet with no owner ships, no build completing next turn, no
  owner fleet arriving next turn and no owner colonizer anywhere becomes
  neutral. An owner colonizer anywhere grants a reclaim grace.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from ..models.faction import Faction
from ..models.planet import Planet
from ..models.world import World
from ..utils.constants import COLONY_POPULATION, CONQUEST_POPULATION_RETAINED

logger = logging.getLogger(__name__)


@dataclass
class ConquestEvent:
    """A pending conquest that completed or was cancelled this turn."""

    planet_id: int
    planet_name: str
    claimant: Faction
    outcome: str  # "captured" or "cancelled"
    previous_owner: Optional[Faction] = None
    population: int = 0


@dataclass
class NeutralizationEvent:
    """A planet that reverted to neutral this turn."""

    planet_id: int
    planet_name: str
    previous_owner: Faction
    reason: str  # "contested" or "abandoned"


def process_pending_conquests(world: World) -> List[ConquestEvent]:
    """Advance every PendingConquest by one turn.

    - Claimant has no ships on the planet: the conquest is discarded
    - Otherwise turns_remaining is decremented; at zero ownership transfers
      and population becomes max(10, floor(previous * 0.3))

    Args:
        world: Current world state

    Returns:
        Conquests that completed or were cancelled
    """
    events = []
    remaining = []

    for conquest in world.pending_conquests:
        planet = world.get_planet(conquest.planet_id)
        if planet is None or not planet.ships_of(conquest.claimant):
            events.append(
                ConquestEvent(
                    planet_id=conquest.planet_id,
                    planet_name=planet.name if planet else "",
                    claimant=conquest.claimant,
                    outcome="cancelled",
                )
            )
            logger.info(f"Conquest of planet {conquest.planet_id} by {conquest.claimant.value} cancelled")
            continue

        conquest.turns_remaining -= 1
        if conquest.turns_remaining > 0:
            remaining.append(conquest)
            continue

        previous_owner = planet.owner
        planet.owner = conquest.claimant
        planet.population = max(
            COLONY_POPULATION, math.floor(planet.population * CONQUEST_POPULATION_RETAINED)
        )
        planet.contested_by = None
        events.append(
            ConquestEvent(
                planet_id=planet.id,
                planet_name=planet.name,
                claimant=conquest.claimant,
                outcome="captured",
                previous_owner=previous_owner,
                population=planet.population,
            )
        )
        logger.info(f"{conquest.claimant.value} captured {planet.name}")

    world.pending_conquests = remaining
    return events


def _neutralize(planet: Planet, reason: str) -> NeutralizationEvent:
    previous_owner = planet.owner
    planet.owner = None
    planet.build_queue.clear()
    logger.info(f"{planet.name} reverted to neutral ({reason})")
    return NeutralizationEvent(
        planet_id=planet.id,
        planet_name=planet.name,
        previous_owner=previous_owner,
        reason=reason,
    )


def process_contested_planets(world: World) -> List[NeutralizationEvent]:
    """Neutralize contested planets their previous owner failed to hold.

    Clears every ``contested_by`` flag afterwards.
    """
    events = []
    for planet in world.planets:
        previous_owner = planet.contested_by
        if previous_owner is None:
            continue
        planet.contested_by = None
        if planet.owner == previous_owner and not planet.ships_of(previous_owner):
            events.append(_neutralize(planet, "contested"))
    return events


def _build_completes_next_turn(planet: Planet) -> bool:
    return bool(planet.build_queue) and planet.build_queue[0].turns_remaining <= 1


def _fleet_arrives_next_turn(world: World, planet: Planet, faction: Faction) -> bool:
    return any(
        f.destination_id == planet.id and f.turns_remaining <= 1
        for f in world.fleets_of(faction)
    )


def is_abandoned(world: World, planet: Planet) -> bool:
    """True if an owned planet meets every natural abandonment condition."""
    owner = planet.owner
    if owner is None or planet.ships_of(owner):
        return False
    if _build_completes_next_turn(planet):
        return False
    if _fleet_arrives_next_turn(world, planet, owner):
        return False
    return not world.has_colonizer(owner)


def process_abandoned_planets(world: World) -> List[NeutralizationEvent]:
    """Neutralize owned planets that have been abandoned."""
    return [
        _neutralize(planet, "abandoned")
        for planet in world.planets
        if is_abandoned(world, planet)
    ]


def process_territory(world: World) -> List[NeutralizationEvent]:
    """Run contest-flag neutralization, then natural abandonment."""
    events = process_contested_planets(world)
    events.extend(process_abandoned_planets(world))
    return events
