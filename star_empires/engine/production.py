"""Ship construction.

This module handles:
1. The issue-build and cancel-build commands
2. Build-time calculation (population shortens construction, floored at a minimum)
3. Build-queue progression: only the head entry of each queue counts down,
   and a finished entry yields exactly one full-health ship

Completed ships are queued on the World (world.completed_builds) so that the
turn executor can place them one at a time, pausing for a build contest.
"""

import logging
import math
from typing import List, Optional

from ..models.faction import Faction
from ..models.planet import BuildQueueEntry, Planet
from ..models.ship import Ship, ShipKind
from ..models.world import CompletedBuild, World
from ..utils.constants import (
    BUILD_REFUND_RATE,
    MIN_POPULATION_BUILD_FACTOR,
    POPULATION_BUILD_DIVISOR,
)

logger = logging.getLogger(__name__)


def calculate_build_time(kind: ShipKind, population: int) -> int:
    """Turns needed to build ``kind`` at a planet of the given population.

    build_time = max(min_build_time, ceil(base_build_time * factor)) where
    factor = max(0.5, 1 - population / 200).

    Args:
        kind: Ship kind to build
        population: Current planet population

    Returns:
        Build time in turns (always >= 1)
    """
    stats = kind.stats
    factor = max(MIN_POPULATION_BUILD_FACTOR, 1 - population / POPULATION_BUILD_DIVISOR)
    return max(stats.min_build_time, math.ceil(stats.base_build_time * factor), 1)


def _validate_build(
    world: World, planet_id: int, kind: ShipKind | str, faction: Faction
) -> tuple[Planet, ShipKind]:
    """Validate a build command.

    Raises:
        ValueError: With a human-readable reason if the command is invalid
    """
    try:
        kind = ShipKind(kind)
    except ValueError:
        raise ValueError(f"Unknown ship kind: {kind}") from None

    planet = world.get_planet(planet_id)
    if planet is None:
        raise ValueError(f"Unknown planet {planet_id}")
    if planet.owner != faction:
        raise ValueError(f"{planet.name} is not owned by {faction.value}")

    cost = kind.stats.cost
    if not world.account(faction).can_afford(cost):
        raise ValueError(f"Insufficient resources for {kind.stats.name}")

    return planet, kind


def issue_build(
    world: World, planet_id: int, kind: ShipKind | str, faction: Faction
) -> Optional[BuildQueueEntry]:
    """Queue a ship at a planet, paying its full cost at once.

    Args:
        world: Current world state
        planet_id: Planet that will build the ship
        kind: Ship kind (enum or its string value)
        faction: Faction issuing the command

    Returns:
        The queued entry, or None if the command was rejected (state unchanged)
    """
    try:
        planet, kind = _validate_build(world, planet_id, kind, faction)
    except ValueError as e:
        logger.warning(f"Rejected build order from {faction.value}: {e}")
        world.command_errors.append(str(e))
        return None

    world.account(faction).pay(kind.stats.cost)
    entry = BuildQueueEntry(
        id=world.next_id("b"),
        kind=kind,
        turns_remaining=calculate_build_time(kind, planet.population),
    )
    planet.build_queue.append(entry)
    logger.info(
        f"{faction.value} queued {kind.value} at {planet.name} "
        f"({entry.turns_remaining} turns)"
    )
    return entry


def cancel_build(world: World, planet_id: int, entry_id: str, faction: Faction) -> bool:
    """Remove an entry from a build queue and refund half of its cost.

    The refund is floored per resource and paid to the planet owner.

    Returns:
        True if the entry was cancelled, False otherwise (state unchanged)
    """
    planet = world.get_planet(planet_id)
    entry = None
    if planet is not None:
        entry = next((e for e in planet.build_queue if e.id == entry_id), None)

    if planet is None or entry is None:
        logger.warning(f"Rejected cancel from {faction.value}: no entry {entry_id} at {planet_id}")
        world.command_errors.append(f"Unknown build entry {entry_id}")
        return False
    if planet.owner != faction:
        logger.warning(f"Rejected cancel from {faction.value}: {planet.name} is not theirs")
        world.command_errors.append(f"{planet.name} is not owned by {faction.value}")
        return False

    planet.build_queue.remove(entry)
    world.account(faction).deposit(entry.kind.stats.cost.scaled_down(BUILD_REFUND_RATE))
    logger.info(f"{faction.value} cancelled {entry.kind.value} at {planet.name}")
    return True


def progress_build_queues(world: World) -> List[CompletedBuild]:
    """Count down the head entry of every owned planet's build queue.

    A head entry reaching zero is removed and turned into one full-health
    ship of its kind, owned by the planet owner. New ships are not placed in
    garrisons here; they are appended to world.completed_builds.

    Args:
        world: Current world state

    Returns:
        Builds completed this turn, in planet order
    """
    completed = []
    for planet in world.planets:
        if planet.owner is None or not planet.build_queue:
            continue

        head = planet.build_queue[0]
        head.turns_remaining = max(0, head.turns_remaining - 1)
        if head.turns_remaining > 0:
            continue

        planet.build_queue.pop(0)
        ship = Ship(
            id=world.next_id("s"),
            kind=head.kind,
            hit_points=head.kind.stats.max_hit_points,
            owner=planet.owner,
        )
        world.account(planet.owner).ships_built += 1
        completed.append(CompletedBuild(planet_id=planet.id, ship=ship))
        logger.debug(f"{planet.name} completed a {head.kind.value}")

    world.completed_builds.extend(completed)
    return completed


def place_completed_build(world: World, build: CompletedBuild) -> Optional[Planet]:
    """Station a completed ship at its planet.

    Returns:
        The planet the ship joined, or None if the planet changed hands since
        the ship was completed (the ship is then discarded)
    """
    planet = world.get_planet(build.planet_id)
    if planet is None or planet.owner != build.ship.owner:
        return None
    planet.ships.append(build.ship)
    world.record_event(
        "ship_built", planet_id=planet.id, kind=build.ship.kind.value,
        faction=build.ship.owner.value,
    )
    return planet
