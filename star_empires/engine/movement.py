"""Fleet dispatch and travel.

This module handles:
1. The send-fleet command (validation, immediate departure, travel time)
2. Per-turn travel: every fleet in transit moves one turn closer, and fleets
   reaching zero are queued for arrival handling

Arrival handling itself lives in engine.battles since arrivals may fight.
"""

import logging
from typing import List, Optional

from ..models.faction import Faction
from ..models.fleet import Fleet
from ..models.planet import Planet
from ..models.ship import Ship
from ..models.world import World
from ..utils.distance import euclidean_distance, travel_turns

logger = logging.getLogger(__name__)


def average_speed(ships: List[Ship]) -> float:
    """Mean speed of a ship set (0.0 for an empty set)."""
    if not ships:
        return 0.0
    return sum(s.kind.stats.speed for s in ships) / len(ships)


def planet_distance(source: Planet, destination: Planet) -> float:
    return euclidean_distance(source.x, source.y, destination.x, destination.y)


def fleet_travel_time(source: Planet, destination: Planet, ships: List[Ship]) -> int:
    """Turns needed by ``ships`` to go from source to destination (>= 1)."""
    return travel_turns(planet_distance(source, destination), average_speed(ships))


def create_fleet(
    world: World,
    owner: Faction,
    ships: List[Ship],
    source: Planet,
    destination: Planet,
) -> Fleet:
    """Put ships in transit between two planets.

    The ships must already be detached from any garrison.
    """
    turns = fleet_travel_time(source, destination, ships)
    fleet = Fleet(
        id=world.next_id("f"),
        owner=owner,
        ships=list(ships),
        source_id=source.id,
        destination_id=destination.id,
        turns_remaining=turns,
        total_turns=turns,
    )
    world.fleets.append(fleet)
    return fleet


def _validate_send(
    world: World,
    source_id: int,
    ship_ids: List[str],
    destination_id: int,
    faction: Faction,
) -> tuple[Planet, Planet, List[Ship]]:
    """Validate a send-fleet command.

    Raises:
        ValueError: With a human-readable reason if the command is invalid
    """
    if world.awaiting_decision:
        raise ValueError("Cannot send fleets while a battle decision is pending")
    if not ship_ids:
        raise ValueError("No ships selected")
    if source_id == destination_id:
        raise ValueError("Destination must differ from source")

    source = world.get_planet(source_id)
    if source is None:
        raise ValueError(f"Unknown source planet {source_id}")
    destination = world.get_planet(destination_id)
    if destination is None:
        raise ValueError(f"Unknown destination planet {destination_id}")

    ships = []
    for ship_id in dict.fromkeys(ship_ids):
        ship = source.find_ship(ship_id)
        if ship is None:
            raise ValueError(f"Ship {ship_id} is not at {source.name}")
        if ship.owner != faction:
            raise ValueError(f"Ship {ship_id} does not belong to {faction.value}")
        ships.append(ship)

    return source, destination, ships


def send_fleet(
    world: World,
    source_id: int,
    ship_ids: List[str],
    destination_id: int,
    faction: Faction,
) -> Optional[Fleet]:
    """Send a set of ships from one planet to another.

    Ships leave the source garrison immediately and travel for
    max(1, ceil(distance / (average_speed * 100))) turns.

    Args:
        world: Current world state
        source_id: Planet the ships are stationed at
        ship_ids: IDs of the ships to send
        destination_id: Target planet
        faction: Faction issuing the command

    Returns:
        The new Fleet, or None if the command was rejected (state unchanged)
    """
    try:
        source, destination, ships = _validate_send(
            world, source_id, ship_ids, destination_id, faction
        )
    except ValueError as e:
        logger.warning(f"Rejected fleet order from {faction.value}: {e}")
        world.command_errors.append(str(e))
        return None

    source.remove_ships(ships)
    fleet = create_fleet(world, faction, ships, source, destination)
    logger.info(
        f"{faction.value} sent {len(ships)} ships from {source.name} to "
        f"{destination.name} ({fleet.turns_remaining} turns)"
    )
    return fleet


def process_fleet_travel(world: World) -> List[Fleet]:
    """Move every fleet one turn along its route.

    Fleets reaching zero turns are removed from world.fleets and appended,
    in fleet order, to world.arrivals for arrival handling.

    Args:
        world: Current world state

    Returns:
        Fleets that arrived this turn
    """
    arrived = []
    in_transit = []
    for fleet in world.fleets:
        fleet.turns_remaining = max(0, fleet.turns_remaining - 1)
        if fleet.turns_remaining == 0:
            arrived.append(fleet)
        else:
            in_transit.append(fleet)

    world.fleets = in_transit
    world.arrivals.extend(arrived)
    if arrived:
        logger.debug(f"Turn {world.turn}: {len(arrived)} fleets arrived")
    return arrived
