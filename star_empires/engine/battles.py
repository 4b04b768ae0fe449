"""Battle triggers and battle decisions.

This module connects the Combat Resolver to the turn:
1. Arrival handling (peaceful colonization, merge, or battle)
2. Build-completion contests (a new ship meeting occupiers)
3. The pending-battle slot: raised when the human faction is involved,
   auto-resolved otherwise
4. Fight/withdraw decisions and the retreat destination choice
"""

import logging
from typing import List, Optional

from ..models.battle import BattleDecision, PendingBattle, PendingRetreat
from ..models.fleet import Fleet
from ..models.planet import Planet
from ..models.ship import Ship
from ..models.world import World
from ..utils.constants import COLONY_POPULATION
from ..utils.rng import RandomSource
from .combat import CombatResult, WithdrawalResult, resolve_combat, resolve_withdrawal
from .movement import create_fleet

logger = logging.getLogger(__name__)


def handle_arrival(
    world: World, fleet: Fleet, rng: Optional[RandomSource] = None
) -> Optional[PendingBattle]:
    """Land an arriving fleet at its destination.

    - Neutral destination without hostile ships: a colonizer claims the planet
      (population 10, colonizer consumed) and the rest garrisons it
    - Destination owned by the other faction, or holding any foreign ship:
      battle (pending if the human faction is involved, else auto-resolved)
    - Otherwise the fleet merges into the garrison

    Args:
        world: Current world state
        fleet: Fleet that reached its destination (already out of world.fleets)
        rng: Random source for auto-resolved battles

    Returns:
        The PendingBattle raised, or None if the arrival completed
    """
    planet = world.get_planet(fleet.destination_id)
    if planet is None:
        logger.warning(f"Fleet {fleet.id} arrived at unknown planet {fleet.destination_id}")
        return None

    faction = fleet.owner
    hostile = planet.hostile_ships(faction)

    if planet.owner is None and not hostile:
        ships = list(fleet.ships)
        colonizer = next((s for s in ships if s.is_colonizer), None)
        if colonizer is not None:
            ships.remove(colonizer)
            planet.owner = faction
            planet.population = COLONY_POPULATION
            world.record_event("colonized", planet_id=planet.id, faction=faction.value)
            logger.info(f"{faction.value} colonized {planet.name}")
        planet.ships.extend(ships)
        return None

    if (planet.owner is not None and planet.owner != faction) or hostile:
        battle = PendingBattle(
            planet_id=planet.id,
            attacker=faction,
            incoming=list(fleet.ships),
            is_defending=not world.is_human(faction),
            source_id=fleet.source_id,
        )
        if world.is_human(faction) or world.is_human(faction.opponent):
            return raise_battle(world, battle)
        fight_battle(world, battle, rng)
        return None

    planet.ships.extend(fleet.ships)
    return None


def handle_build_contest(
    world: World, planet: Planet, rng: Optional[RandomSource] = None
) -> Optional[PendingBattle]:
    """Make a freshly built ship fight the occupiers of its planet.

    The new ship is already in the garrison. The occupying faction is the
    attacker and the owner's ships defend. Any conquest countdown on the
    planet is cancelled, and occupiers that win hold it as an occupation
    without starting a new one. Only a human-owned planet raises a
    PendingBattle; every other contest is resolved immediately.

    Returns:
        The PendingBattle raised, or None
    """
    if planet.owner is None:
        return None
    occupier = planet.owner.opponent
    if not planet.ships_of(occupier):
        return None

    # The new ship interrupts any conquest countdown on the planet
    world.pending_conquests = [c for c in world.pending_conquests if c.planet_id != planet.id]

    battle = PendingBattle(
        planet_id=planet.id,
        attacker=occupier,
        incoming=[],
        is_defending=True,
    )
    if world.is_human(planet.owner):
        return raise_battle(world, battle)
    fight_battle(world, battle, rng)
    return None


def raise_battle(world: World, battle: PendingBattle) -> PendingBattle:
    """Store a battle in the pending slot."""
    if world.pending_battle is not None:
        raise ValueError("A battle decision is already pending")
    world.pending_battle = battle
    world.record_event(
        "battle_pending",
        planet_id=battle.planet_id,
        attacker=battle.attacker.value,
        is_defending=battle.is_defending,
    )
    logger.info(
        f"Turn {world.turn}: battle at planet {battle.planet_id} awaits a decision "
        f"({'defending' if battle.is_defending else 'attacking'})"
    )
    return battle


def _sides(planet: Planet, battle: PendingBattle) -> tuple[List[Ship], List[Ship]]:
    """Attackers (incoming plus already stationed) and defenders of a battle."""
    incoming_ids = {s.id for s in battle.incoming}
    stationed = [s for s in planet.ships_of(battle.attacker) if s.id not in incoming_ids]
    attackers = list(battle.incoming) + stationed
    defenders = planet.hostile_ships(battle.attacker)
    return attackers, defenders


def fight_battle(
    world: World, battle: PendingBattle, rng: Optional[RandomSource] = None
) -> Optional[CombatResult]:
    """Resolve a battle through the Combat Resolver and log the outcome."""
    planet = world.get_planet(battle.planet_id)
    if planet is None:
        logger.warning(f"Battle at unknown planet {battle.planet_id} dropped")
        return None

    attackers, defenders = _sides(planet, battle)
    if not attackers:
        return None

    result = resolve_combat(
        world, attackers, defenders, planet, rng, fresh_attack=not battle.is_build_contest
    )
    world.record_event("battle", planet_name=planet.name, **result.to_event())
    return result


def resolve_battle_decision(
    world: World, decision: BattleDecision, rng: Optional[RandomSource] = None
) -> bool:
    """Apply the human decision for the pending battle.

    Fighting runs the Combat Resolver. Withdrawing applies the parting shot
    to the human side: an attacking fleet turns back and leaves the planet
    untouched, a defending garrison leaves and the attackers take the empty
    planet. Survivors relocate, wait for a destination choice, or are lost.

    Returns:
        True if a pending battle was resolved, False if none was pending
    """
    battle = world.pending_battle
    if battle is None:
        return False
    if not isinstance(decision, BattleDecision):
        decision = BattleDecision(decision)

    world.pending_battle = None
    if decision is BattleDecision.FIGHT:
        fight_battle(world, battle, rng)
        return True

    planet = world.get_planet(battle.planet_id)
    if planet is None:
        return True

    attackers, defenders = _sides(planet, battle)
    if battle.is_defending:
        withdrawing, opposing = defenders, attackers
    else:
        withdrawing, opposing = list(battle.incoming), defenders

    if withdrawing:
        result = resolve_withdrawal(world, withdrawing, opposing, planet, rng)
        world.record_event(
            "withdrawal",
            planet_id=planet.id,
            faction=result.faction.value,
            destroyed=len(result.destroyed),
            survivors=len(result.survivors),
        )
        _relocate(world, result, planet)

    if battle.is_defending and attackers:
        # The garrison is gone: attackers take the planet unopposed
        fight_battle(world, battle, rng)
    return True


def _relocate(world: World, result: WithdrawalResult, planet: Planet) -> None:
    """Send withdrawal survivors to a friendly planet, or ask where to."""
    if not result.survivors:
        return

    if not result.candidates:
        world.record_event(
            "fleet_lost", planet_id=planet.id, faction=result.faction.value,
            ships=len(result.survivors),
        )
        logger.info(
            f"{result.faction.value} has no planet to retreat to; "
            f"{len(result.survivors)} ships lost"
        )
        return

    if len(result.candidates) == 1:
        destination = world.get_planet(result.candidates[0])
        create_fleet(world, result.faction, result.survivors, planet, destination)
        return

    world.pending_retreat = PendingRetreat(
        faction=result.faction,
        ships=result.survivors,
        from_planet_id=planet.id,
        candidates=result.candidates,
    )
    world.record_event(
        "retreat_pending", planet_id=planet.id, candidates=list(result.candidates)
    )


def resolve_retreat_destination(world: World, planet_id: int) -> bool:
    """Dispatch waiting retreat survivors to the chosen friendly planet.

    Returns:
        True on success; False if no retreat is pending or the planet is not
        one of the candidates still owned by the retreating faction
    """
    retreat = world.pending_retreat
    if retreat is None:
        logger.warning("No retreat is awaiting a destination")
        return False

    destination = world.get_planet(planet_id)
    if (
        destination is None
        or planet_id not in retreat.candidates
        or destination.owner != retreat.faction
    ):
        logger.warning(f"Rejected retreat destination {planet_id}")
        world.command_errors.append(f"Invalid retreat destination {planet_id}")
        return False

    origin = world.get_planet(retreat.from_planet_id)
    world.pending_retreat = None
    create_fleet(world, retreat.faction, retreat.ships, origin, destination)
    logger.info(f"{retreat.faction.value} retreats to {destination.name}")
    return True
