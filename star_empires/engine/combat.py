"""Combat resolution.

This module handles:
1. Colonizer vulnerability (unescorted colonizers die before the first round)
2. Planetary defense bonus for the defenders of an owned planet
3. Round-based combat with HP-weighted damage distribution
4. Territory resolution after an attacker victory (colonize, conquer, occupy)
5. The lump-sum hit taken by a withdrawing fleet

Combat randomness comes from an injected RandomSource. When none is given an
unseeded random.Random() is used, so battles are intentionally not replayable.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..models.conquest import AttackRecord, PendingConquest
from ..models.faction import Faction
from ..models.planet import Planet
from ..models.ship import Ship
from ..models.world import World
from ..utils.constants import (
    COLONY_POPULATION,
    COMBAT_VARIANCE,
    DEFENSE_HP_BONUS,
    MAX_COMBAT_ROUNDS,
    WITHDRAW_DAMAGE_RANGE,
)
from ..utils.rng import RandomSource, default_rng, uniform

logger = logging.getLogger(__name__)


@dataclass
class CombatResult:
    """Result of a combat resolution.

    Attributes:
        attacker: Faction that initiated the battle
        defender: Faction holding the planet side (None if nobody defended)
        planet_id: Planet where the battle happened
        victory: True if the attacking side won
        attackers_destroyed: Attacking ships destroyed (colonizers included)
        defenders_destroyed: Defending ships destroyed (colonizers included)
        attackers_damaged: Attacking survivors that lost hit points
        defenders_damaged: Defending survivors that lost hit points
        attacker_survivors: Attacking ships still alive (colonizers included)
        defender_survivors: Defending ships still alive (colonizers included)
        rounds: Number of combat rounds fought
        stalemate: True if the round cap ran out with both sides standing
        conquered: Neutral planet colonized immediately
        conquering: Conquest countdown started on an enemy planet
        occupied: Enemy planet occupied without a colonizer
        control_before: Planet owner before the battle
        control_after: Planet owner after the battle
    """

    attacker: Faction
    defender: Optional[Faction]
    planet_id: int
    victory: bool
    attackers_destroyed: List[Ship] = field(default_factory=list)
    defenders_destroyed: List[Ship] = field(default_factory=list)
    attackers_damaged: List[Ship] = field(default_factory=list)
    defenders_damaged: List[Ship] = field(default_factory=list)
    attacker_survivors: List[Ship] = field(default_factory=list)
    defender_survivors: List[Ship] = field(default_factory=list)
    rounds: int = 0
    stalemate: bool = False
    conquered: bool = False
    conquering: bool = False
    occupied: bool = False
    control_before: Optional[Faction] = None
    control_after: Optional[Faction] = None

    @property
    def attackers_survived(self) -> int:
        return len(self.attacker_survivors)

    @property
    def defenders_survived(self) -> int:
        return len(self.defender_survivors)

    def to_event(self) -> dict:
        """Convert to a JSON-compatible event record."""
        return {
            "planet_id": self.planet_id,
            "attacker": self.attacker.value,
            "defender": self.defender.value if self.defender else None,
            "victory": self.victory,
            "attackers_destroyed": len(self.attackers_destroyed),
            "defenders_destroyed": len(self.defenders_destroyed),
            "attackers_survived": self.attackers_survived,
            "defenders_survived": self.defenders_survived,
            "rounds": self.rounds,
            "stalemate": self.stalemate,
            "conquered": self.conquered,
            "conquering": self.conquering,
            "occupied": self.occupied,
            "control_before": self.control_before.value if self.control_before else None,
            "control_after": self.control_after.value if self.control_after else None,
        }


@dataclass
class WithdrawalResult:
    """Outcome of the hit taken by a withdrawing fleet.

    Attributes:
        faction: Withdrawing faction
        planet_id: Planet being withdrawn from
        destroyed: Ships lost to the parting shot
        survivors: Ships that got away (colonizers included)
        candidates: Friendly planets (other than planet_id) that can take them
    """

    faction: Faction
    planet_id: int
    destroyed: List[Ship]
    survivors: List[Ship]
    candidates: List[int]


def fleet_power(ships: Iterable[Ship]) -> int:
    """Sum of non-colonizer attack values."""
    return sum(s.attack for s in ships if not s.is_colonizer)


def planet_defense(planet: Planet, attacker: Optional[Faction] = None) -> int:
    """Power of the ships a given attacker would face at ``planet``.

    Without an attacker, the power of the whole garrison.
    """
    if attacker is None:
        return fleet_power(planet.ships)
    return fleet_power(planet.hostile_ships(attacker))


def estimate_battle(attackers: Iterable[Ship], defenders: Iterable[Ship]) -> float:
    """Attack-to-defense power ratio, used for comparisons only.

    Returns:
        Ratio > 1 when the attackers are stronger; infinity against no defense
    """
    defense = fleet_power(defenders)
    attack = fleet_power(attackers)
    if defense == 0:
        return float("inf") if attack > 0 else 0.0
    return attack / defense


def apply_damage(targets: List[Ship], damage: float, rng: RandomSource) -> List[Ship]:
    """Distribute damage over ``targets`` one hit point at a time.

    Each unit of damage picks its target at random, weighted by the current
    hit points of the ships still alive, so healthier ships draw more fire.
    Ships reduced to 0 hit points or less are removed from ``targets``.

    Args:
        targets: Ships taking damage (mutated in place)
        damage: Total damage; rounded to whole units, at least 1 if positive
        rng: Random source

    Returns:
        List of ships destroyed by this damage
    """
    destroyed: List[Ship] = []
    if damage <= 0:
        return destroyed

    units = max(1, round(damage))
    for _ in range(units):
        if not targets:
            break
        index = _weighted_target_index(targets, rng)
        target = targets[index]
        target.hit_points = round(target.hit_points - 1, 1)
        if target.hit_points <= 0:
            destroyed.append(targets.pop(index))
    return destroyed


def _weighted_target_index(targets: List[Ship], rng: RandomSource) -> int:
    total = sum(max(s.hit_points, 0) for s in targets)
    roll = rng.random() * total
    cumulative = 0.0
    for index, ship in enumerate(targets):
        cumulative += max(ship.hit_points, 0)
        if roll < cumulative:
            return index
    return len(targets) - 1


def _split(ships: Iterable[Ship]) -> tuple[List[Ship], List[Ship]]:
    """Split ships into (combatants, colonizers)."""
    combatants, colonizers = [], []
    for ship in ships:
        (colonizers if ship.is_colonizer else combatants).append(ship)
    return combatants, colonizers


def _damaged(ships: List[Ship], hp_before: dict[str, float]) -> List[Ship]:
    return [s for s in ships if s.hit_points < hp_before.get(s.id, s.hit_points)]


def resolve_combat(
    world: World,
    attackers: List[Ship],
    defenders: List[Ship],
    planet: Planet,
    rng: Optional[RandomSource] = None,
    fresh_attack: bool = True,
) -> CombatResult:
    """Resolve a battle between two fleets at a planet.

    Combat rules:
    - Unescorted colonizers facing a non-empty enemy fleet are destroyed first
    - Defenders of an owned planet get +10% hit points (capped at max) once
    - Each round the attackers fire, then the surviving defenders fire back;
      damage = fleet power x uniform(0.85, 1.15), spread by current HP
    - Fighting stops when either side has no combatants, or after 50 rounds
    - Colonizers never deal or take round damage

    Side effects:
    - planet.ships becomes the bystanders plus the defending survivors, plus
      the attackers after a victory or a stalemate
    - Territory resolution after a victory (colonize, conquest countdown,
      occupation flag, build queue cleared)
    - Kill statistics on both accounts, attack log entry on enemy planets

    Args:
        world: Current world state
        attackers: Attacking ships (may or may not already be on the planet)
        defenders: Defending ships on the planet
        planet: Planet being fought over
        rng: Random source (unseeded random.Random() if omitted)
        fresh_attack: False when occupiers defeat a newly built ship; their
            victory flags an occupation without a new conquest
            countdown or attack record

    Returns:
        CombatResult describing casualties and territory changes
    """
    if rng is None:
        rng = default_rng()
    if not attackers:
        raise ValueError("Combat requires at least one attacking ship")

    attacker = attackers[0].owner
    defender = defenders[0].owner if defenders else planet.owner
    control_before = planet.owner

    fighting_ids = {s.id for s in attackers} | {s.id for s in defenders}
    bystanders = [s for s in planet.ships if s.id not in fighting_ids]

    atk_fighters, atk_colonizers = _split(attackers)
    def_fighters, def_colonizers = _split(defenders)
    attackers_destroyed: List[Ship] = []
    defenders_destroyed: List[Ship] = []

    # Colonizer vulnerability, applied to each side independently
    if atk_colonizers and not atk_fighters and defenders:
        attackers_destroyed.extend(atk_colonizers)
        atk_colonizers = []
    if def_colonizers and not def_fighters and attackers:
        defenders_destroyed.extend(def_colonizers)
        def_colonizers = []

    # Planetary defense bonus, only when a round will be fought
    if atk_fighters and def_fighters and planet.owner is not None and planet.owner != attacker:
        for ship in def_fighters:
            ship.hit_points = round(
                min(ship.max_hit_points, ship.hit_points * (1 + DEFENSE_HP_BONUS)), 1
            )

    hp_before = {s.id: s.hit_points for s in atk_fighters + def_fighters}

    rounds = 0
    while atk_fighters and def_fighters and rounds < MAX_COMBAT_ROUNDS:
        rounds += 1
        damage = fleet_power(atk_fighters) * uniform(rng, *COMBAT_VARIANCE)
        defenders_destroyed.extend(apply_damage(def_fighters, damage, rng))
        if not def_fighters:
            break
        damage = fleet_power(def_fighters) * uniform(rng, *COMBAT_VARIANCE)
        attackers_destroyed.extend(apply_damage(atk_fighters, damage, rng))
        logger.debug(
            f"Round {rounds} at {planet.name}: "
            f"{len(atk_fighters)} attackers vs {len(def_fighters)} defenders remain"
        )

    victory = bool(atk_fighters) and not def_fighters
    defender_won = bool(def_fighters) and not atk_fighters
    stalemate = bool(atk_fighters) and bool(def_fighters)

    # The losing side's colonizers are left unescorted in front of the winner
    if victory and def_colonizers:
        defenders_destroyed.extend(def_colonizers)
        def_colonizers = []
    if defender_won and atk_colonizers:
        attackers_destroyed.extend(atk_colonizers)
        atk_colonizers = []

    attacker_survivors = atk_fighters + atk_colonizers
    defender_survivors = def_fighters + def_colonizers

    keep_ids = {s.id for s in bystanders} | {s.id for s in defender_survivors}
    planet.ships = [s for s in planet.ships if s.id in keep_ids]
    _garrison(planet, defender_survivors)

    result = CombatResult(
        attacker=attacker,
        defender=defender,
        planet_id=planet.id,
        victory=victory,
        attackers_destroyed=attackers_destroyed,
        defenders_destroyed=defenders_destroyed,
        attackers_damaged=_damaged(atk_fighters, hp_before),
        defenders_damaged=_damaged(def_fighters, hp_before),
        attacker_survivors=list(attacker_survivors),
        defender_survivors=list(defender_survivors),
        rounds=rounds,
        stalemate=stalemate,
        control_before=control_before,
    )

    world.account(attacker).enemy_ships_destroyed += len(defenders_destroyed)
    world.account(attacker.opponent).enemy_ships_destroyed += len(attackers_destroyed)

    if victory:
        _resolve_territory(world, planet, attacker, attacker_survivors, result, fresh_attack)
    elif not defender_won:
        # No clean result: both sides share the garrison, ownership untouched
        _garrison(planet, attacker_survivors)

    result.control_after = planet.owner
    logger.info(
        f"Battle at {planet.name}: {attacker.value} "
        f"{'won' if victory else 'stalemated' if stalemate else 'lost'} after {rounds} rounds "
        f"(lost {len(attackers_destroyed)}, destroyed {len(defenders_destroyed)})"
    )
    return result


def _garrison(planet: Planet, ships: List[Ship]) -> None:
    """Station ships at the planet unless they are already there."""
    present = {s.id for s in planet.ships}
    planet.ships.extend(s for s in ships if s.id not in present)


def _resolve_territory(
    world: World,
    planet: Planet,
    attacker: Faction,
    survivors: List[Ship],
    result: CombatResult,
    fresh_attack: bool = True,
) -> None:
    """Apply ownership consequences of an attacker victory.

    - Neutral planet with a colonizer: colonized at once, colonizer consumed
    - Neutral planet without one: attackers garrison the still-neutral planet
    - Attacker's own planet: garrisoned, hostile conquest countdown cancelled
    - Enemy planet: shipyard destroyed (queue cleared); a colonizer starts the
      conquest countdown, otherwise the planet is flagged as contested
    - Occupiers that beat a newly built ship hold it as an occupation, with no
      new attack record or conquest countdown
    """
    colonizer = next((s for s in survivors if s.is_colonizer), None)

    if planet.owner is None:
        if colonizer is not None:
            survivors = [s for s in survivors if s.id != colonizer.id]
            planet.owner = attacker
            planet.population = COLONY_POPULATION
            result.conquered = True
            logger.info(f"{attacker.value} colonized {planet.name}")
        _garrison(planet, survivors)
        return

    if planet.owner == attacker:
        _garrison(planet, survivors)
        world.pending_conquests = [
            c for c in world.pending_conquests if c.planet_id != planet.id
        ]
        return

    if not fresh_attack:
        planet.contested_by = planet.owner
        result.occupied = True
        _garrison(planet, survivors)
        return

    planet.build_queue.clear()
    world.attack_log.append(AttackRecord(turn=world.turn, planet_id=planet.id, attacker=attacker))

    if colonizer is not None:
        world.pending_conquests = [
            c for c in world.pending_conquests if c.planet_id != planet.id
        ]
        world.pending_conquests.append(PendingConquest(planet_id=planet.id, claimant=attacker))
        result.conquering = True
        logger.info(f"{attacker.value} began conquest of {planet.name}")
    else:
        planet.contested_by = planet.owner
        result.occupied = True
        logger.info(f"{attacker.value} occupied {planet.name}")

    _garrison(planet, survivors)


def resolve_withdrawal(
    world: World,
    withdrawing: List[Ship],
    opposing: List[Ship],
    planet: Planet,
    rng: Optional[RandomSource] = None,
) -> WithdrawalResult:
    """Apply the parting shot to a fleet that declines to fight.

    The withdrawing side takes one hit equal to the opposing fleet's power x
    uniform(0.30, 0.40), distributed with the same HP-weighted function used
    in combat rounds. Withdrawing ships are removed from the planet garrison
    if they were stationed there. Where the survivors go is decided by the
    caller from ``candidates``.

    Args:
        world: Current world state
        withdrawing: Ships declining to fight
        opposing: Ships they are withdrawing from
        planet: Planet of the confrontation
        rng: Random source (unseeded random.Random() if omitted)

    Returns:
        WithdrawalResult with losses, survivors and friendly candidate planets
    """
    if rng is None:
        rng = default_rng()
    if not withdrawing:
        raise ValueError("Withdrawal requires at least one ship")

    faction = withdrawing[0].owner
    fighters, _ = _split(withdrawing)
    damage = fleet_power(opposing) * uniform(rng, *WITHDRAW_DAMAGE_RANGE)
    destroyed = apply_damage(fighters, damage, rng)

    destroyed_ids = {s.id for s in destroyed}
    survivors = [s for s in withdrawing if s.id not in destroyed_ids]
    planet.remove_ships(withdrawing)

    world.account(faction.opponent).enemy_ships_destroyed += len(destroyed)

    candidates = [p.id for p in world.planets_owned_by(faction) if p.id != planet.id]
    logger.info(
        f"{faction.value} withdrew from {planet.name}: "
        f"{len(destroyed)} lost, {len(survivors)} escaped"
    )
    return WithdrawalResult(
        faction=faction,
        planet_id=planet.id,
        destroyed=destroyed,
        survivors=survivors,
        candidates=candidates,
    )
