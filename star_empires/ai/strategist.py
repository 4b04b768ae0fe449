"""Decision logic for the automated opponent.

The AIStrategist is parameterised entirely by a DifficultyProfile. Once per
completed turn it:
1. Expires attack records older than 3 turns
2. Decides builds, one roll per owned planet
3. Moves ships, either planet by planet (uncoordinated) or as one pooled
   effort (coordinated: counter-attack, attack, or expansion)

All randomness comes from the injected RandomSource. Battle strength is only
compared here (fleet_power / planet_defense); combat itself is never run.
"""

import logging
import math
from typing import List, Optional

from ..engine.combat import fleet_power, planet_defense
from ..engine.movement import planet_distance, send_fleet
from ..engine.production import issue_build
from ..models.conquest import AttackRecord
from ..models.difficulty import DEFAULT_DIFFICULTY, DifficultyProfile, get_difficulty
from ..models.faction import Faction
from ..models.fleet import Fleet
from ..models.planet import Planet
from ..models.ship import MILITARY_KINDS, Ship, ShipKind
from ..models.world import World
from ..utils.constants import (
    ATTACK_COMMIT_MARGIN,
    ATTACK_MEMORY_TURNS,
    MILITARY_THREAT_RATIO,
)
from ..utils.rng import RandomSource, default_rng
from .targeting import nearest_planet, select_attack_target, select_colonization_target

logger = logging.getLogger(__name__)


class AIStrategist:
    """Automated opponent for one faction.

    Example:
        strategist = AIStrategist(Faction.ENEMY, get_difficulty("hard"))
        fleets = strategist.take_turn(world)
    """

    def __init__(
        self,
        faction: Faction = Faction.ENEMY,
        profile: Optional[DifficultyProfile] = None,
        rng: Optional[RandomSource] = None,
    ):
        """Initialize the strategist.

        Args:
            faction: Faction this strategist plays
            profile: Behaviour parameters (medium difficulty if omitted)
            rng: Random source for every decision roll
        """
        self.faction = Faction(faction)
        self.profile = profile or get_difficulty(DEFAULT_DIFFICULTY)
        self.rng = rng if rng is not None else default_rng()

    @property
    def opponent(self) -> Faction:
        return self.faction.opponent

    def _roll(self, chance: float) -> bool:
        return self.rng.random() < chance

    # =========================================================================
    # TURN ENTRY POINT
    # =========================================================================

    def take_turn(self, world: World) -> List[Fleet]:
        """Make this turn's build and movement decisions.

        Args:
            world: Current world state (mutated through engine commands)

        Returns:
            Fleets dispatched this turn
        """
        if world.winner is not None or world.awaiting_decision:
            return []

        self.expire_attack_records(world)
        self.decide_builds(world)

        if self.profile.fleet_coordination:
            fleets = self.coordinated_movement(world)
        else:
            fleets = self.uncoordinated_movement(world)

        logger.debug(
            f"{self.faction.value} AI turn {world.turn}: {len(fleets)} fleets dispatched"
        )
        return fleets

    # =========================================================================
    # ATTACK MEMORY
    # =========================================================================

    def expire_attack_records(self, world: World) -> None:
        """Drop attack records older than ATTACK_MEMORY_TURNS."""
        world.attack_log = [
            r for r in world.attack_log if world.turn - r.turn <= ATTACK_MEMORY_TURNS
        ]

    def recent_attacks(self, world: World) -> List[AttackRecord]:
        """Still-remembered attacks made by the opponent."""
        return [
            r
            for r in world.attack_log
            if r.attacker == self.opponent and world.turn - r.turn <= ATTACK_MEMORY_TURNS
        ]

    # =========================================================================
    # BUILDS
    # =========================================================================

    def decide_builds(self, world: World) -> int:
        """Roll build_efficiency per owned planet and queue the chosen kind.

        Returns:
            Number of builds queued
        """
        queued = 0
        for planet in world.planets_owned_by(self.faction):
            if not self._roll(self.profile.build_efficiency):
                continue
            kind = self.choose_build(world)
            if kind is not None and issue_build(world, planet.id, kind, self.faction):
                queued += 1
        return queued

    def choose_build(self, world: World) -> Optional[ShipKind]:
        """Pick a ship kind to build.

        1. Colonizer, behind an expansion_priority roll, if affordable
        2. If the opponent's military count exceeds 70% of ours, behind a
           military_priority roll, the strongest affordable combat ship
        3. Otherwise the cheapest military kind if affordable
        """
        account = world.account(self.faction)

        if self._roll(self.profile.expansion_priority) and account.can_afford(
            ShipKind.COLONIZER.stats.cost
        ):
            return ShipKind.COLONIZER

        own = world.military_count(self.faction)
        theirs = world.military_count(self.opponent)
        if theirs > own * MILITARY_THREAT_RATIO and self._roll(self.profile.military_priority):
            for kind in sorted(MILITARY_KINDS, key=lambda k: k.stats.attack, reverse=True):
                if account.can_afford(kind.stats.cost):
                    return kind
            return None

        cheapest = min(MILITARY_KINDS, key=lambda k: k.stats.cost.total)
        if account.can_afford(cheapest.stats.cost):
            return cheapest
        return None

    # =========================================================================
    # SHIP SELECTION HELPERS
    # =========================================================================

    def available_military(self, planet: Planet) -> List[Ship]:
        """Military ships at ``planet`` free to leave, strongest first.

        The weakest home_defense_ratio share (rounded half up) stays behind.
        """
        military = sorted(
            (s for s in planet.ships_of(self.faction) if not s.is_colonizer),
            key=lambda s: (s.attack, s.hit_points),
            reverse=True,
        )
        withheld = int(len(military) * self.profile.home_defense_ratio + 0.5)
        return military[: len(military) - withheld]

    def _attack_share(self, ships: List[Ship]) -> List[Ship]:
        count = max(1, math.ceil(len(ships) * self.profile.attack_force_ratio))
        return ships[:count]

    def _dispatch(self, world: World, source: Planet, ships: List[Ship], target: Planet) -> Optional[Fleet]:
        if not ships:
            return None
        return send_fleet(world, source.id, [s.id for s in ships], target.id, self.faction)

    def _colonization_candidates(self, world: World, claimed: set) -> List[Planet]:
        return [
            p
            for p in world.planets_owned_by(None)
            if p.id not in claimed and not p.hostile_ships(self.faction)
        ]

    def _claimed_targets(self, world: World) -> set:
        """Neutral planets already targeted by one of our colonizer fleets."""
        return {f.destination_id for f in world.fleets_of(self.faction) if f.has_colonizer}

    def _expand_from(self, world: World, planet: Planet, claimed: set) -> Optional[Fleet]:
        """Send a colonizer and its escort from ``planet`` to a neutral planet."""
        colonizer = next((s for s in planet.ships_of(self.faction) if s.is_colonizer), None)
        if colonizer is None:
            return None
        target = select_colonization_target(
            planet,
            self._colonization_candidates(world, claimed),
            self.profile.targeting_strategy,
            self.rng,
        )
        if target is None:
            return None

        escort = self.available_military(planet)[: self.profile.escort_size]
        fleet = self._dispatch(world, planet, [colonizer] + escort, target)
        if fleet is not None:
            claimed.add(target.id)
        return fleet

    # =========================================================================
    # UNCOORDINATED MOVEMENT
    # =========================================================================

    def uncoordinated_movement(self, world: World) -> List[Fleet]:
        """Each planet independently rolls aggressiveness and acts alone.

        A planet holding a colonizer expands toward a neutral planet with an
        escort of escort_size. Otherwise it sends attack_force_ratio of its
        available military at an enemy planet, but only if that force is at
        least target defense x overkill_factor.
        """
        fleets = []
        claimed = self._claimed_targets(world)

        for planet in world.planets_owned_by(self.faction):
            if not planet.ships_of(self.faction):
                continue
            if not self._roll(self.profile.aggressiveness):
                continue

            fleet = self._expand_from(world, planet, claimed)
            if fleet is None:
                fleet = self._raid_from(world, planet)
            if fleet is not None:
                fleets.append(fleet)

        return fleets

    def _raid_from(self, world: World, planet: Planet) -> Optional[Fleet]:
        target = select_attack_target(
            planet,
            world.planets_owned_by(self.opponent),
            self.profile.targeting_strategy,
            self.rng,
            self.faction,
        )
        if target is None:
            return None

        ships = self._attack_share(self.available_military(planet))
        required = planet_defense(target, self.faction) * self.profile.overkill_factor
        if not ships or fleet_power(ships) < required:
            return None
        return self._dispatch(world, planet, ships, target)

    # =========================================================================
    # COORDINATED MOVEMENT
    # =========================================================================

    def coordinated_movement(self, world: World) -> List[Fleet]:
        """Act as one empire: counter-attack, attack, or expand.

        A counter-attack needs counter_attack_enabled, an opponent attack
        remembered within 3 turns and a successful aggressiveness roll. It
        targets the enemy planet nearest the most recently attacked planet.
        Otherwise a second aggressiveness roll chooses between a pooled
        attack and expansion.
        """
        target = self.counter_attack_target(world)
        if target is not None:
            logger.info(f"{self.faction.value} AI counter-attacks {target.name}")
            return self.coordinated_attack(world, target)

        if self._roll(self.profile.aggressiveness):
            target = self._pooled_attack_target(world)
            if target is not None:
                return self.coordinated_attack(world, target)
            return []

        return self.coordinated_expansion(world)

    def counter_attack_target(self, world: World) -> Optional[Planet]:
        if not self.profile.counter_attack_enabled:
            return None
        records = self.recent_attacks(world)
        if not records:
            return None
        if not self._roll(self.profile.aggressiveness):
            return None

        latest = max(records, key=lambda r: r.turn)
        attacked = world.get_planet(latest.planet_id)
        if attacked is None:
            return None
        return nearest_planet(attacked, world.planets_owned_by(self.opponent))

    def _pooled_attack_target(self, world: World) -> Optional[Planet]:
        """Pick an attack target as seen from our best-stocked planet."""
        staging = max(
            world.planets_owned_by(self.faction),
            key=lambda p: fleet_power(self.available_military(p)),
            default=None,
        )
        if staging is None:
            return None
        return select_attack_target(
            staging,
            world.planets_owned_by(self.opponent),
            self.profile.targeting_strategy,
            self.rng,
            self.faction,
        )

    def coordinated_attack(self, world: World, target: Planet) -> List[Fleet]:
        """Pool military across planets against one target.

        The attack is committed only if the pooled power of every planet's
        available military reaches target defense x overkill_factor. Planets
        then contribute, nearest first, attack_force_ratio of their available
        ships each until 120% of the required strength is committed.

        Returns:
            Fleets dispatched (empty if the attack was not committed)
        """
        required = planet_defense(target, self.faction) * self.profile.overkill_factor
        contributors = [
            (planet, self.available_military(planet))
            for planet in world.planets_owned_by(self.faction)
            if planet.id != target.id
        ]
        contributors = [(p, ships) for p, ships in contributors if ships]
        pooled = sum(fleet_power(ships) for _, ships in contributors)

        if pooled == 0 or pooled < required:
            logger.debug(
                f"{self.faction.value} AI holds off on {target.name}: "
                f"pooled {pooled} < required {required:.1f}"
            )
            return []

        contributors.sort(key=lambda item: planet_distance(item[0], target))
        fleets = []
        committed = 0
        for planet, ships in contributors:
            if committed > 0 and committed >= required * ATTACK_COMMIT_MARGIN:
                break
            share = self._attack_share(ships)
            fleet = self._dispatch(world, planet, share, target)
            if fleet is not None:
                fleets.append(fleet)
                committed += fleet_power(share)

        logger.info(
            f"{self.faction.value} AI attacks {target.name} with power {committed} "
            f"(defense x overkill = {required:.1f})"
        )
        return fleets

    def coordinated_expansion(self, world: World) -> List[Fleet]:
        """Send every stationed colonizer to its own neutral target."""
        fleets = []
        claimed = self._claimed_targets(world)
        for planet in world.planets_owned_by(self.faction):
            fleet = self._expand_from(world, planet, claimed)
            if fleet is not None:
                fleets.append(fleet)
        return fleets
