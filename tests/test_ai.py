"""Tests for the automated opponent."""

import random

import pytest

from star_empires.ai import AIStrategist, select_attack_target, select_colonization_target
from star_empires.ai.targeting import colonization_score
from star_empires.engine.map_generator import generate_world
from star_empires.models import (
    DIFFICULTY_PROFILES,
    AttackRecord,
    DifficultyProfile,
    Faction,
    PendingBattle,
    Planet,
    Resources,
    Ship,
    ShipKind,
    TargetingStrategy,
    World,
)

PLAYER = Faction.PLAYER
ENEMY = Faction.ENEMY


class FixedRNG:
    """Always returns the same float."""

    def __init__(self, value=0.5):
        self.value = value

    def random(self):
        return self.value


def make_profile(**overrides):
    params = dict(
        expansion_priority=0.0,
        military_priority=0.0,
        aggressiveness=1.0,
        build_efficiency=0.0,
        targeting_strategy=TargetingStrategy.NEAREST,
        fleet_coordination=False,
        attack_force_ratio=1.0,
        escort_size=1,
        overkill_factor=1.0,
        home_defense_ratio=0.0,
        counter_attack_enabled=False,
    )
    params.update(overrides)
    return DifficultyProfile(**params)


def make_ship(ship_id, kind, owner):
    kind = ShipKind(kind)
    return Ship(id=ship_id, kind=kind, hit_points=kind.stats.max_hit_points, owner=owner)


def create_planet(planet_id, owner=None, ships=None, x=None, population=20, yields=10):
    return Planet(
        id=planet_id,
        name=f"Planet-{planet_id}",
        x=x if x is not None else planet_id * 100.0,
        y=0.0,
        size=30,
        owner=owner,
        population=population,
        max_population=120,
        yields=Resources(energy=yields, minerals=yields, food=yields),
        ships=ships or [],
    )


def create_duel_world(overkill):
    """AI battleship + scout (power 10) facing a planet defended by exactly 10."""
    ai_home = create_planet(
        0, owner=ENEMY,
        ships=[make_ship("e1", "battleship", ENEMY), make_ship("e2", "scout", ENEMY)],
    )
    target = create_planet(
        3, owner=PLAYER,
        ships=[make_ship("p1", "battleship", PLAYER), make_ship("p2", "scout", PLAYER)],
    )
    world = World(map_seed=1, planets=[ai_home, target])
    strategist = AIStrategist(ENEMY, make_profile(overkill_factor=overkill), FixedRNG())
    return world, strategist


# =============================================================================
# Attack gating
# =============================================================================


def test_ai_holds_back_below_overkill_threshold():
    """Power 10 vs defense 10 with overkill 1.5: no attack."""
    world, strategist = create_duel_world(overkill=1.5)

    assert strategist.take_turn(world) == []
    assert world.fleets == []
    assert len(world.get_planet(0).ships) == 2


def test_ai_attacks_when_force_meets_threshold():
    world, strategist = create_duel_world(overkill=1.0)

    fleets = strategist.take_turn(world)

    assert len(fleets) == 1
    assert fleets[0].destination_id == 3
    assert sorted(s.id for s in fleets[0].ships) == ["e1", "e2"]


def test_ai_does_nothing_while_a_decision_is_pending():
    world, strategist = create_duel_world(overkill=1.0)
    world.pending_battle = PendingBattle(planet_id=3, attacker=PLAYER)

    assert strategist.take_turn(world) == []


def test_home_defense_withholds_weakest_ships():
    planet = create_planet(
        0, owner=ENEMY,
        ships=[
            make_ship("s1", "scout", ENEMY),
            make_ship("b1", "battleship", ENEMY),
            make_ship("f1", "frigate", ENEMY),
            make_ship("c1", "colonizer", ENEMY),
        ],
    )
    strategist = AIStrategist(ENEMY, make_profile(home_defense_ratio=0.3), FixedRNG())

    # 3 military ships x 0.3 rounds to one withheld
    assert [s.id for s in strategist.available_military(planet)] == ["b1", "f1"]


# =============================================================================
# Builds
# =============================================================================


def test_expansion_roll_picks_colonizer():
    world = World(map_seed=1, planets=[create_planet(0, owner=ENEMY)])
    strategist = AIStrategist(ENEMY, make_profile(expansion_priority=1.0), FixedRNG())

    assert strategist.choose_build(world) == ShipKind.COLONIZER


def test_threatened_ai_builds_strongest_affordable_ship():
    world = World(
        map_seed=1,
        planets=[
            create_planet(0, owner=ENEMY, ships=[make_ship("e1", "scout", ENEMY)]),
            create_planet(1, owner=PLAYER, ships=[make_ship("p1", "scout", PLAYER)]),
        ],
    )
    strategist = AIStrategist(ENEMY, make_profile(military_priority=1.0), FixedRNG())

    assert strategist.choose_build(world) == ShipKind.BATTLESHIP

    world.account(ENEMY).minerals = 40
    assert strategist.choose_build(world) == ShipKind.FRIGATE

    world.account(ENEMY).energy = 5
    assert strategist.choose_build(world) is None


def test_unthreatened_ai_builds_cheapest_military_ship():
    world = World(
        map_seed=1,
        planets=[create_planet(0, owner=ENEMY, ships=[make_ship("e1", "frigate", ENEMY)])],
    )
    strategist = AIStrategist(ENEMY, make_profile(military_priority=1.0), FixedRNG())

    assert strategist.choose_build(world) == ShipKind.SCOUT


def test_decide_builds_queues_on_every_planet_that_rolls():
    world = World(
        map_seed=1,
        planets=[create_planet(0, owner=ENEMY), create_planet(1, owner=ENEMY)],
    )
    strategist = AIStrategist(ENEMY, make_profile(build_efficiency=1.0), FixedRNG())

    assert strategist.decide_builds(world) == 2
    assert all(p.build_queue[0].kind == ShipKind.SCOUT for p in world.planets)


# =============================================================================
# Attack memory and counter-attacks
# =============================================================================


def test_attack_records_expire_after_three_turns():
    world = World(map_seed=1, turn=5)
    world.attack_log = [
        AttackRecord(turn=1, planet_id=0, attacker=PLAYER),
        AttackRecord(turn=2, planet_id=0, attacker=PLAYER),
        AttackRecord(turn=5, planet_id=0, attacker=ENEMY),
    ]
    strategist = AIStrategist(ENEMY, make_profile(), FixedRNG())

    strategist.expire_attack_records(world)

    assert [r.turn for r in world.attack_log] == [2, 5]
    assert [r.turn for r in strategist.recent_attacks(world)] == [2]


def test_counter_attack_targets_enemy_planet_nearest_the_attack():
    attacked = create_planet(0, owner=ENEMY, x=0.0)
    world = World(
        map_seed=1,
        turn=4,
        planets=[
            attacked,
            create_planet(1, owner=PLAYER, x=900.0),
            create_planet(2, owner=PLAYER, x=300.0),
        ],
    )
    world.attack_log = [AttackRecord(turn=3, planet_id=0, attacker=PLAYER)]

    disabled = AIStrategist(ENEMY, make_profile(), FixedRNG())
    enabled = AIStrategist(ENEMY, make_profile(counter_attack_enabled=True), FixedRNG())

    assert disabled.counter_attack_target(world) is None
    assert enabled.counter_attack_target(world).id == 2


# =============================================================================
# Coordinated movement
# =============================================================================


def test_coordinated_attack_stops_once_margin_is_committed():
    near = create_planet(1, owner=ENEMY, x=100.0, ships=[make_ship("e1", "battleship", ENEMY)])
    far = create_planet(2, owner=ENEMY, x=900.0, ships=[make_ship("e2", "battleship", ENEMY)])
    target = create_planet(3, owner=PLAYER, x=0.0, ships=[make_ship("p1", "frigate", PLAYER)])
    world = World(map_seed=1, planets=[near, far, target])
    strategist = AIStrategist(ENEMY, make_profile(fleet_coordination=True), FixedRNG())

    fleets = strategist.coordinated_attack(world, target)

    assert [f.source_id for f in fleets] == [1]
    assert far.ships


def test_coordinated_attack_pools_several_planets():
    near = create_planet(1, owner=ENEMY, x=100.0, ships=[make_ship("e1", "scout", ENEMY)])
    far = create_planet(2, owner=ENEMY, x=900.0, ships=[make_ship("e2", "frigate", ENEMY)])
    target = create_planet(3, owner=PLAYER, x=0.0, ships=[make_ship("p1", "frigate", PLAYER)])
    world = World(map_seed=1, planets=[near, far, target])
    strategist = AIStrategist(ENEMY, make_profile(fleet_coordination=True), FixedRNG())

    fleets = strategist.coordinated_attack(world, target)

    assert [f.source_id for f in fleets] == [1, 2]


def test_coordinated_attack_needs_enough_pooled_power():
    home = create_planet(1, owner=ENEMY, ships=[make_ship("e1", "scout", ENEMY)])
    target = create_planet(3, owner=PLAYER, ships=[make_ship("p1", "battleship", PLAYER)])
    world = World(map_seed=1, planets=[home, target])
    strategist = AIStrategist(ENEMY, make_profile(fleet_coordination=True), FixedRNG())

    assert strategist.coordinated_attack(world, target) == []
    assert world.fleets == []


def test_coordinated_expansion_sends_colonizer_with_escort():
    home = create_planet(
        0, owner=ENEMY,
        ships=[
            make_ship("c1", "colonizer", ENEMY),
            make_ship("f1", "frigate", ENEMY),
            make_ship("s1", "scout", ENEMY),
        ],
    )
    world = World(map_seed=1, planets=[home, create_planet(4), create_planet(2)])
    strategist = AIStrategist(
        ENEMY, make_profile(fleet_coordination=True, aggressiveness=0.0), FixedRNG()
    )

    fleets = strategist.coordinated_movement(world)

    assert len(fleets) == 1
    assert fleets[0].destination_id == 2
    assert [s.id for s in fleets[0].ships] == ["c1", "f1"]


# =============================================================================
# Targeting
# =============================================================================


def test_nearest_attack_strategy_prefers_weakest_defense():
    source = create_planet(0, owner=ENEMY)
    strong = create_planet(1, owner=PLAYER, ships=[make_ship("p1", "battleship", PLAYER)])
    weak = create_planet(5, owner=PLAYER, ships=[make_ship("p2", "scout", PLAYER)])

    target = select_attack_target(source, [strong, weak], TargetingStrategy.NEAREST, FixedRNG(), ENEMY)

    assert target is weak


def test_optimal_strategies_score_candidates():
    source = create_planet(0, owner=ENEMY)
    rich_far = create_planet(8, yields=14)
    poor_near = create_planet(1, yields=5)

    assert (
        select_colonization_target(source, [poor_near, rich_far], TargetingStrategy.OPTIMAL, FixedRNG())
        is rich_far
    )

    crowded = create_planet(2, owner=PLAYER, population=80, ships=[make_ship("p1", "frigate", PLAYER)])
    empty = create_planet(3, owner=PLAYER, population=10)
    assert (
        select_attack_target(source, [empty, crowded], TargetingStrategy.OPTIMAL, FixedRNG(), ENEMY)
        is crowded
    )


def test_colonization_score_trades_distance_for_yield():
    source = create_planet(0, owner=ENEMY)

    # 42 total yield, 800 units away
    assert colonization_score(source, create_planet(8, yields=14)) == pytest.approx(34.0)


def test_random_strategy_uses_the_injected_source():
    source = create_planet(0, owner=ENEMY)
    candidates = [create_planet(i) for i in range(1, 5)]

    assert select_colonization_target(source, candidates, TargetingStrategy.RANDOM, FixedRNG(0.0)) is candidates[0]
    assert select_colonization_target(source, candidates, TargetingStrategy.RANDOM, FixedRNG(0.99)) is candidates[3]
    assert select_attack_target(source, [], TargetingStrategy.RANDOM, FixedRNG(), ENEMY) is None


def test_full_turn_on_generated_map_runs_for_every_profile():
    for name, profile in DIFFICULTY_PROFILES.items():
        world = generate_world(seed=7, human_faction=None)
        strategist = AIStrategist(ENEMY, profile, random.Random(3))

        fleets = strategist.take_turn(world)

        assert all(f.owner == ENEMY for f in fleets), name
        assert world.command_errors == [], name
