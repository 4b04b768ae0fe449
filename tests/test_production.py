"""Tests for ship construction and build queues."""

import pytest

from star_empires.engine.production import (
    calculate_build_time,
    cancel_build,
    issue_build,
    place_completed_build,
    progress_build_queues,
)
from star_empires.models import (
    BuildQueueEntry,
    CompletedBuild,
    Faction,
    Planet,
    Resources,
    Ship,
    ShipKind,
    World,
)

PLAYER = Faction.PLAYER
ENEMY = Faction.ENEMY


def create_planet(planet_id=1, owner=PLAYER, population=0):
    return Planet(
        id=planet_id,
        name=f"Planet-{planet_id}",
        x=0.0,
        y=0.0,
        size=30,
        owner=owner,
        population=population,
        max_population=200,
        yields=Resources(energy=10, minerals=10, food=10),
    )


def create_world(*planets):
    return World(map_seed=1, planets=list(planets))


@pytest.mark.parametrize(
    "kind, population, expected",
    [
        (ShipKind.FRIGATE, 0, 4),
        (ShipKind.FRIGATE, 100, 2),
        (ShipKind.BATTLESHIP, 50, 6),
        (ShipKind.SCOUT, 200, 1),
        (ShipKind.COLONIZER, 0, 5),
        (ShipKind.BATTLESHIP, 200, 4),
    ],
)
def test_build_time_shrinks_with_population(kind, population, expected):
    assert calculate_build_time(kind, population) == expected


def test_issue_build_pays_cost_and_queues_entry():
    planet = create_planet(population=100)
    world = create_world(planet)

    entry = issue_build(world, planet.id, "frigate", PLAYER)

    assert entry is not None
    assert entry.kind == ShipKind.FRIGATE
    assert entry.turns_remaining == 2
    assert planet.build_queue == [entry]
    account = world.account(PLAYER)
    assert (account.energy, account.minerals, account.food) == (75, 70, 95)


def test_unaffordable_build_changes_nothing():
    planet = create_planet()
    world = create_world(planet)
    account = world.account(PLAYER)
    account.energy = 40

    assert issue_build(world, planet.id, ShipKind.BATTLESHIP, PLAYER) is None
    assert planet.build_queue == []
    assert account.energy == 40
    assert world.command_errors == ["Insufficient resources for Battleship"]


def test_build_on_foreign_planet_is_rejected():
    planet = create_planet(owner=ENEMY)
    world = create_world(planet)

    assert issue_build(world, planet.id, ShipKind.SCOUT, PLAYER) is None
    assert planet.build_queue == []
    assert world.account(PLAYER).energy == 100


def test_unknown_kind_and_planet_are_rejected():
    planet = create_planet()
    world = create_world(planet)

    assert issue_build(world, planet.id, "dreadnought", PLAYER) is None
    assert issue_build(world, 99, ShipKind.SCOUT, PLAYER) is None
    assert len(world.command_errors) == 2


def test_cancel_refunds_half_the_cost_floored():
    planet = create_planet()
    world = create_world(planet)
    entry = issue_build(world, planet.id, ShipKind.FRIGATE, PLAYER)

    assert cancel_build(world, planet.id, entry.id, PLAYER)

    account = world.account(PLAYER)
    assert planet.build_queue == []
    assert (account.energy, account.minerals, account.food) == (75 + 12, 70 + 15, 95 + 2)


def test_cancel_unknown_entry_is_rejected():
    planet = create_planet()
    world = create_world(planet)

    assert not cancel_build(world, planet.id, "b-9999", PLAYER)
    assert world.command_errors


def test_only_queue_head_counts_down():
    planet = create_planet()
    planet.build_queue = [
        BuildQueueEntry(id="b-1", kind=ShipKind.SCOUT, turns_remaining=2),
        BuildQueueEntry(id="b-2", kind=ShipKind.SCOUT, turns_remaining=2),
    ]
    world = create_world(planet)

    assert progress_build_queues(world) == []
    assert [e.turns_remaining for e in planet.build_queue] == [1, 2]

    completed = progress_build_queues(world)

    assert len(completed) == 1
    assert completed[0].ship.kind == ShipKind.SCOUT
    assert completed[0].ship.hit_points == 3
    assert completed[0].ship.owner == PLAYER
    assert [e.id for e in planet.build_queue] == ["b-2"]
    assert world.completed_builds == completed
    assert world.account(PLAYER).ships_built == 1
    # New ships wait in the queue, not in the garrison
    assert planet.ships == []


def test_neutral_planet_queue_is_frozen():
    planet = create_planet(owner=None)
    planet.build_queue = [BuildQueueEntry(id="b-1", kind=ShipKind.SCOUT, turns_remaining=1)]
    world = create_world(planet)

    assert progress_build_queues(world) == []
    assert planet.build_queue[0].turns_remaining == 1


def test_place_completed_build_joins_garrison():
    planet = create_planet()
    world = create_world(planet)
    ship = Ship(id="s-1", kind=ShipKind.FRIGATE, hit_points=6, owner=PLAYER)

    assert place_completed_build(world, CompletedBuild(planet_id=planet.id, ship=ship)) is planet
    assert planet.ships == [ship]
    assert world.events[-1]["type"] == "ship_built"


def test_completed_build_discarded_after_ownership_change():
    planet = create_planet(owner=ENEMY)
    world = create_world(planet)
    ship = Ship(id="s-1", kind=ShipKind.FRIGATE, hit_points=6, owner=PLAYER)

    assert place_completed_build(world, CompletedBuild(planet_id=planet.id, ship=ship)) is None
    assert planet.ships == []
