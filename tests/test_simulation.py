"""Tests for the game session facade."""

import random

import pytest

from star_empires.engine.simulation import Simulation
from star_empires.engine.turn_executor import TurnStatus
from star_empires.models import Faction


def create_ai_game(seed=42, difficulty="medium"):
    return Simulation.new_game(
        seed=seed,
        difficulty=difficulty,
        human_faction=None,
        rng=random.Random(seed),
        ai_rng=random.Random(seed + 1),
    )


@pytest.mark.parametrize("difficulty", ["easy", "medium", "hard"])
def test_ai_vs_ai_never_waits_for_decisions(difficulty):
    simulation = create_ai_game(difficulty=difficulty)

    for _ in range(40):
        if simulation.game_over:
            break
        report = simulation.advance_turn()
        assert report.status is TurnStatus.COMPLETED
        assert not simulation.world.awaiting_decision

    assert simulation.world.turn > 1


def test_seeded_ai_games_are_reproducible():
    first = create_ai_game(seed=8)
    second = create_ai_game(seed=8)

    for _ in range(15):
        first.advance_turn()
        second.advance_turn()

    assert first.snapshot() == second.snapshot()


def test_human_commands_default_to_human_faction():
    simulation = Simulation.new_game(seed=42, ai_rng=random.Random(1))
    home = simulation.world.planets[0]
    ship_id = home.ships[0].id

    assert simulation.issue_build(home.id, "scout")
    assert simulation.world.account(Faction.PLAYER).energy == 90
    assert simulation.send_fleet(home.id, [ship_id], simulation.world.planets[1].id)
    assert not simulation.send_fleet(home.id, [ship_id], simulation.world.planets[1].id)

    report = simulation.advance_turn()

    assert report.completed
    assert report.turn == 2


def test_human_cannot_command_enemy_ships():
    simulation = Simulation.new_game(seed=42)
    enemy_home = simulation.world.planets[-1]

    assert not simulation.issue_build(enemy_home.id, "scout")
    assert not simulation.send_fleet(enemy_home.id, [enemy_home.ships[0].id], 0)
    assert len(simulation.world.command_errors) == 2


def test_ai_only_game_rejects_default_commands():
    simulation = create_ai_game()

    assert not simulation.issue_build(0, "scout")
    assert simulation.issue_build(0, "scout", faction=Faction.PLAYER)


def test_invalid_battle_decision_is_rejected():
    simulation = Simulation.new_game(seed=42)

    assert simulation.submit_battle_decision("surrender") is None
    assert simulation.submit_battle_decision("fight") is None
    assert simulation.submit_retreat_destination(0) is None


def test_finished_game_ignores_turns_and_commands():
    simulation = Simulation.new_game(seed=42)
    simulation.world.winner = Faction.ENEMY

    report = simulation.advance_turn()

    assert report.completed
    assert simulation.world.turn == 1
    assert not simulation.issue_build(0, "scout")


def test_snapshot_restores_into_new_simulation():
    simulation = create_ai_game(seed=3)
    for _ in range(5):
        simulation.advance_turn()

    restored = Simulation.from_snapshot(simulation.snapshot(), ai_rng=random.Random(0))

    assert restored.snapshot() == simulation.snapshot()
    assert len(restored.strategists) == 2


def test_unknown_difficulty_is_rejected():
    with pytest.raises(ValueError):
        Simulation.new_game(seed=1, difficulty="nightmare")


def test_scores_start_equal():
    scores = Simulation.new_game(seed=42).scores()

    # 100 per planet + 50 population + 10 per ship
    assert scores == {"player": 180, "enemy": 180}
