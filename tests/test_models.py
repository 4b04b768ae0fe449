"""Tests for data model validation."""

import json

import pytest
from pydantic import ValidationError

from star_empires.models import (
    BuildQueueEntry,
    DifficultyProfile,
    Faction,
    FactionAccount,
    Fleet,
    PendingRetreat,
    Planet,
    Resources,
    Ship,
    ShipKind,
    World,
)
from star_empires.models.difficulty import get_difficulty, load_difficulty_profiles


def make_ship(ship_id="s-1", kind="scout", owner="player", hp=None):
    kind = ShipKind(kind)
    return Ship(
        id=ship_id,
        kind=kind,
        hit_points=hp if hp is not None else kind.stats.max_hit_points,
        owner=owner,
    )


class TestShip:
    """Test Ship model."""

    def test_string_values_are_coerced(self):
        ship = make_ship(kind="frigate", owner="enemy")
        assert ship.kind is ShipKind.FRIGATE
        assert ship.owner is Faction.ENEMY
        assert ship.attack == 4
        assert ship.max_hit_points == 6

    def test_hit_points_must_be_positive(self):
        with pytest.raises(ValueError, match="hit_points"):
            make_ship(hp=0)

    def test_hit_points_cannot_exceed_max(self):
        with pytest.raises(ValueError, match="hit_points"):
            make_ship(kind="scout", hp=4)

    def test_colonizer_flag(self):
        assert make_ship(kind="colonizer").is_colonizer
        assert not make_ship(kind="battleship").is_colonizer


class TestPlanet:
    """Test Planet model."""

    def create_planet(self, **overrides):
        params = dict(
            id=0, name="Alpha", x=0.0, y=0.0, size=30, owner=None,
            population=10, max_population=120, yields=Resources(10, 10, 10),
        )
        params.update(overrides)
        return Planet(**params)

    def test_negative_population_rejected(self):
        with pytest.raises(ValueError, match="population"):
            self.create_planet(population=-1)

    def test_size_must_be_positive(self):
        with pytest.raises(ValueError, match="size"):
            self.create_planet(size=0)

    def test_garrison_helpers(self):
        ours = make_ship("p1", owner="player")
        theirs = make_ship("e1", owner="enemy")
        planet = self.create_planet(owner="player", ships=[ours, theirs])

        assert planet.owner is Faction.PLAYER
        assert planet.ships_of(Faction.PLAYER) == [ours]
        assert planet.hostile_ships(Faction.PLAYER) == [theirs]
        assert planet.find_ship("e1") is theirs

        planet.remove_ships([theirs])
        assert planet.ships == [ours]


class TestResourcesAndAccounts:
    """Test Resources and FactionAccount."""

    def test_negative_amounts_rejected(self):
        with pytest.raises(ValueError):
            Resources(energy=-1)

    def test_scaled_down_floors_each_amount(self):
        assert Resources(25, 30, 5).scaled_down(0.5) == Resources(12, 15, 2)

    def test_account_starts_with_stockpile(self):
        account = FactionAccount(faction=Faction.PLAYER)
        assert account.stockpile == Resources(100, 100, 100)

    def test_pay_refuses_overdraft(self):
        account = FactionAccount(faction=Faction.PLAYER, energy=5)
        with pytest.raises(ValueError):
            account.pay(Resources(energy=10))
        assert account.energy == 5


class TestQueuesAndFleets:
    """Test build entries, fleets and retreats."""

    def test_build_entry_rejects_negative_turns(self):
        with pytest.raises(ValueError):
            BuildQueueEntry(id="b-1", kind="scout", turns_remaining=-1)

    def test_fleet_needs_ships(self):
        with pytest.raises(ValueError, match="at least one ship"):
            Fleet(id="f-1", owner="player", ships=[], source_id=0, destination_id=1,
                  turns_remaining=1, total_turns=1)

    def test_retreat_needs_a_real_choice(self):
        with pytest.raises(ValueError):
            PendingRetreat(faction="player", ships=[make_ship()], from_planet_id=0, candidates=[1])


class TestWorld:
    """Test World container."""

    def test_invalid_map_size_rejected(self):
        with pytest.raises(ValueError, match="map_size"):
            World(map_seed=1, map_size="huge")

    def test_ids_are_unique_per_prefix(self):
        world = World(map_seed=1)
        assert world.next_id("s") == "s-0001"
        assert world.next_id("s") == "s-0002"
        assert world.next_id("f") == "f-0001"

    def test_human_faction_coerced(self):
        assert World(map_seed=1, human_faction="enemy").human_faction is Faction.ENEMY
        assert World(map_seed=1, human_faction=None).is_human(Faction.PLAYER) is False


class TestDifficulty:
    """Test difficulty profiles."""

    def test_builtin_levels(self):
        assert get_difficulty("hard").fleet_coordination
        assert not get_difficulty("easy").counter_attack_enabled
        with pytest.raises(ValueError):
            get_difficulty("nightmare")

    def test_probabilities_are_validated(self):
        with pytest.raises(ValidationError):
            DifficultyProfile(
                expansion_priority=1.5,
                military_priority=0.5,
                aggressiveness=0.5,
                build_efficiency=0.5,
            )

    def test_profiles_are_read_only(self):
        with pytest.raises(ValidationError):
            get_difficulty("medium").aggressiveness = 0.9

    def test_load_overrides_from_json(self, tmp_path):
        path = tmp_path / "profiles.json"
        path.write_text(
            json.dumps(
                {
                    "brutal": {
                        "expansion_priority": 0.9,
                        "military_priority": 0.9,
                        "aggressiveness": 1.0,
                        "build_efficiency": 1.0,
                        "targeting_strategy": "optimal",
                        "overkill_factor": 2.0,
                    }
                }
            )
        )

        profiles = load_difficulty_profiles(path)

        assert profiles["brutal"].overkill_factor == 2.0
        assert profiles["brutal"].targeting_strategy.value == "optimal"
        assert "medium" in profiles
