"""World state serialization to/from JSON.

This module converts a World to a JSON-compatible dictionary and back, and
saves/loads it as a JSON file. Everything needed to resume a paused turn is
included: the phase cursor, queued completions and arrivals, the pending
battle or retreat, pending conquests, contest flags and the attack log.
"""

import json
from pathlib import Path
from typing import Any, Optional

from ..models.account import FactionAccount
from ..models.battle import PendingBattle, PendingRetreat
from ..models.conquest import AttackRecord, PendingConquest
from ..models.faction import Faction, parse_owner
from ..models.fleet import Fleet
from ..models.planet import BuildQueueEntry, Planet
from ..models.resources import Resources
from ..models.ship import Ship
from ..models.world import CompletedBuild, TurnPhase, World

STATE_DIR = Path(__file__).parent.parent.parent / "state"


def _resolve_path(filepath: str, create_dir: bool = False) -> Path:
    """Relative paths go into the state/ directory."""
    path = Path(filepath)
    if not path.is_absolute():
        if create_dir:
            STATE_DIR.mkdir(exist_ok=True)
        path = STATE_DIR / filepath
    return path


def save_world(world: World, filepath: str) -> Path:
    """Save world state to a JSON file.

    Args:
        world: World to save
        filepath: Path to save file (created in the state/ directory if relative)

    Returns:
        The path written

    Example:
        save_world(world, "my_game.json")  # Saves to state/my_game.json
    """
    path = _resolve_path(filepath, create_dir=True)
    with open(path, "w") as f:
        json.dump(world_to_dict(world), f, indent=2)
    return path


def load_world(filepath: str) -> World:
    """Load world state from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the JSON is malformed
    """
    path = _resolve_path(filepath)
    with open(path) as f:
        data = json.load(f)
    return world_from_dict(data)


# =============================================================================
# SERIALIZATION
# =============================================================================


def _owner(value: Optional[Faction]) -> Optional[str]:
    return value.value if value is not None else None


def _ship_to_dict(ship: Ship) -> dict[str, Any]:
    return {
        "id": ship.id,
        "kind": ship.kind.value,
        "hit_points": ship.hit_points,
        "owner": ship.owner.value,
    }


def _planet_to_dict(planet: Planet) -> dict[str, Any]:
    return {
        "id": planet.id,
        "name": planet.name,
        "x": planet.x,
        "y": planet.y,
        "size": planet.size,
        "owner": _owner(planet.owner),
        "population": planet.population,
        "max_population": planet.max_population,
        "yields": planet.yields.to_dict(),
        "ships": [_ship_to_dict(s) for s in planet.ships],
        "build_queue": [
            {"id": e.id, "kind": e.kind.value, "turns_remaining": e.turns_remaining}
            for e in planet.build_queue
        ],
        "contested_by": _owner(planet.contested_by),
    }


def _fleet_to_dict(fleet: Fleet) -> dict[str, Any]:
    return {
        "id": fleet.id,
        "owner": fleet.owner.value,
        "ships": [_ship_to_dict(s) for s in fleet.ships],
        "source_id": fleet.source_id,
        "destination_id": fleet.destination_id,
        "turns_remaining": fleet.turns_remaining,
        "total_turns": fleet.total_turns,
    }


def _account_to_dict(account: FactionAccount) -> dict[str, Any]:
    return {
        "energy": account.energy,
        "minerals": account.minerals,
        "food": account.food,
        "ships_built": account.ships_built,
        "enemy_ships_destroyed": account.enemy_ships_destroyed,
    }


def _battle_to_dict(battle: Optional[PendingBattle]) -> Optional[dict[str, Any]]:
    if battle is None:
        return None
    return {
        "planet_id": battle.planet_id,
        "attacker": battle.attacker.value,
        "incoming": [_ship_to_dict(s) for s in battle.incoming],
        "is_defending": battle.is_defending,
        "source_id": battle.source_id,
    }


def _retreat_to_dict(retreat: Optional[PendingRetreat]) -> Optional[dict[str, Any]]:
    if retreat is None:
        return None
    return {
        "faction": retreat.faction.value,
        "ships": [_ship_to_dict(s) for s in retreat.ships],
        "from_planet_id": retreat.from_planet_id,
        "candidates": list(retreat.candidates),
    }


def world_to_dict(world: World) -> dict[str, Any]:
    """Convert a World to a JSON-compatible dictionary."""
    return {
        "map_seed": world.map_seed,
        "turn": world.turn,
        "map_size": world.map_size,
        "difficulty": world.difficulty,
        "width": world.width,
        "height": world.height,
        "human_faction": _owner(world.human_faction),
        "planets": [_planet_to_dict(p) for p in world.planets],
        "fleets": [_fleet_to_dict(f) for f in world.fleets],
        "accounts": {f.value: _account_to_dict(a) for f, a in world.accounts.items()},
        "pending_conquests": [
            {"planet_id": c.planet_id, "claimant": c.claimant.value, "turns_remaining": c.turns_remaining}
            for c in world.pending_conquests
        ],
        "pending_battle": _battle_to_dict(world.pending_battle),
        "pending_retreat": _retreat_to_dict(world.pending_retreat),
        "turn_phase": world.turn_phase.value,
        "completed_builds": [
            {"planet_id": b.planet_id, "ship": _ship_to_dict(b.ship)} for b in world.completed_builds
        ],
        "arrivals": [_fleet_to_dict(f) for f in world.arrivals],
        "attack_log": [
            {"turn": r.turn, "planet_id": r.planet_id, "attacker": r.attacker.value}
            for r in world.attack_log
        ],
        "events": list(world.events),
        "command_errors": list(world.command_errors),
        "winner": _owner(world.winner),
        "id_counters": dict(world.id_counters),
    }


# =============================================================================
# DESERIALIZATION
# =============================================================================


def _ship_from_dict(data: dict[str, Any]) -> Ship:
    return Ship(
        id=data["id"],
        kind=data["kind"],
        hit_points=data["hit_points"],
        owner=data["owner"],
    )


def _planet_from_dict(data: dict[str, Any]) -> Planet:
    return Planet(
        id=data["id"],
        name=data["name"],
        x=data["x"],
        y=data["y"],
        size=data["size"],
        owner=parse_owner(data["owner"]),
        population=data["population"],
        max_population=data["max_population"],
        yields=Resources(**data["yields"]),
        ships=[_ship_from_dict(s) for s in data.get("ships", [])],
        build_queue=[BuildQueueEntry(**e) for e in data.get("build_queue", [])],
        contested_by=parse_owner(data.get("contested_by")),
    )


def _fleet_from_dict(data: dict[str, Any]) -> Fleet:
    return Fleet(
        id=data["id"],
        owner=data["owner"],
        ships=[_ship_from_dict(s) for s in data["ships"]],
        source_id=data["source_id"],
        destination_id=data["destination_id"],
        turns_remaining=data["turns_remaining"],
        total_turns=data["total_turns"],
    )


def _battle_from_dict(data: Optional[dict[str, Any]]) -> Optional[PendingBattle]:
    if data is None:
        return None
    return PendingBattle(
        planet_id=data["planet_id"],
        attacker=data["attacker"],
        incoming=[_ship_from_dict(s) for s in data.get("incoming", [])],
        is_defending=data.get("is_defending", False),
        source_id=data.get("source_id"),
    )


def _retreat_from_dict(data: Optional[dict[str, Any]]) -> Optional[PendingRetreat]:
    if data is None:
        return None
    return PendingRetreat(
        faction=data["faction"],
        ships=[_ship_from_dict(s) for s in data["ships"]],
        from_planet_id=data["from_planet_id"],
        candidates=list(data["candidates"]),
    )


def world_from_dict(data: dict[str, Any]) -> World:
    """Rebuild a World from world_to_dict() output.

    Raises:
        ValueError: If the data is malformed
    """
    try:
        accounts = {
            Faction(name): FactionAccount(faction=Faction(name), **values)
            for name, values in data["accounts"].items()
        }
        return World(
            map_seed=data["map_seed"],
            turn=data["turn"],
            map_size=data["map_size"],
            difficulty=data.get("difficulty", "medium"),
            width=data["width"],
            height=data["height"],
            human_faction=parse_owner(data.get("human_faction")),
            planets=[_planet_from_dict(p) for p in data["planets"]],
            fleets=[_fleet_from_dict(f) for f in data.get("fleets", [])],
            accounts=accounts,
            pending_conquests=[PendingConquest(**c) for c in data.get("pending_conquests", [])],
            pending_battle=_battle_from_dict(data.get("pending_battle")),
            pending_retreat=_retreat_from_dict(data.get("pending_retreat")),
            turn_phase=TurnPhase(data.get("turn_phase", TurnPhase.IDLE.value)),
            completed_builds=[
                CompletedBuild(planet_id=b["planet_id"], ship=_ship_from_dict(b["ship"]))
                for b in data.get("completed_builds", [])
            ],
            arrivals=[_fleet_from_dict(f) for f in data.get("arrivals", [])],
            attack_log=[AttackRecord(**r) for r in data.get("attack_log", [])],
            events=list(data.get("events", [])),
            command_errors=list(data.get("command_errors", [])),
            winner=parse_owner(data.get("winner")),
            id_counters=dict(data.get("id_counters", {})),
        )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed world data: {e}") from e
