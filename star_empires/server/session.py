"""Game session management for human vs AI gameplay."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Optional

from fastapi import WebSocket

from ..engine.combat import estimate_battle, fleet_power
from ..engine.economy import calculate_score
from ..engine.simulation import Simulation
from ..engine.turn_executor import TurnReport
from ..models.battle import PendingBattle
from ..models.faction import Faction, parse_owner
from ..models.fleet import Fleet
from ..models.planet import Planet
from ..models.ship import Ship

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Manages one game session.

    Wraps a Simulation and the WebSocket connections watching it.
    """

    id: str
    simulation: Simulation
    seed: int
    connections: list[WebSocket] = field(default_factory=list)

    @property
    def world(self):
        return self.simulation.world

    @property
    def status(self) -> str:
        world = self.world
        if world.winner is not None:
            return "game_over"
        if world.pending_battle is not None:
            return "awaiting_battle_decision"
        if world.pending_retreat is not None:
            return "awaiting_retreat_destination"
        return "awaiting_commands"

    @property
    def winner(self) -> Optional[str]:
        return self.world.winner.value if self.world.winner else None

    # =========================================================================
    # STATE VIEW
    # =========================================================================

    def get_state(self) -> dict:
        """Serialize the world for the client."""
        world = self.world
        return {
            "turn": world.turn,
            "status": self.status,
            "winner": self.winner,
            "humanFaction": world.human_faction.value if world.human_faction else None,
            "width": world.width,
            "height": world.height,
            "planets": [self._serialize_planet(p) for p in world.planets],
            "fleets": [self._serialize_fleet(f) for f in world.fleets],
            "accounts": {
                faction.value: {
                    "energy": account.energy,
                    "minerals": account.minerals,
                    "food": account.food,
                    "shipsBuilt": account.ships_built,
                    "enemyShipsDestroyed": account.enemy_ships_destroyed,
                }
                for faction, account in world.accounts.items()
            },
            "pendingConquests": [
                {
                    "planetId": c.planet_id,
                    "claimant": c.claimant.value,
                    "turnsRemaining": c.turns_remaining,
                }
                for c in world.pending_conquests
            ],
            "pendingBattle": self.serialize_battle(world.pending_battle),
            "pendingRetreat": (
                {
                    "fromPlanetId": world.pending_retreat.from_planet_id,
                    "ships": [self._serialize_ship(s) for s in world.pending_retreat.ships],
                    "candidates": list(world.pending_retreat.candidates),
                }
                if world.pending_retreat
                else None
            ),
            "scores": {f.value: calculate_score(world, f) for f in Faction},
        }

    def _serialize_ship(self, ship: Ship) -> dict:
        return {
            "id": ship.id,
            "kind": ship.kind.value,
            "hitPoints": ship.hit_points,
            "maxHitPoints": ship.max_hit_points,
            "owner": ship.owner.value,
        }

    def _serialize_planet(self, planet: Planet) -> dict:
        return {
            "id": planet.id,
            "name": planet.name,
            "x": planet.x,
            "y": planet.y,
            "size": planet.size,
            "owner": planet.owner.value if planet.owner else None,
            "population": planet.population,
            "maxPopulation": planet.max_population,
            "yields": planet.yields.to_dict(),
            "ships": [self._serialize_ship(s) for s in planet.ships],
            "buildQueue": [
                {"id": e.id, "kind": e.kind.value, "turnsRemaining": e.turns_remaining}
                for e in planet.build_queue
            ],
        }

    def _serialize_fleet(self, fleet: Fleet) -> dict:
        return {
            "id": fleet.id,
            "owner": fleet.owner.value,
            "ships": [self._serialize_ship(s) for s in fleet.ships],
            "sourceId": fleet.source_id,
            "destinationId": fleet.destination_id,
            "turnsRemaining": fleet.turns_remaining,
            "totalTurns": fleet.total_turns,
            "eta": self.world.turn + fleet.turns_remaining,
        }

    def serialize_battle(self, battle: Optional[PendingBattle]) -> Optional[dict]:
        """Battle dialog data, with a power forecast for both sides."""
        if battle is None:
            return None
        planet = self.world.get_planet(battle.planet_id)
        incoming_ids = {s.id for s in battle.incoming}
        attackers = list(battle.incoming) + [
            s for s in planet.ships_of(battle.attacker) if s.id not in incoming_ids
        ]
        defenders = planet.hostile_ships(battle.attacker)
        ratio = estimate_battle(attackers, defenders)
        return {
            "planetId": battle.planet_id,
            "planetName": planet.name,
            "attacker": battle.attacker.value,
            "isDefending": battle.is_defending,
            "attackerPower": fleet_power(attackers),
            "defenderPower": fleet_power(defenders),
            "powerRatio": ratio if ratio != float("inf") else None,
            "incoming": [self._serialize_ship(s) for s in battle.incoming],
        }

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def run_command(self, command: Callable[[], bool]) -> tuple[bool, list[str]]:
        """Run a command and collect the errors it recorded."""
        before = len(self.world.command_errors)
        accepted = bool(command())
        return accepted, self.world.command_errors[before:]

    def turn_result(self, report: Optional[TurnReport], errors: list[str]) -> dict:
        if report is None:
            return {"accepted": False, "errors": errors}
        return {
            "accepted": True,
            "turn": report.turn,
            "status": self.status,
            "events": report.events,
            "pendingBattle": self.serialize_battle(report.pending_battle),
            "winner": self.winner,
            "errors": errors,
        }

    def play(self, action: Callable[[], Optional[TurnReport]]) -> dict:
        """Run a turn-advancing action and describe its outcome."""
        before = len(self.world.command_errors)
        report = action()
        return self.turn_result(report, self.world.command_errors[before:])

    async def broadcast(self, message: dict):
        """Send message to all connected WebSocket clients.

        Args:
            message: Dictionary to send as JSON
        """
        disconnected = []
        for ws in self.connections:
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                disconnected.append(ws)

        for ws in disconnected:
            self.connections.remove(ws)

    def add_connection(self, websocket: WebSocket):
        """Add a WebSocket connection to this session."""
        self.connections.append(websocket)
        logger.info(f"WebSocket connected to game {self.id}, total: {len(self.connections)}")

    def remove_connection(self, websocket: WebSocket):
        """Remove a WebSocket connection from this session."""
        if websocket in self.connections:
            self.connections.remove(websocket)
            logger.info(
                f"WebSocket disconnected from game {self.id}, remaining: {len(self.connections)}"
            )


class GameSessionManager:
    """Manages all active game sessions.

    In-memory storage only; sessions are lost on restart.
    """

    def __init__(self):
        self.sessions: dict[str, GameSession] = {}

    def create_session(
        self,
        human_faction: Optional[str] = "player",
        seed: Optional[int] = None,
        map_size: str = "compact",
        difficulty: str = "medium",
    ) -> GameSession:
        """Create a new game session.

        Args:
            human_faction: "player", "enemy", or None for AI vs AI
            seed: Optional map layout seed
            map_size: One of the map sizes
            difficulty: Difficulty of the automated opponent

        Returns:
            Newly created GameSession
        """
        game_id = f"game-{uuid.uuid4().hex[:8]}"
        if seed is None:
            seed = uuid.uuid4().int % (2**32)

        simulation = Simulation.new_game(
            seed=seed,
            map_size=map_size,
            difficulty=difficulty,
            human_faction=parse_owner(human_faction),
        )
        session = GameSession(id=game_id, simulation=simulation, seed=seed)
        self.sessions[game_id] = session

        logger.info(
            f"Created game {game_id}: human={human_faction}, seed={seed}, "
            f"map={map_size}, difficulty={difficulty}"
        )
        return session

    def get(self, game_id: str) -> GameSession | None:
        return self.sessions.get(game_id)

    def delete(self, game_id: str) -> bool:
        """Delete a game session.

        Returns:
            True if deleted, False if not found
        """
        if game_id in self.sessions:
            del self.sessions[game_id]
            logger.info(f"Deleted game {game_id}")
            return True
        return False

    async def cleanup_all(self):
        """Clean up all sessions (called on shutdown)."""
        logger.info(f"Cleaning up {len(self.sessions)} game sessions")
        self.sessions.clear()
