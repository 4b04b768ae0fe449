"""Game session facade.

Simulation is the caller of the engine: it owns a World, a TurnExecutor and
one AIStrategist per automated faction. It exposes the player commands,
hands off to the AI and the victory check once a turn completes, and
produces snapshots. No exception crosses its command methods: invalid
commands return False (or None for turn reports).
"""

import logging
from typing import Any, Optional

from ..ai.strategist import AIStrategist
from ..models.battle import BattleDecision
from ..models.difficulty import DIFFICULTY_PROFILES, DifficultyProfile
from ..models.faction import Faction
from ..models.ship import ShipKind
from ..models.world import World
from ..utils.constants import DEFAULT_MAP_SIZE, RNG_SEED_DEFAULT
from ..utils.rng import RandomSource
from ..utils.serialization import world_from_dict, world_to_dict
from .economy import calculate_score
from .map_generator import generate_world
from .movement import send_fleet
from .production import cancel_build, issue_build
from .turn_executor import TurnExecutor, TurnReport, TurnStatus
from .victory import check_victory

logger = logging.getLogger(__name__)


class Simulation:
    """A single game in progress."""

    def __init__(
        self,
        world: World,
        rng: Optional[RandomSource] = None,
        ai_rng: Optional[RandomSource] = None,
        profiles: Optional[dict[str, DifficultyProfile]] = None,
    ):
        """Wrap an existing world.

        Args:
            world: World to run
            rng: Random source for battles
            ai_rng: Random source for AI decisions
            profiles: Difficulty table (built-in profiles if omitted)

        Raises:
            ValueError: If world.difficulty is not in the profile table
        """
        profiles = profiles if profiles is not None else DIFFICULTY_PROFILES
        if world.difficulty not in profiles:
            raise ValueError(
                f"Unknown difficulty: {world.difficulty} (must be one of {', '.join(profiles)})"
            )

        self.world = world
        self.executor = TurnExecutor(rng)
        self.strategists = [
            AIStrategist(faction, profiles[world.difficulty], ai_rng)
            for faction in Faction
            if not world.is_human(faction)
        ]

    @classmethod
    def new_game(
        cls,
        seed: int | str = RNG_SEED_DEFAULT,
        map_size: str = DEFAULT_MAP_SIZE,
        difficulty: str = "medium",
        human_faction: Optional[Faction] = Faction.PLAYER,
        rng: Optional[RandomSource] = None,
        ai_rng: Optional[RandomSource] = None,
        profiles: Optional[dict[str, DifficultyProfile]] = None,
    ) -> "Simulation":
        """Generate a fresh map and start a game on it."""
        world = generate_world(seed, map_size, difficulty, human_faction)
        return cls(world, rng=rng, ai_rng=ai_rng, profiles=profiles)

    @classmethod
    def from_snapshot(cls, data: dict[str, Any], **kwargs) -> "Simulation":
        """Restore a game, paused turns included, from snapshot() output."""
        return cls(world_from_dict(data), **kwargs)

    @property
    def game_over(self) -> bool:
        return self.world.winner is not None

    def _commander(self, faction: Optional[Faction]) -> Optional[Faction]:
        return Faction(faction) if faction is not None else self.world.human_faction

    def _reject(self, message: str) -> bool:
        logger.warning(f"Rejected command: {message}")
        self.world.command_errors.append(message)
        return False

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def issue_build(
        self, planet_id: int, kind: ShipKind | str, faction: Optional[Faction] = None
    ) -> bool:
        """Queue a ship. ``faction`` defaults to the human faction."""
        faction = self._commander(faction)
        if faction is None or self.game_over:
            return self._reject("No faction can issue commands")
        return issue_build(self.world, planet_id, kind, faction) is not None

    def cancel_build(
        self, planet_id: int, entry_id: str, faction: Optional[Faction] = None
    ) -> bool:
        """Cancel a queued ship for a 50% refund."""
        faction = self._commander(faction)
        if faction is None or self.game_over:
            return self._reject("No faction can issue commands")
        return cancel_build(self.world, planet_id, entry_id, faction)

    def send_fleet(
        self,
        source_id: int,
        ship_ids: list[str],
        destination_id: int,
        faction: Optional[Faction] = None,
    ) -> bool:
        """Dispatch ships from one planet to another."""
        faction = self._commander(faction)
        if faction is None or self.game_over:
            return self._reject("No faction can issue commands")
        return send_fleet(self.world, source_id, ship_ids, destination_id, faction) is not None

    def advance_turn(self) -> TurnReport:
        """Run the next turn; when it completes, run the AI and the victory check."""
        if self.game_over:
            logger.warning("Game is over; advance ignored")
            return TurnReport(turn=self.world.turn, status=TurnStatus.COMPLETED)
        return self._finish(self.executor.advance_turn(self.world))

    def submit_battle_decision(self, decision: BattleDecision | str) -> Optional[TurnReport]:
        """Fight or withdraw the pending battle and resume the turn.

        Returns:
            TurnReport after resuming, or None if the decision was rejected
        """
        try:
            decision = BattleDecision(decision)
        except ValueError:
            self._reject(f"Unknown battle decision: {decision}")
            return None
        report = self.executor.submit_battle_decision(self.world, decision)
        return self._finish(report) if report is not None else None

    def submit_retreat_destination(self, planet_id: int) -> Optional[TurnReport]:
        """Choose where withdrawn ships go and resume the turn."""
        report = self.executor.submit_retreat_destination(self.world, planet_id)
        return self._finish(report) if report is not None else None

    def _finish(self, report: TurnReport) -> TurnReport:
        if not report.completed:
            return report

        for strategist in self.strategists:
            strategist.take_turn(self.world)
        check_victory(self.world)

        report.events = list(self.world.events)
        return report

    # =========================================================================
    # QUERIES
    # =========================================================================

    def score(self, faction: Faction) -> int:
        return calculate_score(self.world, Faction(faction))

    def scores(self) -> dict[str, int]:
        return {faction.value: self.score(faction) for faction in Faction}

    def snapshot(self) -> dict[str, Any]:
        """Full JSON-compatible world snapshot."""
        return world_to_dict(self.world)
