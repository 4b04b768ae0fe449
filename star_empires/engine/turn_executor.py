"""Main turn execution orchestrator.

This module coordinates the turn phases in the correct order:
1. Turn counter increment
2. Build-queue progression (BUILD), then placement of the completed ships
   with build-completion contests (BUILD_QUEUE)
3. Fleet travel (TRAVEL), then arrival handling one fleet at a time
   (ARRIVAL_QUEUE)
4. Healing of ships stationed at their own faction's planets (HEAL)
5. Resource collection and population growth (COLLECT)
6. Conquest tick (CONQUEST)
7. Territory neutralization (NEUTRALIZE)

The AI Strategist and the victory check run after a turn completes; that
hand-off belongs to the caller (see engine.simulation).

Architecture:
Each phase is an independent method. The phase cursor (world.turn_phase) and
the work queues (world.completed_builds, world.arrivals) live in the World,
so a turn that pauses for a battle decision can be snapshotted, restored and
resumed. A turn only pauses inside the two queue phases, between items.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from ..models.battle import BattleDecision, PendingBattle
from ..models.world import CompletedBuild, TurnPhase, World
from ..utils.rng import RandomSource, default_rng
from .battles import (
    handle_arrival,
    handle_build_contest,
    resolve_battle_decision,
    resolve_retreat_destination,
)
from .conquest import process_pending_conquests, process_territory
from .economy import collect_resources, heal_stationed_ships
from .movement import process_fleet_travel
from .production import place_completed_build, progress_build_queues

logger = logging.getLogger(__name__)


class TurnStatus(str, Enum):
    COMPLETED = "completed"
    AWAITING_BATTLE_DECISION = "awaiting_battle_decision"
    AWAITING_RETREAT_DESTINATION = "awaiting_retreat_destination"


@dataclass
class TurnReport:
    """Outcome of an advance or resume call.

    Attributes:
        turn: Turn number being processed
        status: COMPLETED, or the decision the turn is waiting for
        events: Events recorded so far during this turn
        pending_battle: The battle awaiting a decision, if any
    """

    turn: int
    status: TurnStatus
    events: list[dict[str, Any]] = field(default_factory=list)
    pending_battle: Optional[PendingBattle] = None

    @property
    def completed(self) -> bool:
        return self.status is TurnStatus.COMPLETED


_NEXT_PHASE = {
    TurnPhase.BUILD: TurnPhase.BUILD_QUEUE,
    TurnPhase.BUILD_QUEUE: TurnPhase.TRAVEL,
    TurnPhase.TRAVEL: TurnPhase.ARRIVAL_QUEUE,
    TurnPhase.ARRIVAL_QUEUE: TurnPhase.HEAL,
    TurnPhase.HEAL: TurnPhase.COLLECT,
    TurnPhase.COLLECT: TurnPhase.CONQUEST,
    TurnPhase.CONQUEST: TurnPhase.NEUTRALIZE,
    TurnPhase.NEUTRALIZE: TurnPhase.IDLE,
}


class TurnExecutor:
    """Orchestrates the turn phases in the correct order.

    Each phase is an independent method that can be tested separately. The
    orchestration methods walk the phase cursor stored in the World.
    """

    def __init__(self, rng: Optional[RandomSource] = None):
        """Initialize the executor.

        Args:
            rng: Random source for battles (unseeded random.Random() if omitted)
        """
        self.rng = rng if rng is not None else default_rng()
        self._handlers: dict[TurnPhase, Callable[[World], None]] = {
            TurnPhase.BUILD: self.execute_phase_build,
            TurnPhase.BUILD_QUEUE: self.execute_phase_build_queue,
            TurnPhase.TRAVEL: self.execute_phase_travel,
            TurnPhase.ARRIVAL_QUEUE: self.execute_phase_arrivals,
            TurnPhase.HEAL: self.execute_phase_heal,
            TurnPhase.COLLECT: self.execute_phase_collect,
            TurnPhase.CONQUEST: self.execute_phase_conquest,
            TurnPhase.NEUTRALIZE: self.execute_phase_neutralize,
        }

    # =========================================================================
    # INDEPENDENT PHASE METHODS
    # =========================================================================

    def execute_phase_build(self, world: World) -> list[CompletedBuild]:
        """Count down build queues and queue the completed ships for placement."""
        return progress_build_queues(world)

    def execute_phase_build_queue(self, world: World) -> None:
        """Place completed ships one at a time.

        A ship completed at a planet that garrisons opposing ships must fight
        them. Stops early when that raises a PendingBattle.
        """
        while world.completed_builds and not world.awaiting_decision:
            build = world.completed_builds.pop(0)
            planet = place_completed_build(world, build)
            if planet is not None:
                handle_build_contest(world, planet, self.rng)

    def execute_phase_travel(self, world: World) -> None:
        """Move every fleet one turn and queue the arrivals."""
        process_fleet_travel(world)

    def execute_phase_arrivals(self, world: World) -> None:
        """Handle arriving fleets in order. Stops early on a PendingBattle."""
        while world.arrivals and not world.awaiting_decision:
            fleet = world.arrivals.pop(0)
            handle_arrival(world, fleet, self.rng)

    def execute_phase_heal(self, world: World) -> None:
        healed = heal_stationed_ships(world)
        logger.debug(f"Turn {world.turn}: {healed} ships repaired")

    def execute_phase_collect(self, world: World) -> None:
        collect_resources(world)

    def execute_phase_conquest(self, world: World) -> None:
        """Tick pending conquests and record the outcomes as events."""
        for event in process_pending_conquests(world):
            world.record_event(
                "conquest",
                planet_id=event.planet_id,
                planet_name=event.planet_name,
                claimant=event.claimant.value,
                outcome=event.outcome,
                previous_owner=event.previous_owner.value if event.previous_owner else None,
            )

    def execute_phase_neutralize(self, world: World) -> None:
        """Neutralize lost and abandoned planets and record the outcomes."""
        for event in process_territory(world):
            world.record_event(
                "neutralized",
                planet_id=event.planet_id,
                planet_name=event.planet_name,
                previous_owner=event.previous_owner.value,
                reason=event.reason,
            )

    # =========================================================================
    # ORCHESTRATION METHODS
    # =========================================================================

    def advance_turn(self, world: World) -> TurnReport:
        """Start the next turn and run it until it completes or pauses.

        If a decision is pending the world is left untouched and the report
        repeats the pending status. A turn interrupted by a restore (cursor
        not IDLE) is resumed instead of starting a new one.

        Args:
            world: Current world state

        Returns:
            TurnReport with the final or paused status
        """
        if world.awaiting_decision:
            logger.warning(f"Turn {world.turn} is waiting for a decision; advance ignored")
            return self._report(world)

        if world.turn_phase is TurnPhase.IDLE:
            world.turn += 1
            world.events = []
            world.command_errors = []
            world.turn_phase = TurnPhase.BUILD
            logger.info(f"Turn {world.turn} started")

        return self._run(world)

    def submit_battle_decision(
        self, world: World, decision: BattleDecision | str
    ) -> Optional[TurnReport]:
        """Resolve the pending battle and resume the turn.

        Returns:
            TurnReport after resuming, or None if no battle was pending
        """
        if not resolve_battle_decision(world, decision, self.rng):
            logger.warning("No battle is awaiting a decision")
            return None
        return self._run(world)

    def submit_retreat_destination(self, world: World, planet_id: int) -> Optional[TurnReport]:
        """Send waiting retreat survivors and resume the turn.

        Returns:
            TurnReport after resuming, or None if the destination was rejected
        """
        if not resolve_retreat_destination(world, planet_id):
            return None
        return self._run(world)

    def _run(self, world: World) -> TurnReport:
        """Walk the phase cursor until the turn completes or pauses."""
        while world.turn_phase is not TurnPhase.IDLE:
            if world.awaiting_decision:
                return self._report(world)
            self._handlers[world.turn_phase](world)
            if world.awaiting_decision:
                return self._report(world)
            world.turn_phase = _NEXT_PHASE[world.turn_phase]

        logger.info(f"Turn {world.turn} complete ({len(world.events)} events)")
        return self._report(world)

    def _report(self, world: World) -> TurnReport:
        if world.pending_battle is not None:
            status = TurnStatus.AWAITING_BATTLE_DECISION
        elif world.pending_retreat is not None:
            status = TurnStatus.AWAITING_RETREAT_DESTINATION
        else:
            status = TurnStatus.COMPLETED
        return TurnReport(
            turn=world.turn,
            status=status,
            events=list(world.events),
            pending_battle=world.pending_battle,
        )
