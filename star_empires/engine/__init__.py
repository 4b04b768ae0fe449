"""Game engine components."""

from .combat import CombatResult, estimate_battle, fleet_power, planet_defense, resolve_combat
from .map_generator import generate_world
from .turn_executor import TurnExecutor, TurnReport, TurnStatus

__all__ = [
    "CombatResult",
    "estimate_battle",
    "fleet_power",
    "generate_world",
    "planet_defense",
    "resolve_combat",
    "TurnExecutor",
    "TurnReport",
    "TurnStatus",
]
