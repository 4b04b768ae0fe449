"""Data models for Star Empires."""

from .account import FactionAccount
from .battle import BattleDecision, PendingBattle, PendingRetreat
from .conquest import AttackRecord, PendingConquest
from .difficulty import DIFFICULTY_PROFILES, DifficultyProfile, TargetingStrategy
from .faction import Faction
from .fleet import Fleet
from .planet import BuildQueueEntry, Planet
from .resources import Resources
from .ship import MILITARY_KINDS, SHIP_STATS, Ship, ShipKind, ShipStats
from .world import CompletedBuild, TurnPhase, World

__all__ = [
    "AttackRecord",
    "BattleDecision",
    "BuildQueueEntry",
    "CompletedBuild",
    "DIFFICULTY_PROFILES",
    "DifficultyProfile",
    "Faction",
    "FactionAccount",
    "Fleet",
    "MILITARY_KINDS",
    "PendingBattle",
    "PendingConquest",
    "PendingRetreat",
    "Planet",
    "Resources",
    "SHIP_STATS",
    "Ship",
    "ShipKind",
    "ShipStats",
    "TargetingStrategy",
    "TurnPhase",
    "World",
]
