"""Automated opponent."""

from .strategist import AIStrategist
from .targeting import select_attack_target, select_colonization_target

__all__ = [
    "AIStrategist",
    "select_attack_target",
    "select_colonization_target",
]
