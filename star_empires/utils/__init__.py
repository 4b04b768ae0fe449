"""Utility functions and constants for Star Empires."""

from .constants import (
    CONQUEST_TURNS,
    HEAL_RATE,
    MAP_SIZES,
    MAX_COMBAT_ROUNDS,
    RNG_SEED_DEFAULT,
    STARTING_STOCKPILE,
)
from .distance import euclidean_distance, travel_turns
from .rng import GameRNG, RandomSource, default_rng, pick, uniform

__all__ = [
    "CONQUEST_TURNS",
    "HEAL_RATE",
    "MAP_SIZES",
    "MAX_COMBAT_ROUNDS",
    "RNG_SEED_DEFAULT",
    "STARTING_STOCKPILE",
    "euclidean_distance",
    "travel_turns",
    "GameRNG",
    "RandomSource",
    "default_rng",
    "pick",
    "uniform",
]
