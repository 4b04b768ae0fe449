"""AI difficulty profiles.

Profiles are pydantic models so that built-in tables and JSON overrides are
validated once, when they are loaded, and are read-only afterwards.
"""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class TargetingStrategy(str, Enum):
    RANDOM = "random"
    NEAREST = "nearest"
    OPTIMAL = "optimal"


class DifficultyProfile(BaseModel):
    """Behavioural parameters of the automated opponent."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    expansion_priority: float = Field(ge=0, le=1, description="Chance to favour colonizers")
    military_priority: float = Field(ge=0, le=1, description="Chance to build warships when threatened")
    aggressiveness: float = Field(ge=0, le=1, description="Chance to move ships each turn")
    build_efficiency: float = Field(ge=0, le=1, description="Chance a planet builds at all")
    targeting_strategy: TargetingStrategy = TargetingStrategy.NEAREST
    fleet_coordination: bool = False
    attack_force_ratio: float = Field(default=0.6, gt=0, le=1)
    escort_size: int = Field(default=2, ge=0)
    overkill_factor: float = Field(default=1.0, ge=0)
    home_defense_ratio: float = Field(default=0.0, ge=0, lt=1)
    counter_attack_enabled: bool = False


DIFFICULTY_PROFILES: dict[str, DifficultyProfile] = {
    "easy": DifficultyProfile(
        expansion_priority=0.3,
        military_priority=0.2,
        aggressiveness=0.2,
        build_efficiency=0.6,
        targeting_strategy=TargetingStrategy.RANDOM,
        fleet_coordination=False,
        attack_force_ratio=0.5,
        escort_size=1,
        overkill_factor=1.0,
        home_defense_ratio=0.2,
        counter_attack_enabled=False,
    ),
    "medium": DifficultyProfile(
        expansion_priority=0.5,
        military_priority=0.5,
        aggressiveness=0.5,
        build_efficiency=0.8,
        targeting_strategy=TargetingStrategy.NEAREST,
        fleet_coordination=True,
        attack_force_ratio=0.6,
        escort_size=2,
        overkill_factor=1.2,
        home_defense_ratio=0.3,
        counter_attack_enabled=True,
    ),
    "hard": DifficultyProfile(
        expansion_priority=0.8,
        military_priority=0.8,
        aggressiveness=0.8,
        build_efficiency=1.0,
        targeting_strategy=TargetingStrategy.OPTIMAL,
        fleet_coordination=True,
        attack_force_ratio=0.7,
        escort_size=3,
        overkill_factor=1.5,
        home_defense_ratio=0.25,
        counter_attack_enabled=True,
    ),
}

DEFAULT_DIFFICULTY = "medium"


def get_difficulty(name: str) -> DifficultyProfile:
    """Look up a built-in profile by name.

    Raises:
        ValueError: If the name is not a known difficulty level
    """
    try:
        return DIFFICULTY_PROFILES[name]
    except KeyError:
        raise ValueError(
            f"Unknown difficulty: {name} (must be one of {', '.join(DIFFICULTY_PROFILES)})"
        ) from None


def load_difficulty_profiles(path: str | Path) -> dict[str, DifficultyProfile]:
    """Load and validate difficulty profiles from a JSON file.

    The file maps level names to parameter objects. Missing levels fall back
    to the built-in table.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If a profile is malformed
    """
    with open(path) as f:
        raw = json.load(f)

    profiles = dict(DIFFICULTY_PROFILES)
    for name, params in raw.items():
        profiles[name] = DifficultyProfile.model_validate(params)
    return profiles
