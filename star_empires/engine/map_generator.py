"""Galaxy map generation.

Map layout uses its own GameRNG(seed) so the same seed always produces the
same galaxy. This generator is never shared with combat or AI randomness.
"""

import logging
import math
from typing import List, Optional

from ..models.faction import Faction
from ..models.planet import Planet
from ..models.resources import Resources
from ..models.ship import Ship, ShipKind
from ..models.world import World
from ..utils.constants import (
    DEFAULT_MAP_SIZE,
    HOME_POPULATION,
    MAP_PADDING,
    MAP_SIZES,
    MAX_POPULATION_PER_SIZE,
    MIN_PLANET_SPACING,
    PLACEMENT_ATTEMPTS,
    PLANET_NAMES,
    PLANET_SIZE_RANGE,
    RNG_SEED_DEFAULT,
    YIELD_RANGE,
)
from ..utils.distance import euclidean_distance
from ..utils.rng import GameRNG

logger = logging.getLogger(__name__)

# Garrison each faction starts with at its home planet
STARTING_SHIPS = [ShipKind.SCOUT, ShipKind.SCOUT, ShipKind.FRIGATE]


def _place(rng: GameRNG, width: int, height: int, placed: List[Planet]) -> tuple[float, float]:
    """Pick a position at least MIN_PLANET_SPACING away from placed planets.

    Gives up after PLACEMENT_ATTEMPTS tries and keeps the last position.
    """
    x = y = 0.0
    for _ in range(PLACEMENT_ATTEMPTS):
        x = MAP_PADDING + rng.random() * (width - MAP_PADDING * 2)
        y = MAP_PADDING + rng.random() * (height - MAP_PADDING * 2)
        if all(euclidean_distance(x, y, p.x, p.y) >= MIN_PLANET_SPACING for p in placed):
            break
    return x, y


def _random_yields(rng: GameRNG) -> Resources:
    low, high = YIELD_RANGE
    return Resources(
        energy=rng.randint(low, high),
        minerals=rng.randint(low, high),
        food=rng.randint(low, high),
    )


def _settle_home(world: World, planet: Planet, faction: Faction) -> None:
    planet.owner = faction
    planet.population = HOME_POPULATION
    planet.ships = [
        Ship(id=world.next_id("s"), kind=kind, hit_points=kind.stats.max_hit_points, owner=faction)
        for kind in STARTING_SHIPS
    ]


def generate_world(
    seed: int | str = RNG_SEED_DEFAULT,
    map_size: str = DEFAULT_MAP_SIZE,
    difficulty: str = "medium",
    human_faction: Optional[Faction] = Faction.PLAYER,
) -> World:
    """Generate a new game world.

    Algorithm:
    1. Place N planets (N from the map size) inside the padded map, keeping
       them at least 200 units apart when possible
    2. Roll size 20-45, max population floor(size * 4) and yields 5-14 for
       each resource
    3. The first planet becomes the player's home, the last the enemy's;
       each starts with population 50 and two scouts plus a frigate

    Args:
        seed: Map layout seed
        map_size: One of the MAP_SIZES keys
        difficulty: Difficulty level of the automated opponent(s)
        human_faction: Faction directed by the caller, None for AI-vs-AI

    Returns:
        A fresh World on turn 1
    """
    if map_size not in MAP_SIZES:
        raise ValueError(f"Invalid map_size: {map_size} (must be one of {', '.join(MAP_SIZES)})")

    config = MAP_SIZES[map_size]
    rng = GameRNG(seed)
    world = World(
        map_seed=seed,
        map_size=map_size,
        difficulty=difficulty,
        width=config["width"],
        height=config["height"],
        human_faction=human_faction,
    )

    low, high = PLANET_SIZE_RANGE
    for i in range(config["planets"]):
        x, y = _place(rng, world.width, world.height, world.planets)
        size = low + rng.random() * (high - low)
        world.planets.append(
            Planet(
                id=i,
                name=PLANET_NAMES[i] if i < len(PLANET_NAMES) else f"Planet-{i}",
                x=x,
                y=y,
                size=size,
                owner=None,
                population=0,
                max_population=math.floor(size * MAX_POPULATION_PER_SIZE),
                yields=_random_yields(rng),
            )
        )

    _settle_home(world, world.planets[0], Faction.PLAYER)
    _settle_home(world, world.planets[-1], Faction.ENEMY)

    logger.info(
        f"Generated {map_size} map with {len(world.planets)} planets (seed={seed})"
    )
    return world
