"""Healing, resource collection, population growth and score."""

import logging
import math

from ..models.faction import Faction
from ..models.world import World
from ..utils.constants import (
    FOOD_PER_GROWTH,
    HEAL_RATE,
    SCORE_PER_KILL,
    SCORE_PER_PLANET,
    SCORE_PER_SHIP,
)

logger = logging.getLogger(__name__)


def heal_stationed_ships(world: World) -> int:
    """Repair ships garrisoned at a planet owned by their own faction.

    Each such ship regains 20% of its max hit points, capped at max.

    Returns:
        Number of ships that regained hit points
    """
    healed = 0
    for planet in world.planets:
        if planet.owner is None:
            continue
        for ship in planet.ships_of(planet.owner):
            if ship.hit_points < ship.max_hit_points:
                ship.hit_points = round(
                    min(ship.max_hit_points, ship.hit_points + ship.max_hit_points * HEAL_RATE), 1
                )
                healed += 1
    return healed


def collect_resources(world: World) -> None:
    """Add planet yields to their owners' stockpiles and grow population.

    Population grows by 1 + floor(food_yield / 5) per turn, up to the
    planet's max population.
    """
    for planet in world.planets:
        if planet.owner is None:
            continue
        world.account(planet.owner).deposit(planet.yields)
        growth = 1 + math.floor(planet.yields.food / FOOD_PER_GROWTH)
        planet.population = min(planet.max_population, planet.population + growth)


def calculate_score(world: World, faction: Faction) -> int:
    """Score = 100 x planets + population + 10 x ships + 20 x kills.

    Ships count wherever they are, stationed or in transit.
    """
    planets = world.planets_owned_by(faction)
    population = sum(p.population for p in planets)
    ships = len(world.ships_of(faction))
    kills = world.account(faction).enemy_ships_destroyed
    return (
        SCORE_PER_PLANET * len(planets)
        + population
        + SCORE_PER_SHIP * ships
        + SCORE_PER_KILL * kills
    )
