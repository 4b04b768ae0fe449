"""Distance and travel time calculations for the galaxy map."""

import math

from .constants import DISTANCE_PER_SPEED


def euclidean_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Calculate straight-line distance between two points.

    Examples:
        >>> euclidean_distance(0, 0, 3, 4)
        5.0
    """
    return math.hypot(x2 - x1, y2 - y1)


def travel_turns(distance: float, average_speed: float) -> int:
    """Turns needed to cover ``distance`` at ``average_speed``.

    Speed 1.0 covers DISTANCE_PER_SPEED world units per turn. A journey always
    takes at least one turn, including degenerate zero-speed fleets.

    Examples:
        >>> travel_turns(250, 1.0)
        3
        >>> travel_turns(10, 0)
        1
    """
    if average_speed <= 0:
        return 1
    return max(1, math.ceil(distance / (average_speed * DISTANCE_PER_SPEED)))
