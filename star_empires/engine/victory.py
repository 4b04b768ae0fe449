"""Victory condition checking.

A faction is eliminated when it owns zero planets and has no colonizer
anywhere, stationed or in transit. The other faction is declared the winner.
If both are eliminated at once the human faction is checked first, so the
automated opponent is credited with the win.
"""

import logging
from typing import Optional

from ..models.faction import Faction
from ..models.world import World

logger = logging.getLogger(__name__)


def is_eliminated(world: World, faction: Faction) -> bool:
    return not world.planets_owned_by(faction) and not world.has_colonizer(faction)


def check_victory(world: World) -> Optional[Faction]:
    """Check whether a faction has been eliminated.

    Sets world.winner when the game is over.

    Args:
        world: Current world state

    Returns:
        The winning faction, or None if the game continues
    """
    if world.winner is not None:
        return world.winner

    order = list(Faction)
    if world.human_faction is not None:
        order.remove(world.human_faction)
        order.insert(0, world.human_faction)

    for faction in order:
        if is_eliminated(world, faction):
            world.winner = faction.opponent
            world.record_event("victory", winner=world.winner.value, turn_ended=world.turn)
            logger.info(f"{world.winner.value} wins on turn {world.turn}")
            return world.winner
    return None
