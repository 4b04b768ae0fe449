"""Per-faction stockpiles and statistics."""

from dataclasses import dataclass

from ..utils.constants import STARTING_STOCKPILE
from .faction import Faction
from .resources import Resources


@dataclass
class FactionAccount:
    """Resource stockpiles and cumulative statistics for one faction."""

    faction: Faction
    energy: int = STARTING_STOCKPILE
    minerals: int = STARTING_STOCKPILE
    food: int = STARTING_STOCKPILE
    ships_built: int = 0
    enemy_ships_destroyed: int = 0

    def __post_init__(self):
        """Validate account data after initialization."""
        if not isinstance(self.faction, Faction):
            self.faction = Faction(self.faction)
        if self.energy < 0 or self.minerals < 0 or self.food < 0:
            raise ValueError("Stockpiles cannot be negative")

    @property
    def stockpile(self) -> Resources:
        return Resources(energy=self.energy, minerals=self.minerals, food=self.food)

    def can_afford(self, cost: Resources) -> bool:
        return (
            self.energy >= cost.energy
            and self.minerals >= cost.minerals
            and self.food >= cost.food
        )

    def pay(self, cost: Resources) -> None:
        if not self.can_afford(cost):
            raise ValueError(f"{self.faction.value} cannot afford {cost.to_dict()}")
        self.energy -= cost.energy
        self.minerals -= cost.minerals
        self.food -= cost.food

    def deposit(self, amount: Resources) -> None:
        self.energy += amount.energy
        self.minerals += amount.minerals
        self.food += amount.food
