"""Resource bundle shared by costs, yields and stockpiles."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Resources:
    """Amounts of the three resource kinds."""

    energy: int = 0
    minerals: int = 0
    food: int = 0

    def __post_init__(self):
        """Validate resource amounts."""
        if self.energy < 0 or self.minerals < 0 or self.food < 0:
            raise ValueError(f"Invalid resources: {self} (amounts must be >= 0)")

    @property
    def total(self) -> int:
        return self.energy + self.minerals + self.food

    def scaled_down(self, rate: float) -> "Resources":
        """Return each amount multiplied by ``rate`` and floored."""
        return Resources(
            energy=math.floor(self.energy * rate),
            minerals=math.floor(self.minerals * rate),
            food=math.floor(self.food * rate),
        )

    def to_dict(self) -> dict[str, int]:
        return {"energy": self.energy, "minerals": self.minerals, "food": self.food}
