"""Random sources for map layout and gameplay."""

import random
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0.0, 1.0).

    Combat and AI decisions only depend on this single method, so tests can
    inject a fixed sequence and production code can pass ``random.Random()``.
    """

    def random(self) -> float: ...


def uniform(rng: RandomSource, low: float, high: float) -> float:
    """Scale one draw from ``rng`` into [low, high)."""
    return low + (high - low) * rng.random()


def pick(rng: RandomSource, seq: Sequence[T]) -> T:
    """Choose an element of a non-empty sequence uniformly."""
    index = min(int(rng.random() * len(seq)), len(seq) - 1)
    return seq[index]


def default_rng() -> random.Random:
    """Unseeded source used for combat and AI when none is injected."""
    return random.Random()


class GameRNG:
    """Wrapper around Python's random.Random for deterministic map layout.

    Map generation goes through this class so the same seed always produces
    the same galaxy. It is never shared with combat or AI randomness.
    """

    def __init__(self, seed: int | str):
        """Initialize RNG with given seed.

        Args:
            seed: Integer or string seed for deterministic randomness
        """
        self.seed = seed
        self.rng = random.Random(seed)

    def randint(self, a: int, b: int) -> int:
        """Return random integer in range [a, b], inclusive."""
        return self.rng.randint(a, b)

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self.rng.random()

