"""Random draws used by the simulation.

Every draw is derived from a single ``random()`` call on the injected source,
so tests can script a simulation with a plain list of floats in [0, 1).
A ``random.Random`` instance satisfies the protocol.
"""

from __future__ import annotations

import math
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with a ``random()`` method returning a float in [0, 1)."""

    def random(self) -> float: ...


def draw_int(rng: RandomSource, low: int, high: int) -> int:
    """Draw an integer uniformly from [low, high], both inclusive.

    Examples:
        >>> class Fixed:
        ...     def __init__(self, r): self.r = r
        ...     def random(self): return self.r
        >>> draw_int(Fixed(0.0), 1, 3)
        1
        >>> draw_int(Fixed(0.999), 1, 3)
        3
    """
    if low > high:
        raise ValueError(f"Empty range [{low}, {high}]")
    return min(low + math.floor(rng.random() * (high - low + 1)), high)


def draw_uniform(rng: RandomSource, low: float, high: float) -> float:
    """Draw a float uniformly from [low, high]."""
    return low + rng.random() * (high - low)


def sample_without_replacement(rng: RandomSource, items: Sequence[T], count: int) -> list[T]:
    """Pick ``count`` distinct items (by position), in draw order.

    Each draw picks uniformly among the items not yet picked. ``count`` is
    capped at ``len(items)``.
    """
    remaining = list(items)
    picked = []
    for _ in range(min(count, len(remaining))):
        index = min(math.floor(rng.random() * len(remaining)), len(remaining) - 1)
        picked.append(remaining.pop(index))
    return picked
