"""Weighted random selection over threat actors and assets.

Any item without an explicit probability is given ``1/n``, where ``n`` is the
number of candidates left after filtering. If the resulting probabilities do
not sum to 1 they are divided by their sum. Normalisation is recomputed on
every call because filtering by game progress changes the candidate set.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence, TypeVar

from invest_or_defend.engine.randomness import RandomSource
from invest_or_defend.errors import ConfigurationError

logger = logging.getLogger(__name__)


class Weighted(Protocol):
    probability: Optional[float]


T = TypeVar("T", bound=Weighted)


def filter_by_progress(items: Sequence[T], progress: Optional[float]) -> list[T]:
    """Drop items whose ``include_from`` is set and above ``progress``.

    Items without an ``include_from`` attribute are always kept. A None
    progress disables filtering.
    """
    if progress is None:
        return list(items)
    return [
        item for item in items
        if not getattr(item, "include_from", None) or item.include_from <= progress
    ]


def normalised_probabilities(items: Sequence[Weighted]) -> list[float]:
    """Effective selection probability of each item, summing to 1.

    Raises:
        ConfigurationError: If there are no items or all weights are zero
    """
    if not items:
        raise ConfigurationError("Cannot select from an empty candidate set")

    default = 1.0 / len(items)
    probabilities = [
        item.probability if item.probability is not None else default
        for item in items
    ]

    total = sum(probabilities)
    if total <= 0.0:
        raise ConfigurationError("Candidate probabilities sum to zero")
    if total != 1.0:
        logger.debug(f"Probabilities sum to {total}, normalising {len(items)} values")
        probabilities = [p / total for p in probabilities]

    return probabilities


def select_weighted(
    items: Sequence[T],
    rng: RandomSource,
    progress: Optional[float] = None,
) -> T:
    """Select one item at random according to its probability.

    Draws ``r`` in [0, 1) and returns the first item, in the given order, at
    which the running sum of probabilities reaches ``r``. Items with zero
    probability are never returned. If rounding leaves the total just under
    ``r``, the last item with a non-zero probability is returned.

    Args:
        items: Candidates, each with an optional ``probability``
        rng: Random source
        progress: Game progress used to filter on ``include_from``

    Raises:
        ConfigurationError: If no candidate survives filtering
    """
    candidates = filter_by_progress(items, progress)
    if not candidates:
        raise ConfigurationError(f"No candidates available at game progress {progress}")

    probabilities = normalised_probabilities(candidates)
    r = rng.random()

    running = 0.0
    fallback = None
    for item, probability in zip(candidates, probabilities):
        if probability <= 0.0:
            continue
        running += probability
        fallback = item
        if running >= r:
            return item

    return fallback
