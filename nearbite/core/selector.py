"""Weighted sampling without replacement with per-category diversity decay."""

from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from nearbite.core.scoring import ScoredCandidate
from nearbite.models import Candidate

logger = logging.getLogger(__name__)

MIN_WEIGHT = 0.01
DIVERSITY_DECAY = 0.9


def weighted_pick(weights: Sequence[float], rnd: Callable[[], float]) -> int:
    """Index drawn with probability proportional to its weight."""
    target = rnd() * sum(weights)
    for index, weight in enumerate(weights):
        target -= weight
        if target <= 0:
            return index
    return len(weights) - 1


def select(scored: Sequence[ScoredCandidate], limit: int, rnd: Callable[[], float]) -> List[Candidate]:
    # Scores are copied so that decay never leaks into the caller's objects.
    pool = sorted(([entry.score, entry.candidate] for entry in scored), key=lambda item: item[0], reverse=True)
    selected: List[Candidate] = []

    while pool and len(selected) < limit:
        index = weighted_pick([max(score, MIN_WEIGHT) for score, _ in pool], rnd)
        _, picked = pool.pop(index)
        selected.append(picked)
        for item in pool:
            if item[1].category == picked.category:
                item[0] *= DIVERSITY_DECAY

    logger.debug("Selected %d of %d scored candidates", len(selected), len(scored))
    return selected
