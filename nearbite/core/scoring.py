"""Hard filters, vibe-dependent scoring and reason tags."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Collection, Dict, Iterable, List

from nearbite.models import Candidate, SearchRequest

HIGH_AFFINITY = 0.18
LOW_AFFINITY = 0.04
LOW_TYPE_FIT = 0.35
REPEAT_PENALTY = 0.25

# Popularity used when nobody in the set reports review counts.
OMITTED_POPULARITY = 0.5
MISSING_POPULARITY = 0.3

MODE_AFFINITY = {
    "lunch": frozenset({"fast_food", "noodle", "korean", "japanese", "cafe", "street_food"}),
    "dinner": frozenset({"bbq", "western", "korean", "chinese", "japanese", "chicken"}),
}

NOISE_SCALE = {"stable": 0.06, "balanced": 0.14, "explore": 0.26}

VIBE_WEIGHTS: Dict[str, Dict[str, float]] = {
    "stable": {"rating": 0.34, "popularity": 0.28, "open": 0.20, "type_fit": 0.12, "novelty": 0.06},
    "balanced": {"popularity": 0.32, "rating": 0.24, "open": 0.16, "type_fit": 0.18, "novelty": 0.10},
    "explore": {"novelty": 0.30, "rarity": 0.30, "type_fit": 0.22, "rating": 0.18},
}

MAX_REASONS = 3
REASON_NEAR = "near"
REASON_TIME_OF_DAY = "fits time of day"
REASON_POPULAR = "popular now"
REASON_OPEN = "open now"
REASON_HIDDEN_GEM = "hidden gem"
REASON_HIGHLY_RATED = "highly rated"


@dataclass(slots=True)
class ScoredCandidate:
    candidate: Candidate
    score: float
    dist_score: float
    mode_score: float
    popularity_score: float


def passes_filters(candidate: Candidate, request: SearchRequest) -> bool:
    if candidate.distance_m > request.radius_m:
        return False
    if candidate.place_id in request.exclude_place_ids:
        return False
    if request.categories and candidate.category not in request.categories:
        return False
    if request.price_levels and candidate.price_level not in request.price_levels:
        return False
    if request.open_now and not candidate.open_now:
        return False
    return True


def filter_candidates(candidates: Iterable[Candidate], request: SearchRequest) -> List[Candidate]:
    return [candidate for candidate in candidates if passes_filters(candidate, request)]


def mode_affinity(mode: str, category: str) -> float:
    return HIGH_AFFINITY if category in MODE_AFFINITY.get(mode, ()) else LOW_AFFINITY


def popularity_scores(candidates: List[Candidate], omitting_sources: Collection[str] = ()) -> List[float]:
    """Log-scaled review counts relative to the busiest candidate in the set.

    Without any review counts in the set, each candidate gets its provider's default.
    """
    max_reviews = max((c.review_count or 0 for c in candidates), default=0)
    scores = []
    for candidate in candidates:
        omitted = candidate.source in omitting_sources
        if max_reviews <= 0 or (candidate.review_count is None and omitted):
            scores.append(OMITTED_POPULARITY if omitted else MISSING_POPULARITY)
            continue
        ratio = math.log1p(candidate.review_count or 0) / math.log1p(max_reviews)
        scores.append(max(0.0, min(ratio, 1.0)))
    return scores


def build_reasons(scored: ScoredCandidate, randomness_level: str) -> List[str]:
    reasons = []
    if scored.dist_score > 0.75:
        reasons.append(REASON_NEAR)
    if scored.mode_score >= HIGH_AFFINITY:
        reasons.append(REASON_TIME_OF_DAY)
    if scored.popularity_score >= 0.7:
        reasons.append(REASON_POPULAR)
    if scored.candidate.open_now:
        reasons.append(REASON_OPEN)
    if randomness_level == "explore" and scored.popularity_score < 0.45:
        reasons.append(REASON_HIDDEN_GEM)
    if scored.candidate.rating >= 4.4:
        reasons.append(REASON_HIGHLY_RATED)
    return reasons[:MAX_REASONS]


def _blend(weights: Dict[str, float], signals: Dict[str, float]) -> float:
    return sum(weight * signals[name] for name, weight in weights.items())


def score_candidates(
    candidates: List[Candidate],
    request: SearchRequest,
    rnd: Callable[[], float],
    omitting_sources: Collection[str] = (),
) -> List[ScoredCandidate]:
    """Score already-filtered candidates and attach reason tags.

    Distance only gates through the radius filter; it feeds the "near" tag but not the score.
    """
    category_counts = Counter(candidate.category for candidate in candidates)
    popularity = popularity_scores(candidates, omitting_sources)
    noise_scale = NOISE_SCALE[request.randomness_level]
    weights = VIBE_WEIGHTS[request.randomness_level]

    scored: List[ScoredCandidate] = []
    for candidate, popularity_score in zip(candidates, popularity):
        mode_score = mode_affinity(request.mode, candidate.category)
        recently_shown = candidate.place_id in request.recently_shown_place_ids
        signals = {
            "rating": candidate.rating / 5,
            "popularity": popularity_score,
            "open": 1.0 if candidate.open_now else 0.0,
            "type_fit": 1.0 if mode_score >= HIGH_AFFINITY else LOW_TYPE_FIT,
            "novelty": 0.0 if recently_shown else 1.0,
            "rarity": 1 / math.sqrt(category_counts[candidate.category]),
        }
        noise = rnd() * noise_scale
        penalty = REPEAT_PENALTY if recently_shown else 0.0

        entry = ScoredCandidate(
            candidate=candidate,
            score=_blend(weights, signals) + noise - penalty,
            dist_score=max(0.0, 1 - candidate.distance_m / request.radius_m),
            mode_score=mode_score,
            popularity_score=popularity_score,
        )
        candidate.why = build_reasons(entry, request.randomness_level)
        scored.append(entry)
    return scored
