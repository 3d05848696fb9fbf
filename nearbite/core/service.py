"""Recommendation pipeline: availability gate, aggregation, scoring and selection."""

from __future__ import annotations

import logging
import time
from typing import List, Optional, Sequence

from nearbite.core.aggregator import aggregate
from nearbite.core.config import Settings, get_settings
from nearbite.core.geo import seeded_rng
from nearbite.core.scoring import filter_candidates, score_candidates
from nearbite.core.selector import select
from nearbite.models import Availability, RecommendationResult, RecommendationStatus, SearchRequest
from nearbite.vendors.base import ProviderAdapter
from nearbite.vendors.google_places import GooglePlacesAdapter
from nearbite.vendors.kakao_local import KakaoLocalAdapter

logger = logging.getLogger(__name__)

UNSUPPORTED_REASON = "Region is currently unsupported."


def get_availability(country_code: Optional[str], settings: Optional[Settings] = None) -> Availability:
    settings = settings or get_settings()
    if not country_code or country_code.strip().upper() not in settings.unsupported_countries:
        return Availability(supported=True)
    return Availability(supported=False, reason=UNSUPPORTED_REASON)


def build_adapters(settings: Settings) -> List[ProviderAdapter]:
    """Adapters in priority order; the regional provider comes first."""
    return [
        KakaoLocalAdapter(
            settings.kakao_api_key,
            timeout_s=settings.provider_timeout_s,
            max_pages=settings.max_pages,
            max_candidates=settings.max_candidates,
            max_query_radius_m=settings.kakao_max_query_radius_m,
            deadline_s=settings.provider_deadline_s,
        ),
        GooglePlacesAdapter(
            settings.google_api_key,
            timeout_s=settings.provider_timeout_s,
            max_pages=settings.max_pages,
            max_candidates=settings.max_candidates,
            page_token_delay_s=settings.page_token_delay_s,
            deadline_s=settings.provider_deadline_s,
        ),
    ]


def get_recommendations(
    request: SearchRequest,
    *,
    adapters: Optional[Sequence[ProviderAdapter]] = None,
    settings: Optional[Settings] = None,
    seed: Optional[str] = None,
) -> RecommendationResult:
    settings = settings or get_settings()
    availability = get_availability(request.country_code, settings)
    if not availability.supported:
        logger.info("Rejecting request for unsupported country=%s", request.country_code)
        return RecommendationResult(
            status=RecommendationStatus.UNSUPPORTED_REGION,
            mode=request.mode,
            message=availability.reason,
        )

    if adapters is None:
        adapters = build_adapters(settings)

    candidates, source_state = aggregate(request, adapters)
    if source_state is RecommendationStatus.SOURCE_ERROR:
        return RecommendationResult(
            status=RecommendationStatus.SOURCE_ERROR,
            mode=request.mode,
            message="Place providers are unavailable right now.",
        )

    filtered = filter_candidates(candidates, request)
    logger.info("Kept %d of %d candidates after filters", len(filtered), len(candidates))

    if seed is None:
        seed = f"{time.time_ns()}_{request.lat}_{request.lng}_{request.mode}"
    rnd = seeded_rng(seed)
    omitting_sources = {adapter.name for adapter in adapters if adapter.omits_popularity}
    scored = score_candidates(filtered, request, rnd, omitting_sources)
    recommendations = select(scored, request.limit, rnd)

    return RecommendationResult(status=RecommendationStatus.OK, mode=request.mode, recommendations=recommendations)
