"""Client utilities and provider adapter for the Kakao Local category search API."""

from __future__ import annotations

import logging
import math
import time
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import requests

from nearbite.core.geo import offset
from nearbite.etl.transform import KAKAO_SOURCE, kakao_document_to_candidate
from nearbite.models import Candidate, Coordinate, FetchResult, SearchRequest
from nearbite.vendors.base import settle

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://dapi.kakao.com/v2/local/search"

RESTAURANT_GROUP = "FD6"
CAFE_GROUP = "CE7"
PAGE_SIZE = 15
MAX_API_RADIUS_M = 20000
RING_CENTERS = 8
RING_DISTANCE_RATIO = 0.6
SUPPORTED_COUNTRIES = {"KR"}


class KakaoLocalError(RuntimeError):
    """Raised when the Kakao Local API returns an unusable response."""


def category_search(
    lat: float,
    lng: float,
    radius_m: int,
    api_key: str,
    category_group_code: str = RESTAURANT_GROUP,
    page: int = 1,
    timeout: float = 10,
) -> Dict[str, Any]:
    params = {
        "category_group_code": category_group_code,
        "x": f"{lng}",
        "y": f"{lat}",
        "radius": min(int(radius_m), MAX_API_RADIUS_M),
        "page": page,
        "size": PAGE_SIZE,
        "sort": "distance",
    }
    headers = {"Authorization": f"KakaoAK {api_key}"}
    response = _SESSION.get(f"{_BASE_URL}/category.json", params=params, headers=headers, timeout=timeout)
    if response.status_code >= 400:
        message = response.text[:200]
        logger.error("category_search failed: status=%s, body=%s", response.status_code, message)
        raise KakaoLocalError(f"HTTP {response.status_code}: {message}")
    payload = response.json()
    if not isinstance(payload, dict) or not isinstance(payload.get("documents"), list):
        raise KakaoLocalError(f"Unexpected payload: {str(payload)[:200]}")
    return payload


def fan_out_centers(origin: Coordinate, radius_m: int, max_query_radius_m: int) -> List[Tuple[Coordinate, int]]:
    """Query centers (and their radii) approximating a search wider than one query allows."""
    if radius_m <= max_query_radius_m:
        return [(origin, radius_m)]

    ring_distance = radius_m * RING_DISTANCE_RATIO
    ring_radius = min(max_query_radius_m, math.ceil(radius_m / 2))
    centers = [(origin, max_query_radius_m)]
    for index in range(RING_CENTERS):
        bearing = index * 2 * math.pi / RING_CENTERS
        centers.append((offset(origin, bearing, ring_distance), ring_radius))
    return centers


class KakaoLocalAdapter:
    """Category search for the Korean market. No opening hours, ratings or review counts."""

    name = KAKAO_SOURCE
    omits_popularity = True
    supports_open_now = False

    def __init__(
        self,
        api_key: str,
        *,
        timeout_s: float = 8.0,
        max_pages: int = 3,
        max_candidates: int = 60,
        max_query_radius_m: int = 1000,
        deadline_s: float = 20.0,
    ) -> None:
        self.api_key = api_key
        self.timeout_s = timeout_s
        self.max_pages = max_pages
        self.max_candidates = max_candidates
        self.max_query_radius_m = max_query_radius_m
        self.deadline_s = deadline_s

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def supports_country(self, country_code: Optional[str]) -> bool:
        return country_code in SUPPORTED_COUNTRIES

    def _group_codes(self, request: SearchRequest) -> List[str]:
        if request.categories and "cafe" not in request.categories:
            return [RESTAURANT_GROUP]
        return [RESTAURANT_GROUP, CAFE_GROUP]

    def _pages(self, request: SearchRequest) -> Iterator[Dict[str, Any]]:
        centers = fan_out_centers(request.origin, request.radius_m, self.max_query_radius_m)
        if len(centers) > 1:
            logger.info("Fanning Kakao search out to %d centers for radius=%d", len(centers), request.radius_m)
        for center, radius in centers:
            for group_code in self._group_codes(request):
                for page in range(1, self.max_pages + 1):
                    payload = category_search(
                        center.lat,
                        center.lng,
                        radius,
                        self.api_key,
                        category_group_code=group_code,
                        page=page,
                        timeout=self.timeout_s,
                    )
                    yield payload
                    if (payload.get("meta") or {}).get("is_end", True):
                        break

    def fetch_candidates(self, request: SearchRequest) -> FetchResult:
        if not self.configured:
            logger.warning("Kakao Local adapter called without an API key")
            return settle(self.name, [], succeeded=False)

        candidates: List[Candidate] = []
        seen: Set[str] = set()
        processed_pages = 0
        started = time.monotonic()

        try:
            for payload in self._pages(request):
                processed_pages += 1
                for document in payload["documents"]:
                    # Distance is measured from the true origin, not from the fan-out center.
                    candidate = kakao_document_to_candidate(document, request.origin)
                    if candidate is None or candidate.place_id in seen:
                        continue
                    seen.add(candidate.place_id)
                    candidates.append(candidate)
                    if len(candidates) >= self.max_candidates:
                        break
                if len(candidates) >= self.max_candidates:
                    logger.info("Kakao candidate cap of %d reached", self.max_candidates)
                    break
                if time.monotonic() - started >= self.deadline_s:
                    logger.warning(
                        "Kakao Local deadline of %.1fs passed after %d pages, keeping %d results",
                        self.deadline_s,
                        processed_pages,
                        len(candidates),
                    )
                    break
        except (KakaoLocalError, requests.RequestException, ValueError) as exc:
            if processed_pages == 0:
                logger.error("Kakao Local first page failed: %s", exc)
                return settle(self.name, [], succeeded=False)
            logger.warning(
                "Kakao Local page %d failed, keeping %d partial results: %s",
                processed_pages + 1,
                len(candidates),
                exc,
            )

        logger.info("Fetched %d Kakao candidates over %d pages", len(candidates), processed_pages)
        return settle(self.name, candidates, succeeded=True)
