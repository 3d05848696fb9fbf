"""Client utilities and provider adapter for the Google Places Nearby Search API."""

import logging
import time
from typing import Any, Dict, List, Optional, Set

import requests

from nearbite.etl.transform import GOOGLE_SOURCE, google_result_to_candidate
from nearbite.models import Candidate, FetchResult, SearchRequest
from nearbite.vendors.base import settle

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


def nearby_search(
    lat: float,
    lng: float,
    radius_m: int,
    api_key: str,
    pagetoken: Optional[str] = None,
    open_now: bool = False,
    language: Optional[str] = None,
    timeout: float = 10,
) -> Dict[str, Any]:
    if pagetoken:
        # Follow-up pages are fully described by the token.
        params: Dict[str, Any] = {"pagetoken": pagetoken, "key": api_key}
    else:
        params = {
            "location": f"{lat},{lng}",
            "radius": radius_m,
            "type": "restaurant",
            "key": api_key,
        }
        if open_now:
            params["opennow"] = "true"
        if language:
            params["language"] = language
    response = _SESSION.get(f"{_BASE_URL}/nearbysearch/json", params=params, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    if not isinstance(payload, dict):
        raise GooglePlacesError(f"Unexpected payload: {str(payload)[:200]}")
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.error("nearby_search failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GooglePlacesError(payload.get("error_message") or status)
    return payload


class GooglePlacesAdapter:
    """Paginated radial search. Reports ratings, review counts and opening hours."""

    name = GOOGLE_SOURCE
    omits_popularity = False
    supports_open_now = True

    def __init__(
        self,
        api_key: str,
        *,
        timeout_s: float = 8.0,
        max_pages: int = 3,
        max_candidates: int = 60,
        page_token_delay_s: float = 2.0,
        deadline_s: float = 20.0,
    ) -> None:
        self.api_key = api_key
        self.timeout_s = timeout_s
        self.max_pages = max_pages
        self.max_candidates = max_candidates
        self.page_token_delay_s = page_token_delay_s
        self.deadline_s = deadline_s

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def supports_country(self, country_code: Optional[str]) -> bool:
        return True

    def fetch_candidates(self, request: SearchRequest) -> FetchResult:
        if not self.configured:
            logger.warning("Google Places adapter called without an API key")
            return settle(self.name, [], succeeded=False)

        candidates: List[Candidate] = []
        seen: Set[str] = set()
        page_token = None
        processed_pages = 0
        started = time.monotonic()
        # Localized names and vicinity for Korean origins.
        language = "ko" if request.country_code == "KR" else None

        while processed_pages < self.max_pages:
            try:
                payload = nearby_search(
                    request.lat,
                    request.lng,
                    request.radius_m,
                    self.api_key,
                    pagetoken=page_token,
                    open_now=request.open_now,
                    language=language,
                    timeout=self.timeout_s,
                )
            except (GooglePlacesError, requests.RequestException, ValueError) as exc:
                if processed_pages == 0:
                    logger.error("Google Places first page failed: %s", exc)
                    return settle(self.name, [], succeeded=False)
                logger.warning(
                    "Google Places page %d failed, keeping %d partial results: %s",
                    processed_pages + 1,
                    len(candidates),
                    exc,
                )
                break

            processed_pages += 1
            results = payload.get("results")
            if not isinstance(results, list):
                results = []
            logger.info("Fetched %d Google results on page %d", len(results), processed_pages)

            for result in results:
                candidate = google_result_to_candidate(result, request.origin)
                if candidate is None or candidate.place_id in seen:
                    continue
                seen.add(candidate.place_id)
                candidates.append(candidate)
                if len(candidates) >= self.max_candidates:
                    break

            if len(candidates) >= self.max_candidates:
                logger.info("Google candidate cap of %d reached", self.max_candidates)
                break
            page_token = payload.get("next_page_token")
            if not page_token:
                break
            if time.monotonic() - started + self.page_token_delay_s >= self.deadline_s:
                logger.warning(
                    "Google Places deadline of %.1fs reached after %d pages, keeping %d results",
                    self.deadline_s,
                    processed_pages,
                    len(candidates),
                )
                break
            # The next page token only becomes valid after a short delay.
            time.sleep(self.page_token_delay_s)

        return settle(self.name, candidates, succeeded=True)
