"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import FrozenSet

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

MIN_PROVIDER_TIMEOUT_MS = 2000
MAX_PROVIDER_TIMEOUT_MS = 20000


@dataclass(frozen=True)
class Settings:
    google_api_key: str = ""
    kakao_api_key: str = ""
    worker_port: int = 9000
    provider_timeout_s: float = 8.0
    max_pages: int = 3
    max_candidates: int = 60
    default_limit: int = 8
    max_limit: int = 20
    unsupported_countries: FrozenSet[str] = field(default_factory=frozenset)
    kakao_max_query_radius_m: int = 1000
    page_token_delay_s: float = 2.0
    provider_deadline_s: float = 20.0


def _parse_country_list(raw: str) -> FrozenSet[str]:
    return frozenset(code.strip().upper() for code in raw.split(",") if code.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_MAPS_API_KEY", "")
    kakao_api_key = os.getenv("KAKAO_REST_API_KEY", "")
    worker_port = int(os.getenv("WORKER_PORT", "9000"))
    timeout_ms = int(os.getenv("PROVIDER_TIMEOUT_MS", "8000"))
    timeout_ms = max(MIN_PROVIDER_TIMEOUT_MS, min(timeout_ms, MAX_PROVIDER_TIMEOUT_MS))
    max_pages = max(1, int(os.getenv("RECO_MAX_PAGES", "3")))
    max_candidates = max(1, int(os.getenv("RECO_MAX_CANDIDATES", "60")))
    max_limit = max(1, int(os.getenv("RECO_MAX_LIMIT", "20")))
    default_limit = max(1, min(int(os.getenv("RECO_DEFAULT_LIMIT", "8")), max_limit))
    unsupported_countries = _parse_country_list(os.getenv("RECO_UNSUPPORTED_COUNTRIES", ""))
    kakao_max_query_radius_m = int(os.getenv("KAKAO_MAX_QUERY_RADIUS_M", "1000"))
    page_token_delay_s = int(os.getenv("PAGE_TOKEN_DELAY_MS", "2000")) / 1000
    # Never shorter than a single call.
    deadline_ms = max(int(os.getenv("PROVIDER_DEADLINE_MS", "20000")), timeout_ms)

    if not google_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY is not configured; Google Places requests will be skipped.")
    if not kakao_api_key:
        logger.warning("KAKAO_REST_API_KEY is not configured; Kakao Local requests will be skipped.")

    return Settings(
        google_api_key=google_api_key,
        kakao_api_key=kakao_api_key,
        worker_port=worker_port,
        provider_timeout_s=timeout_ms / 1000,
        max_pages=max_pages,
        max_candidates=max_candidates,
        default_limit=default_limit,
        max_limit=max_limit,
        unsupported_countries=unsupported_countries,
        kakao_max_query_radius_m=kakao_max_query_radius_m,
        page_token_delay_s=page_token_delay_s,
        provider_deadline_s=deadline_ms / 1000,
    )
