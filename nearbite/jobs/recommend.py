"""CLI job to fetch recommendations for one location and print them as JSON."""

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from nearbite.core.config import get_settings
from nearbite.core.service import get_recommendations
from nearbite.models import MODES, RANDOMNESS_LEVELS, RecommendationResult, sanitize_request

logger = logging.getLogger(__name__)


def run_recommend_job(
    *,
    lat: float,
    lng: float,
    mode: str,
    radius_m: Optional[int] = None,
    limit: Optional[int] = None,
    categories: Optional[List[str]] = None,
    price_levels: Optional[List[int]] = None,
    open_now: bool = False,
    randomness_level: Optional[str] = None,
    country_code: Optional[str] = None,
    seed: Optional[str] = None,
) -> RecommendationResult:
    settings = get_settings()
    payload: Dict[str, Any] = {
        "lat": lat,
        "lng": lng,
        "mode": mode,
        "radius_m": radius_m,
        "limit": limit,
        "categories": categories,
        "price_levels": price_levels,
        "open_now": open_now,
        "randomness_level": randomness_level,
        "country_code": country_code,
    }
    search = sanitize_request(payload, default_limit=settings.default_limit, max_limit=settings.max_limit)
    logger.info("Running recommendation for %s,%s mode=%s radius=%d", search.lat, search.lng, search.mode, search.radius_m)

    result = get_recommendations(search, settings=settings, seed=seed)
    logger.info("Completed run: status=%s recommendations=%d", result.status.value, len(result.recommendations))
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recommend nearby places to eat")
    parser.add_argument("--lat", dest="lat", type=float, required=True, help="Origin latitude")
    parser.add_argument("--lng", dest="lng", type=float, required=True, help="Origin longitude")
    parser.add_argument("--mode", dest="mode", choices=MODES, required=True, help="Meal intent")
    parser.add_argument("--radius", dest="radius_m", type=int, help="Search radius in metres (100-5000)")
    parser.add_argument(
        "--limit",
        dest="limit",
        type=int,
        default=get_settings().default_limit,
        help="Maximum number of recommendations",
    )
    parser.add_argument("--category", dest="categories", action="append", help="Category filter, repeatable")
    parser.add_argument("--price", dest="price_levels", type=int, action="append", help="Price level 1-4, repeatable")
    parser.add_argument("--open-now", dest="open_now", action="store_true", help="Only places open right now")
    parser.add_argument("--vibe", dest="randomness_level", choices=RANDOMNESS_LEVELS, default="balanced")
    parser.add_argument("--country", dest="country_code", help="Two-letter country code of the origin")
    parser.add_argument("--seed", dest="seed", help="Fixed seed for reproducible sampling")
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args()

    try:
        result = run_recommend_job(**vars(args))
    except ValueError as exc:
        logger.error("Invalid request: %s", exc)
        raise SystemExit(2) from exc

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
