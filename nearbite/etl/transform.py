"""Utilities for transforming provider payloads into Candidates."""

import logging
from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote

from nearbite.core.geo import haversine_meters
from nearbite.etl.categories import category_from_google_types, category_from_kakao_path, infer_category
from nearbite.models import DEFAULT_PRICE_LEVEL, DEFAULT_RATING, Candidate, Coordinate

logger = logging.getLogger(__name__)

GOOGLE_SOURCE = "google"
KAKAO_SOURCE = "kakao"

_IGNORE_TYPES = {"point_of_interest", "establishment", "political", "premise", "food"}
_CLOSED_STATUSES = {"CLOSED_PERMANENTLY"}


def _extract_primary_type(types: Iterable[str]) -> Optional[str]:
    for type_name in types or []:
        if type_name not in _IGNORE_TYPES:
            return type_name
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        digits = "".join(ch for ch in value if ch.isdigit())
        if digits:
            return int(digits)
    return None


def _clamp_price(value: Any) -> int:
    level = _safe_int(value)
    if level is None:
        return DEFAULT_PRICE_LEVEL
    return max(1, min(level, 4))


def _clamp_rating(value: Any) -> float:
    rating = _safe_float(value)
    if rating is None:
        return DEFAULT_RATING
    return max(0.0, min(rating, 5.0))


def google_directions_url(lat: float, lng: float) -> str:
    return f"https://www.google.com/maps/dir/?api=1&destination={lat},{lng}&travelmode=walking"


def kakao_directions_url(name: str, lat: float, lng: float) -> str:
    return f"https://map.kakao.com/link/to/{quote(name)},{lat},{lng}"


def is_permanently_closed(result: Dict[str, Any]) -> bool:
    return result.get("business_status") in _CLOSED_STATUSES or bool(result.get("permanently_closed"))


def google_result_to_candidate(result: Dict[str, Any], origin: Coordinate) -> Optional[Candidate]:
    """Convert one Nearby Search result. Returns None for unusable or closed listings."""
    if not isinstance(result, dict):
        logger.debug("Skipping malformed Google result: %r", result)
        return None
    location = _as_dict(_as_dict(result.get("geometry")).get("location"))
    lat = _safe_float(location.get("lat"))
    lng = _safe_float(location.get("lng"))
    place_id = _strip_or_none(result.get("place_id"))
    name = _strip_or_none(result.get("name"))
    if lat is None or lng is None or not place_id or not name:
        logger.debug("Skipping Google result without id/name/location: %s", place_id)
        return None
    if is_permanently_closed(result):
        logger.debug("Skipping permanently closed Google place %s", place_id)
        return None

    types = result.get("types")
    if not isinstance(types, list):
        types = []
    address = _strip_or_none(result.get("vicinity") or result.get("formatted_address"))
    primary_type = _extract_primary_type(types)
    opening_hours = _as_dict(result.get("opening_hours"))
    review_count = _safe_int(result.get("user_ratings_total"))

    return Candidate(
        place_id=f"{GOOGLE_SOURCE}:{place_id}",
        name=name,
        address=address,
        raw_category=primary_type.replace("_", " ") if primary_type else None,
        category=infer_category(category_from_google_types(types), name, address),
        lat=lat,
        lng=lng,
        distance_m=haversine_meters(origin, Coordinate(lat, lng)),
        price_level=_clamp_price(result.get("price_level")),
        rating=_clamp_rating(result.get("rating")),
        review_count=max(review_count, 0) if review_count is not None else None,
        open_now=opening_hours.get("open_now") is True,
        source=GOOGLE_SOURCE,
        directions_url=google_directions_url(lat, lng),
    )


def kakao_document_to_candidate(document: Dict[str, Any], origin: Coordinate) -> Optional[Candidate]:
    """Convert one Kakao Local document. Kakao reports neither hours nor ratings."""
    if not isinstance(document, dict):
        logger.debug("Skipping malformed Kakao document: %r", document)
        return None
    lat = _safe_float(document.get("y"))
    lng = _safe_float(document.get("x"))
    place_id = _strip_or_none(document.get("id"))
    name = _strip_or_none(document.get("place_name"))
    if lat is None or lng is None or not place_id or not name:
        logger.debug("Skipping Kakao document without id/name/location: %s", place_id)
        return None

    category_name = _strip_or_none(document.get("category_name"))
    address = _strip_or_none(document.get("road_address_name") or document.get("address_name"))
    raw_category = category_name.split(">")[-1].strip() if category_name else None

    return Candidate(
        place_id=f"{KAKAO_SOURCE}:{place_id}",
        name=name,
        address=address,
        raw_category=raw_category,
        category=infer_category(category_from_kakao_path(category_name), name, address),
        lat=lat,
        lng=lng,
        distance_m=haversine_meters(origin, Coordinate(lat, lng)),
        source=KAKAO_SOURCE,
        directions_url=kakao_directions_url(name, lat, lng),
    )
