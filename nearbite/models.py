"""Core data models shared by the recommendation pipeline."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

MODES = ("lunch", "dinner")
RANDOMNESS_LEVELS = ("stable", "balanced", "explore")

MIN_RADIUS_M = 100
MAX_RADIUS_M = 5000
DEFAULT_RADIUS_M = 1000
DEFAULT_LIMIT = 8
MAX_LIMIT = 20
DEFAULT_PRICE_LEVEL = 2
DEFAULT_RATING = 4.0


class Outcome(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"


class RecommendationStatus(str, Enum):
    OK = "ok"
    UNSUPPORTED_REGION = "unsupported_region"
    SOURCE_ERROR = "source_error"


@dataclass(frozen=True, slots=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class SearchRequest:
    """Sanitized recommendation request. Immutable for the lifetime of one call."""

    lat: float
    lng: float
    mode: str
    radius_m: int = DEFAULT_RADIUS_M
    limit: int = DEFAULT_LIMIT
    categories: FrozenSet[str] = frozenset()
    price_levels: FrozenSet[int] = frozenset()
    open_now: bool = False
    randomness_level: str = "balanced"
    exclude_place_ids: FrozenSet[str] = frozenset()
    recently_shown_place_ids: FrozenSet[str] = frozenset()
    country_code: Optional[str] = None

    @property
    def origin(self) -> Coordinate:
        return Coordinate(self.lat, self.lng)


@dataclass(slots=True)
class Candidate:
    """Normalized place returned by a provider adapter."""

    place_id: str
    name: str
    lat: float
    lng: float
    distance_m: int
    category: str = "restaurant"
    address: Optional[str] = None
    raw_category: Optional[str] = None
    price_level: int = DEFAULT_PRICE_LEVEL
    rating: float = DEFAULT_RATING
    review_count: Optional[int] = None
    open_now: bool = False
    source: str = ""
    why: List[str] = field(default_factory=list)
    directions_url: str = ""

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lng)

    def to_dict(self) -> Dict[str, Any]:
        entry = asdict(self)
        entry.pop("source")
        return entry


@dataclass(slots=True)
class FetchResult:
    provider: str
    outcome: Outcome
    candidates: List[Candidate] = field(default_factory=list)


@dataclass(slots=True)
class RecommendationResult:
    status: RecommendationStatus
    mode: str
    recommendations: List[Candidate] = field(default_factory=list)
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "status": self.status.value,
            "mode": self.mode,
            "recommendations": [item.to_dict() for item in self.recommendations],
        }
        if self.message:
            payload["message"] = self.message
        return payload


@dataclass(frozen=True, slots=True)
class Availability:
    supported: bool
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"supported": self.supported, "reason": self.reason}


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _as_number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be numeric")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite")
    return number


def _as_int(value: Any, name: str, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer") from exc


def _as_list(value: Any, name: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(f"{name} must be a list")
    return list(value)


def _string_set(values: Iterable[Any], *, lower: bool = False) -> FrozenSet[str]:
    out = set()
    for value in values:
        text = str(value).strip()
        if text:
            out.add(text.lower() if lower else text)
    return frozenset(out)


def _price_set(values: Iterable[Any]) -> FrozenSet[int]:
    out = set()
    for value in values:
        try:
            level = int(value)
        except (TypeError, ValueError):
            continue
        if 1 <= level <= 4:
            out.add(level)
    return frozenset(out)


def sanitize_request(
    payload: Mapping[str, Any],
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> SearchRequest:
    """Validate and clamp a decoded request body into a SearchRequest.

    Raises ValueError for input errors (bad coordinates, unknown mode or vibe).
    Out-of-range radius/limit values are clamped rather than rejected.
    """
    lat = _as_number(payload.get("lat"), "lat")
    lng = _as_number(payload.get("lng"), "lng")
    if not -90 <= lat <= 90:
        raise ValueError("lat must be within [-90, 90]")
    if not -180 <= lng <= 180:
        raise ValueError("lng must be within [-180, 180]")

    mode = payload.get("mode")
    if mode not in MODES:
        raise ValueError(f"mode must be one of: {', '.join(MODES)}")

    randomness_level = payload.get("randomness_level") or "balanced"
    if randomness_level not in RANDOMNESS_LEVELS:
        raise ValueError(f"randomness_level must be one of: {', '.join(RANDOMNESS_LEVELS)}")

    radius_m = _clamp(_as_int(payload.get("radius_m"), "radius_m", DEFAULT_RADIUS_M), MIN_RADIUS_M, MAX_RADIUS_M)
    limit = _clamp(_as_int(payload.get("limit"), "limit", default_limit), 1, max_limit)

    country_raw = payload.get("country_code")
    country_code = str(country_raw).strip().upper() if country_raw else None
    if country_code is not None and len(country_code) != 2:
        country_code = None

    return SearchRequest(
        lat=lat,
        lng=lng,
        mode=mode,
        radius_m=radius_m,
        limit=limit,
        categories=_string_set(_as_list(payload.get("categories"), "categories"), lower=True),
        price_levels=_price_set(_as_list(payload.get("price_levels"), "price_levels")),
        open_now=bool(payload.get("open_now", False)),
        randomness_level=randomness_level,
        exclude_place_ids=_string_set(_as_list(payload.get("exclude_place_ids"), "exclude_place_ids")),
        recently_shown_place_ids=_string_set(
            _as_list(payload.get("recently_shown_place_ids"), "recently_shown_place_ids")
        ),
        country_code=country_code,
    )
