"""Small geodesy helpers and a seeded, non-cryptographic PRNG."""

from __future__ import annotations

import math
from typing import Callable

from nearbite.models import Coordinate

EARTH_RADIUS_M = 6371000
METERS_PER_DEGREE = 111320
MIN_LNG_SCALE = 0.2

_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619
_MASK32 = 0xFFFFFFFF


def haversine_meters(a: Coordinate, b: Coordinate) -> int:
    """Great-circle distance between two points, rounded to the nearest metre."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    return round(2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(h, 1.0))))


def offset(origin: Coordinate, bearing: float, meters: float) -> Coordinate:
    """Project a point ``meters`` away from ``origin`` along ``bearing`` (radians, 0 = north).

    Uses an equirectangular approximation, which is good enough at city scale.
    """
    delta_lat = meters * math.cos(bearing) / METERS_PER_DEGREE
    lng_scale = max(math.cos(math.radians(origin.lat)), MIN_LNG_SCALE)
    delta_lng = meters * math.sin(bearing) / (METERS_PER_DEGREE * lng_scale)
    return Coordinate(lat=origin.lat + delta_lat, lng=origin.lng + delta_lng)


def hash_seed(text: str) -> int:
    """32-bit FNV-1a hash of ``text``."""
    out = _FNV_OFFSET
    for ch in text:
        out ^= ord(ch)
        out = (out * _FNV_PRIME) & _MASK32
    return out


def seeded_rng(seed: str) -> Callable[[], float]:
    """Return a mulberry32 generator yielding floats in [0, 1) for the given seed string."""
    state = hash_seed(seed)

    def rnd() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK32
        t = state
        t = ((t ^ (t >> 15)) * (t | 1)) & _MASK32
        t ^= (t + (((t ^ (t >> 7)) * (t | 61)) & _MASK32)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296

    return rnd
