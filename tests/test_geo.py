import math

import pytest

from nearbite.core import geo
from nearbite.models import Coordinate

SEOUL_CITY_HALL = Coordinate(37.5665, 126.9780)


def test_haversine_known_distance():
    gangnam = Coordinate(37.4979, 127.0276)
    distance = geo.haversine_meters(SEOUL_CITY_HALL, gangnam)
    assert isinstance(distance, int)
    assert 8700 <= distance <= 8900


def test_haversine_is_zero_for_same_point_and_symmetric():
    other = Coordinate(37.57, 126.99)
    assert geo.haversine_meters(SEOUL_CITY_HALL, SEOUL_CITY_HALL) == 0
    assert geo.haversine_meters(SEOUL_CITY_HALL, other) == geo.haversine_meters(other, SEOUL_CITY_HALL)


@pytest.mark.parametrize("bearing", [0, math.pi / 4, math.pi / 2, math.pi, 3 * math.pi / 2])
def test_offset_round_trips_through_haversine(bearing):
    point = geo.offset(SEOUL_CITY_HALL, bearing, 800)
    assert abs(geo.haversine_meters(SEOUL_CITY_HALL, point) - 800) <= 5


def test_offset_north_moves_latitude_only():
    point = geo.offset(SEOUL_CITY_HALL, 0, 1000)
    assert point.lat > SEOUL_CITY_HALL.lat
    assert point.lng == pytest.approx(SEOUL_CITY_HALL.lng)


def test_offset_longitude_scale_is_clamped_near_poles():
    near_pole = Coordinate(89.9, 0.0)
    point = geo.offset(near_pole, math.pi / 2, 1000)
    # cos(89.9 deg) is ~0.0017; the 0.2 floor keeps the step bounded.
    assert point.lng == pytest.approx(1000 / (geo.METERS_PER_DEGREE * 0.2))


def test_hash_seed_is_stable_fnv1a():
    assert geo.hash_seed("") == 2166136261
    assert geo.hash_seed("a") == 0xE40C292C
    assert geo.hash_seed("lunch") == geo.hash_seed("lunch")
    assert geo.hash_seed("lunch") != geo.hash_seed("dinner")


def test_seeded_rng_is_deterministic_and_in_range():
    first = geo.seeded_rng("seed-1")
    second = geo.seeded_rng("seed-1")
    other = geo.seeded_rng("seed-2")

    values = [first() for _ in range(200)]
    assert values == [second() for _ in range(200)]
    assert values[:5] != [other() for _ in range(5)]
    assert all(0 <= value < 1 for value in values)


def test_seeded_rng_is_roughly_uniform():
    rnd = geo.seeded_rng("uniformity")
    values = [rnd() for _ in range(5000)]
    assert 0.45 < sum(values) / len(values) < 0.55
    assert sum(1 for v in values if v < 0.1) > 350
