"""Tests for the haversine helpers."""

from __future__ import annotations

import math

import pytest

from pace_match.geo import distance_meters, format_distance, path_length_m
from pace_match.models import Coordinates

from conftest import ORIGIN, north_of


def test_distance_along_meridian_is_exact() -> None:
    assert distance_meters(ORIGIN, north_of(ORIGIN, 100.0)) == pytest.approx(100.0, abs=1e-6)


def test_distance_is_symmetric_and_zero_for_same_point() -> None:
    a = Coordinates(51.5007, -0.1246)
    b = Coordinates(48.8584, 2.2945)
    assert distance_meters(a, a) == 0.0
    assert distance_meters(a, b) == pytest.approx(distance_meters(b, a))
    # Big Ben to the Eiffel Tower is roughly 340 km.
    assert 335_000 < distance_meters(a, b) < 345_000


def test_distance_accepts_latlon_tuples() -> None:
    assert distance_meters((0.0, 0.0), (0.0, 0.0)) == 0.0


@pytest.mark.parametrize(
    "first, second",
    [
        (None, ORIGIN),
        (ORIGIN, None),
        (Coordinates(math.nan, 0.0), ORIGIN),
        (ORIGIN, Coordinates(0.0, math.inf)),
    ],
)
def test_missing_or_invalid_coordinates_are_infinitely_far(first, second) -> None:
    assert distance_meters(first, second) == math.inf


def test_path_length_sums_consecutive_steps() -> None:
    points = [north_of(ORIGIN, m) for m in (0.0, 10.0, 5.0, 25.0)]
    assert path_length_m(points) == pytest.approx(10.0 + 5.0 + 20.0, abs=1e-6)


def test_path_length_of_short_tracks_is_zero() -> None:
    assert path_length_m([]) == 0.0
    assert path_length_m([ORIGIN]) == 0.0


@pytest.mark.parametrize(
    "distance, expected",
    [(None, "Unknown"), (math.inf, "Unknown"), (0.0, "0m"), (249.6, "250m"), (1400.0, "1.4km")],
)
def test_format_distance(distance, expected) -> None:
    assert format_distance(distance) == expected
