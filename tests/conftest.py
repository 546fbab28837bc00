"""Global pytest fixtures & helpers.

Adds project root to path and provides report/sample factories shared by the
matching and movement tests.
"""
from __future__ import annotations

import math
import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from pace_match.models import Coordinates, LocationReport, LocationSample, Visibility

NOW = datetime(2025, 6, 1, 10, 0, tzinfo=timezone.utc)
ORIGIN = Coordinates(0.0, 0.0)

# Metres per degree of latitude on the 6 371 km sphere.
METRES_PER_DEGREE = 6_371_000.0 * math.pi / 180.0


# --- Factory helpers -------------------------------------------------
def north_of(origin: Coordinates, metres: float) -> Coordinates:
    """Point ``metres`` due north of ``origin`` (exact along a meridian)."""

    return Coordinates(origin.lat + metres / METRES_PER_DEGREE, origin.lng)


def make_report(user_id: str, *, metres_north: float = 0.0, age_s: float = 0.0, **overrides) -> LocationReport:
    fields = dict(
        user_id=user_id,
        coordinates=north_of(ORIGIN, metres_north),
        activity="running",
        fitness_level="intermediate",
        pace=5.0,
        visibility=Visibility.open(),
        search_filter="all",
        profile_visible=True,
        location_visible=True,
        radius_preference="normal",
        timestamp=NOW - timedelta(seconds=age_s),
    )
    fields.update(overrides)
    return LocationReport(**fields)


def make_sample(minutes: float, metres_north: float = 0.0, start: datetime = NOW) -> LocationSample:
    point = north_of(ORIGIN, metres_north)
    return LocationSample(lat=point.lat, lng=point.lng, timestamp=start + timedelta(minutes=minutes))


def pool(*reports: LocationReport) -> dict[str, LocationReport]:
    return {r.user_id: r for r in reports}


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def runner() -> LocationReport:
    """The querying user: intermediate runner at the origin, 5:00 min/km."""

    return make_report("me")


@pytest.fixture
def crowd() -> dict[str, LocationReport]:
    """A mixed pool around the origin used by several matching tests."""

    return pool(
        make_report("me"),
        make_report("close", metres_north=50),
        make_report("mid", metres_north=150, pace=5.4),
        make_report("far", metres_north=300, fitness_level="pro"),
        make_report("outside", metres_north=400),
        make_report("cyclist", metres_north=20, activity="cycling"),
        make_report("stale", metres_north=10, age_s=240),
    )
