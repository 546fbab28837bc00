"""Tests for the activity x preference radius table."""

from __future__ import annotations

import pytest

from pace_match.radius import radius_meters


@pytest.mark.parametrize(
    "activity, preference, expected",
    [
        ("walking", "tight", 100.0),
        ("walking", "normal", 200.0),
        ("walking", "wide", 400.0),
        ("running", "tight", 200.0),
        ("running", "normal", 350.0),
        ("running", "wide", 800.0),
        ("cycling", "tight", 400.0),
        ("cycling", "normal", 1000.0),
        ("cycling", "wide", 2000.0),
    ],
)
def test_radius_table(activity: str, preference: str, expected: float) -> None:
    assert radius_meters(activity, preference) == expected


def test_unknown_activity_falls_back_to_running_normal() -> None:
    assert radius_meters("swimming", "wide") == 350.0
    assert radius_meters(None, None) == 350.0


def test_unknown_preference_uses_normal_band() -> None:
    assert radius_meters("cycling", "huge") == 1000.0


def test_legacy_nearby_alias_and_casing() -> None:
    assert radius_meters("Walking", "nearby") == 100.0
    assert radius_meters(" RUNNING ", "Wide") == 800.0
