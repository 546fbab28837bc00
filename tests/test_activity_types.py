"""Tests for activity / level / preference normalisation."""

from __future__ import annotations

from pace_match.activity_types import (
    normalize_activity,
    normalize_fitness_level,
    normalize_radius_preference,
    normalize_search_filter,
)


def test_activity_is_lowercased_and_trimmed() -> None:
    assert normalize_activity(" Running ") == "running"
    assert normalize_activity("") is None
    assert normalize_activity(None) is None


def test_unknown_fitness_level_is_none() -> None:
    assert normalize_fitness_level("PRO") == "pro"
    assert normalize_fitness_level("elite") is None


def test_radius_preference_defaults_and_alias() -> None:
    assert normalize_radius_preference("nearby") == "tight"
    assert normalize_radius_preference(None) == "normal"
    assert normalize_radius_preference("enormous") == "normal"


def test_search_filter_degrades_to_all() -> None:
    assert normalize_search_filter("Beginner") == "beginner"
    assert normalize_search_filter("elite") == "all"
    assert normalize_search_filter(None) == "all"
