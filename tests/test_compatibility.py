"""Tests for fitness visibility and pace compatibility predicates."""

from __future__ import annotations

import math

import pytest

from pace_match.compatibility import fitness_allowed, pace_compatible, pace_known
from pace_match.models import Visibility


def test_open_visibility_allows_everyone() -> None:
    assert fitness_allowed("beginner", "pro", Visibility.open()) is True
    assert fitness_allowed("beginner", "pro", None) is True


def test_candidate_allow_list_gates_the_querying_level() -> None:
    pros_only = Visibility.only("pro")
    # A pro candidate hiding from non-pros: a beginner may not see them...
    assert fitness_allowed("beginner", "pro", pros_only) is False
    # ...while a pro may.
    assert fitness_allowed("pro", "pro", pros_only) is True


def test_candidate_level_is_not_what_the_allow_list_checks() -> None:
    beginners_only = Visibility.only("beginner")
    # The candidate is a pro but only wants beginners to find them.
    assert fitness_allowed("beginner", "pro", beginners_only) is True
    assert fitness_allowed("pro", "pro", beginners_only) is False


@pytest.mark.parametrize("pace", [None, 0, 0.0, -1.0, math.nan, "fast"])
def test_unknown_paces(pace) -> None:
    assert pace_known(pace) is False


@pytest.mark.parametrize("other", [None, 0, math.nan])
def test_unknown_pace_is_always_compatible(other) -> None:
    assert pace_compatible(5.0, other) is True
    assert pace_compatible(other, 5.0) is True


def test_pace_tolerance_is_thirty_percent_of_my_pace() -> None:
    assert pace_compatible(5.0, 6.5) is True
    assert pace_compatible(5.0, 3.5) is True
    assert pace_compatible(5.0, 6.6) is False
    assert pace_compatible(5.0, 3.4) is False


def test_pace_tolerance_is_asymmetric() -> None:
    # 10 vs 7: 30% of 10, but ~43% of 7.
    assert pace_compatible(10.0, 7.0) is True
    assert pace_compatible(7.0, 10.0) is False
