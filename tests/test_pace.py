"""Tests for deriving pace from workout history."""

from __future__ import annotations

import pytest

from pace_match.pace import pace_from_workouts


def _workout(activity: str, distance_km: float, duration_s: float, **extra) -> dict:
    return {"activity": activity, "distance": distance_km, "duration": duration_s, **extra}


def test_running_pace_is_minutes_per_km() -> None:
    workouts = [
        _workout("running", 5.0, 25 * 60),  # 5:00
        _workout("running", 10.0, 60 * 60),  # 6:00
        _workout("cycling", 20.0, 3600),
    ]
    assert pace_from_workouts(workouts, "running") == pytest.approx(5.5)


def test_cycling_uses_average_speed_when_present() -> None:
    workouts = [
        _workout("cycling", 30.0, 3600),  # 30 km/h
        _workout("cycling", 10.0, 3600, avg_speed=20.0),
    ]
    assert pace_from_workouts(workouts, "cycling") == pytest.approx(25.0)


def test_only_last_ten_workouts_count() -> None:
    workouts = [_workout("walking", 1.0, 20 * 60)] * 5 + [_workout("walking", 1.0, 10 * 60)] * 10
    assert pace_from_workouts(workouts, "walking") == pytest.approx(10.0)


def test_unusable_workouts_are_ignored() -> None:
    workouts = [
        _workout("running", 0.0, 600),
        _workout("running", 1.0, 0),
        _workout("running", 1.0, 45 * 60),  # 45 min/km: a recording error
    ]
    assert pace_from_workouts(workouts, "running") is None
    assert pace_from_workouts([], "running") is None
