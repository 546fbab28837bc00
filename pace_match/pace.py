"""Derive a user's typical pace from their workout history."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

import numpy as np

from .activity_types import CYCLING, normalize_activity
from .utils import coerce_float

# Only the most recent workouts describe current form.
RECENT_WORKOUTS = 10

# Foot paces outside (0, 30) min/km are treated as recording errors.
MAX_FOOT_PACE_MIN_PER_KM = 30.0

Workout = Mapping[str, Any]


def pace_from_workouts(
    workouts: Sequence[Workout], activity: str
) -> Optional[float]:
    """Return the mean pace of the last ten ``activity`` workouts.

    Workouts carry ``activity``, ``distance`` (km), ``duration`` (seconds)
    and optionally ``avg_speed`` (km/h). Cycling yields km/h; running and
    walking yield min/km. Returns ``None`` when nothing usable remains.
    """

    wanted = normalize_activity(activity)
    relevant = [w for w in workouts if normalize_activity(w.get("activity")) == wanted]
    relevant = relevant[-RECENT_WORKOUTS:]

    values: List[float] = []
    for workout in relevant:
        distance = coerce_float(workout.get("distance"))
        duration = coerce_float(workout.get("duration"))
        if not distance or not duration or distance <= 0 or duration <= 0:
            continue
        if wanted == CYCLING:
            speed = coerce_float(workout.get("avg_speed")) or distance / (duration / 3600.0)
            if speed > 0:
                values.append(speed)
        else:
            pace = (duration / 60.0) / distance
            if 0 < pace < MAX_FOOT_PACE_MIN_PER_KM:
                values.append(pace)

    if not values:
        return None
    return float(np.mean(values))


__all__ = ["pace_from_workouts"]
