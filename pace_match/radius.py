"""Search radius lookup by activity and radius preference."""

from __future__ import annotations

from typing import Dict, Optional

from .activity_types import (
    CYCLING,
    NORMAL,
    RUNNING,
    TIGHT,
    WALKING,
    WIDE,
    normalize_activity,
    normalize_radius_preference,
)

# Metres per (activity, preference). A table rather than a formula so every
# combination is a literal, predictable value.
RADIUS_TABLE_M: Dict[str, Dict[str, float]] = {
    WALKING: {TIGHT: 100.0, NORMAL: 200.0, WIDE: 400.0},
    RUNNING: {TIGHT: 200.0, NORMAL: 350.0, WIDE: 800.0},
    CYCLING: {TIGHT: 400.0, NORMAL: 1000.0, WIDE: 2000.0},
}

DEFAULT_RADIUS_M = RADIUS_TABLE_M[RUNNING][NORMAL]

__all__ = ["DEFAULT_RADIUS_M", "RADIUS_TABLE_M", "radius_meters"]


def radius_meters(activity: Optional[str], preference: Optional[str]) -> float:
    """Return the search radius in metres.

    Unknown activities fall back to running/normal; an unknown preference
    falls back to the activity's normal band.
    """

    row = RADIUS_TABLE_M.get(normalize_activity(activity) or "")
    if row is None:
        return DEFAULT_RADIUS_M
    return row.get(normalize_radius_preference(preference), row[NORMAL])
