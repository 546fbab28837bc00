"""Weighted candidate scoring.

The score is a fixed linear blend of three clamped terms:

* distance: ``1 - d / radius`` falling to zero at the radius edge,
* pace: ``1 - |delta| / my_pace`` (1 when either pace is unknown),
* level: 1 for an exact fitness level match, 0.5 otherwise.

No learned weights and no normalisation beyond the per-term clamps, so every
score can be explained by hand.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Optional

from .compatibility import pace_known
from .config import (
    LEVEL_MISMATCH_SCORE,
    SCORE_WEIGHT_DISTANCE,
    SCORE_WEIGHT_LEVEL,
    SCORE_WEIGHT_PACE,
)
from .geo import distance_meters
from .models import LocationReport


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    distance_score: float
    pace_score: float
    level_score: float
    total: float


def _clamp_unit(value: float) -> float:
    return min(1.0, max(0.0, value))


def _distance_term(distance_m: float, radius_m: float) -> float:
    if not math.isfinite(distance_m) or radius_m <= 0:
        return 0.0
    return _clamp_unit(1.0 - distance_m / radius_m)


def _pace_term(my_pace: Optional[float], candidate_pace: Optional[float]) -> float:
    if not pace_known(my_pace) or not pace_known(candidate_pace):
        return 1.0
    mine = float(my_pace)  # type: ignore[arg-type]
    theirs = float(candidate_pace)  # type: ignore[arg-type]
    return _clamp_unit(1.0 - abs(mine - theirs) / mine)


def score_breakdown(
    user: LocationReport,
    candidate: LocationReport,
    radius_m: float,
    distance_m: Optional[float] = None,
) -> ScoreBreakdown:
    """Return each scoring term alongside the weighted total."""

    if distance_m is None:
        distance_m = distance_meters(user.coordinates, candidate.coordinates)
    distance_score = _distance_term(distance_m, radius_m)
    pace_score = _pace_term(user.pace, candidate.pace)
    level_score = (
        1.0 if user.fitness_level == candidate.fitness_level else LEVEL_MISMATCH_SCORE
    )
    total = (
        SCORE_WEIGHT_DISTANCE * distance_score
        + SCORE_WEIGHT_PACE * pace_score
        + SCORE_WEIGHT_LEVEL * level_score
    )
    return ScoreBreakdown(
        distance_score=distance_score,
        pace_score=pace_score,
        level_score=level_score,
        total=_clamp_unit(total),
    )


def score_candidate(
    user: LocationReport,
    candidate: LocationReport,
    radius_m: float,
    distance_m: Optional[float] = None,
) -> float:
    """Return the match score in ``[0, 1]`` for ``candidate`` seen from ``user``.

    ``distance_m`` may be supplied when the caller already measured it.
    """

    return score_breakdown(user, candidate, radius_m, distance_m).total


__all__ = ["ScoreBreakdown", "score_breakdown", "score_candidate"]
