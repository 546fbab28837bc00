"""Pairwise compatibility predicates used by the matcher."""

from __future__ import annotations

import math
from typing import Optional

from .config import PACE_TOLERANCE
from .models import Visibility

__all__ = ["fitness_allowed", "pace_compatible", "pace_known"]


def pace_known(pace: Optional[float]) -> bool:
    """Return ``True`` for a usable, strictly positive pace value."""

    if pace is None:
        return False
    try:
        value = float(pace)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value > 0.0


def fitness_allowed(
    my_level: str,
    candidate_level: str,
    candidate_visibility: Optional[Visibility],
) -> bool:
    """Return ``True`` when the candidate accepts being found by ``my_level``.

    The candidate's visibility settings gate the querying user's level, not
    the other way round. ``candidate_level`` does not take part in the check.
    """

    if candidate_visibility is None or candidate_visibility.visible_to_all_levels:
        return True
    return my_level in candidate_visibility.allowed_levels


def pace_compatible(
    my_pace: Optional[float],
    candidate_pace: Optional[float],
    tolerance: float = PACE_TOLERANCE,
) -> bool:
    """Return ``True`` when the paces differ by at most ``tolerance``.

    The difference is relative to the querying user's pace. An unknown pace on
    either side means "no preference" and is always compatible.
    """

    if not pace_known(my_pace) or not pace_known(candidate_pace):
        return True
    mine = float(my_pace)  # type: ignore[arg-type]
    theirs = float(candidate_pace)  # type: ignore[arg-type]
    return abs(mine - theirs) / mine <= tolerance
