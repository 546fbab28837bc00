"""Closed vocabularies for activities, fitness levels and search preferences."""

from __future__ import annotations

from typing import Any

RUNNING = "running"
CYCLING = "cycling"
WALKING = "walking"
ACTIVITIES = frozenset({RUNNING, CYCLING, WALKING})

BEGINNER = "beginner"
INTERMEDIATE = "intermediate"
PRO = "pro"
FITNESS_LEVELS = frozenset({BEGINNER, INTERMEDIATE, PRO})

TIGHT = "tight"
NORMAL = "normal"
WIDE = "wide"
RADIUS_PREFERENCES = frozenset({TIGHT, NORMAL, WIDE})

SEARCH_ALL = "all"

# Older clients spell the tight band "nearby".
_RADIUS_ALIASES = {"nearby": TIGHT}

__all__ = [
    "ACTIVITIES",
    "BEGINNER",
    "CYCLING",
    "FITNESS_LEVELS",
    "INTERMEDIATE",
    "NORMAL",
    "PRO",
    "RADIUS_PREFERENCES",
    "RUNNING",
    "SEARCH_ALL",
    "TIGHT",
    "WALKING",
    "WIDE",
    "normalize_activity",
    "normalize_fitness_level",
    "normalize_radius_preference",
    "normalize_search_filter",
]


def _normalize(value: Any) -> str | None:
    if value is None:
        return None
    normalized = str(value).strip().lower()
    return normalized or None


def normalize_activity(value: Any) -> str | None:
    """Return a known lower-case activity name or ``None`` when missing.

    Clients send activity names with inconsistent casing; normalising once
    keeps downstream equality checks deterministic. Unknown names are kept
    as-is so that two reports with the same unknown activity still compare
    equal, while never matching a known one.
    """

    return _normalize(value)


def normalize_fitness_level(value: Any) -> str | None:
    """Return a known fitness level or ``None``."""

    normalized = _normalize(value)
    if normalized in FITNESS_LEVELS:
        return normalized
    return None


def normalize_radius_preference(value: Any) -> str:
    """Return a radius band, defaulting to ``normal`` for anything unknown."""

    normalized = _normalize(value)
    if normalized is None:
        return NORMAL
    normalized = _RADIUS_ALIASES.get(normalized, normalized)
    if normalized in RADIUS_PREFERENCES:
        return normalized
    return NORMAL


def normalize_search_filter(value: Any) -> str:
    """Return a fitness level to search for, or ``all``.

    An unrecognised filter degrades to ``all`` so a corrupt preference can
    only widen a search, never hide every match.
    """

    normalized = _normalize(value)
    if normalized in FITNESS_LEVELS:
        return normalized
    return SEARCH_ALL
