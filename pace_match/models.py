"""Dataclasses describing location reports, match outputs and movement state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Tuple

from .activity_types import FITNESS_LEVELS, INTERMEDIATE, NORMAL, SEARCH_ALL


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class Visibility:
    """Which fitness levels may discover the owner of a report."""

    visible_to_all_levels: bool = True
    allowed_levels: FrozenSet[str] = frozenset()

    @classmethod
    def open(cls) -> "Visibility":
        return cls(visible_to_all_levels=True, allowed_levels=frozenset(FITNESS_LEVELS))

    @classmethod
    def only(cls, *levels: str) -> "Visibility":
        return cls(visible_to_all_levels=False, allowed_levels=frozenset(levels))


@dataclass(frozen=True, slots=True)
class LocationReport:
    """One user's most recent known position and matching profile."""

    user_id: str
    coordinates: Optional[Coordinates]
    activity: Optional[str]
    fitness_level: str = INTERMEDIATE
    # min/km for foot activities, km/h for cycling; None or 0 when unknown.
    pace: Optional[float] = None
    visibility: Visibility = field(default_factory=Visibility.open)
    search_filter: str = SEARCH_ALL
    profile_visible: bool = True
    # Workout location sharing switch, separate from profile discovery.
    location_visible: bool = True
    radius_preference: str = NORMAL
    timestamp: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class MatchCandidate:
    report: LocationReport
    distance_m: float


@dataclass(frozen=True, slots=True)
class MatchResult:
    report: LocationReport
    score: float
    distance_m: float

    @property
    def user_id(self) -> str:
        return self.report.user_id


# Reasons attached to a matching run.
REASON_PROFILE_HIDDEN = "profile_hidden"
REASON_NO_LOCATION = "no_location"
REASON_NO_CANDIDATES = "no_candidates"
REASON_MATCHED = "matched"


@dataclass(slots=True)
class MatchRun:
    """Ranked results plus the funnel counts of a single matching run."""

    results: List[MatchResult]
    reason: str
    considered: int = 0
    nearby: int = 0
    live: int = 0
    compatible: int = 0
    diagnostics: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class LocationSample:
    lat: float
    lng: float
    timestamp: datetime

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.lat, self.lng)


# Movement engine phases.
PHASE_IDLE = "idle"
PHASE_COLLECTING = "collecting"
PHASE_MOVING = "moving"
PHASE_STATIONARY = "stationary"

# Movement engine events.
EVENT_STATIONARY = "stationary"
EVENT_MOVEMENT_RESUMED = "movement_resumed"


@dataclass(frozen=True, slots=True)
class MovementState:
    """Snapshot of one session's movement inference.

    ``last_notified`` is the time the stationary event last fired and drives
    the once-per-window throttle.
    """

    phase: str = PHASE_IDLE
    history: Tuple[LocationSample, ...] = ()
    session_start: Optional[datetime] = None
    last_notified: Optional[datetime] = None

    @property
    def active(self) -> bool:
        return self.phase != PHASE_IDLE

    @property
    def stationary(self) -> bool:
        return self.phase == PHASE_STATIONARY


__all__ = [
    "Coordinates",
    "EVENT_MOVEMENT_RESUMED",
    "EVENT_STATIONARY",
    "LocationReport",
    "LocationSample",
    "MatchCandidate",
    "MatchResult",
    "MatchRun",
    "MovementState",
    "PHASE_COLLECTING",
    "PHASE_IDLE",
    "PHASE_MOVING",
    "PHASE_STATIONARY",
    "REASON_MATCHED",
    "REASON_NO_CANDIDATES",
    "REASON_NO_LOCATION",
    "REASON_PROFILE_HIDDEN",
    "Visibility",
]
