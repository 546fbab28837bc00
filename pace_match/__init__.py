"""PaceMatch: workout partner matching and movement detection."""

from .errors import PaceMatchError, ReportFormatError, SessionLimitError
from .matching import match, run_match
from .models import (
    Coordinates,
    LocationReport,
    LocationSample,
    MatchResult,
    MatchRun,
    MovementState,
    Visibility,
)
from .monitor import MovementMonitor, SessionRegistry
from .movement import MovementConfig
from .service import MatchingService, MatchingServiceConfig

__all__ = [
    "Coordinates",
    "LocationReport",
    "LocationSample",
    "MatchResult",
    "MatchRun",
    "MatchingService",
    "MatchingServiceConfig",
    "MovementConfig",
    "MovementMonitor",
    "MovementState",
    "PaceMatchError",
    "ReportFormatError",
    "SessionLimitError",
    "SessionRegistry",
    "Visibility",
    "match",
    "run_match",
]
