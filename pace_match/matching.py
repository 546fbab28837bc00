"""Proximity and compatibility matching over a snapshot of location reports.

A run flows one way: spatial prefilter -> liveness filter -> hard
compatibility filters -> scoring -> top-K. The snapshot is only read; the
same inputs and the same ``now`` always produce the same ordered output.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
import logging
from typing import List, Mapping, Optional

from .activity_types import SEARCH_ALL
from .compatibility import fitness_allowed, pace_compatible, pace_known
from .config import LIVENESS_THRESHOLD_SECONDS, MAX_MATCH_RESULTS
from .geo import distance_meters
from .models import (
    REASON_MATCHED,
    REASON_NO_CANDIDATES,
    REASON_NO_LOCATION,
    REASON_PROFILE_HIDDEN,
    LocationReport,
    MatchCandidate,
    MatchResult,
    MatchRun,
)
from .radius import radius_meters
from .scoring import score_breakdown
from .utils import to_utc_aware

_LOG = logging.getLogger(__name__)

ReportPool = Mapping[str, LocationReport]

LIVENESS_THRESHOLD = timedelta(seconds=LIVENESS_THRESHOLD_SECONDS)

# Hard filter rejection labels, in evaluation order.
REJECT_ACTIVITY = "activity"
REJECT_SEARCH_FILTER = "search_filter"
REJECT_PROFILE_HIDDEN = "profile_hidden"
REJECT_CANDIDATE_SEARCH_FILTER = "candidate_search_filter"
REJECT_FITNESS_VISIBILITY = "fitness_visibility"
REJECT_PACE = "pace"


def nearby_reports(
    user: LocationReport,
    reports: ReportPool,
    radius_m: float,
) -> List[MatchCandidate]:
    """Return reports within ``radius_m`` of ``user``, closest first.

    The querying user, reports without a usable position and reports whose
    owner stopped sharing their workout location are left out.
    """

    candidates: List[MatchCandidate] = []
    for user_id, report in reports.items():
        if user_id == user.user_id or report.user_id == user.user_id:
            continue
        if report.coordinates is None or not report.location_visible:
            continue
        distance = distance_meters(user.coordinates, report.coordinates)
        # inf and NaN both fail this comparison.
        if not distance <= radius_m:
            continue
        candidates.append(MatchCandidate(report=report, distance_m=distance))
    candidates.sort(key=lambda c: (c.distance_m, c.report.user_id))
    return candidates


def is_live(
    report: LocationReport,
    now: datetime,
    threshold: timedelta = LIVENESS_THRESHOLD,
) -> bool:
    """Return ``True`` when the report was refreshed within ``threshold``."""

    if report.timestamp is None:
        return False
    age = to_utc_aware(now) - to_utc_aware(report.timestamp)
    return age <= threshold


def rejection_reason(user: LocationReport, candidate: LocationReport) -> Optional[str]:
    """Return the first hard filter ``candidate`` fails, or ``None``."""

    # A candidate without an activity is assumed to share the user's.
    if candidate.activity is not None and candidate.activity != user.activity:
        return REJECT_ACTIVITY
    if user.search_filter != SEARCH_ALL and candidate.fitness_level != user.search_filter:
        return REJECT_SEARCH_FILTER
    if not candidate.profile_visible:
        return REJECT_PROFILE_HIDDEN
    if (
        candidate.search_filter != SEARCH_ALL
        and candidate.search_filter != user.fitness_level
    ):
        return REJECT_CANDIDATE_SEARCH_FILTER
    if not fitness_allowed(
        user.fitness_level, candidate.fitness_level, candidate.visibility
    ):
        return REJECT_FITNESS_VISIBILITY
    if (
        pace_known(user.pace)
        and pace_known(candidate.pace)
        and not pace_compatible(user.pace, candidate.pace)
    ):
        return REJECT_PACE
    return None


def passes_hard_filters(user: LocationReport, candidate: LocationReport) -> bool:
    return rejection_reason(user, candidate) is None


def run_match(
    user: LocationReport,
    reports: ReportPool,
    now: datetime,
    *,
    limit: int = MAX_MATCH_RESULTS,
) -> MatchRun:
    """Match ``user`` against ``reports`` and keep the funnel counts."""

    if not user.profile_visible:
        return MatchRun(results=[], reason=REASON_PROFILE_HIDDEN)
    if user.coordinates is None:
        return MatchRun(results=[], reason=REASON_NO_LOCATION, considered=len(reports))

    radius = radius_meters(user.activity, user.radius_preference)
    nearby = nearby_reports(user, reports, radius)
    live = [c for c in nearby if is_live(c.report, now)]

    rejected: Counter[str] = Counter()
    results: List[MatchResult] = []
    for candidate in live:
        reason = rejection_reason(user, candidate.report)
        if reason is not None:
            rejected[reason] += 1
            _LOG.debug(
                "Candidate %s dropped by %s filter", candidate.report.user_id, reason
            )
            continue
        breakdown = score_breakdown(
            user, candidate.report, radius, distance_m=candidate.distance_m
        )
        results.append(
            MatchResult(
                report=candidate.report,
                score=breakdown.total,
                distance_m=candidate.distance_m,
            )
        )

    compatible = len(results)
    results.sort(key=lambda r: (-r.score, r.distance_m, r.report.user_id))
    del results[max(0, min(limit, MAX_MATCH_RESULTS)) :]

    _LOG.debug(
        "Match run user=%s radius=%.0fm: %d reports -> %d nearby -> %d live -> %d compatible",
        user.user_id,
        radius,
        len(reports),
        len(nearby),
        len(live),
        compatible,
    )
    return MatchRun(
        results=results,
        reason=REASON_MATCHED if results else REASON_NO_CANDIDATES,
        considered=len(reports),
        nearby=len(nearby),
        live=len(live),
        compatible=compatible,
        diagnostics=dict(rejected),
    )


def match(
    user: LocationReport,
    reports: ReportPool,
    now: datetime,
) -> List[MatchResult]:
    """Return at most five compatible live users near ``user``, best first."""

    return run_match(user, reports, now).results


__all__ = [
    "LIVENESS_THRESHOLD",
    "ReportPool",
    "is_live",
    "match",
    "nearby_reports",
    "passes_hard_filters",
    "rejection_reason",
    "run_match",
]
