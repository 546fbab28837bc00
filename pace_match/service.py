"""Matching service.

Pulls a point-in-time snapshot from an external report source and runs the
pure matcher over it. Keeps the algorithm in ``matching`` free of any
knowledge of where reports come from.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Callable, List, Mapping

from .matching import run_match
from .models import REASON_NO_CANDIDATES, LocationReport, MatchResult, MatchRun
from .utils import utc_now

ReportSource = Callable[[], Mapping[str, LocationReport]]
Clock = Callable[[], datetime]


def _empty_source() -> Mapping[str, LocationReport]:
    return {}


@dataclass(slots=True)
class MatchingServiceConfig:
    report_source: ReportSource = _empty_source
    clock: Clock = utc_now
    logger: logging.Logger | None = None


class MatchingService:
    def __init__(self, config: MatchingServiceConfig | None = None):
        self.config = config or MatchingServiceConfig()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def run(self, user: LocationReport) -> MatchRun:
        """Match ``user`` against the current snapshot, with diagnostics."""

        try:
            reports = self.config.report_source() or {}
        except Exception as exc:
            self._log.error(
                "Report source failed for user=%s: %s", user.user_id, exc, exc_info=True
            )
            return MatchRun(results=[], reason=REASON_NO_CANDIDATES)

        outcome = run_match(user, reports, self.config.clock())
        self._log.info(
            "Matched user=%s reason=%s: %d reports, %d nearby, %d live, %d compatible, %d returned",
            user.user_id,
            outcome.reason,
            outcome.considered,
            outcome.nearby,
            outcome.live,
            outcome.compatible,
            len(outcome.results),
        )
        if outcome.diagnostics:
            self._log.debug("Rejections for user=%s: %s", user.user_id, outcome.diagnostics)
        return outcome

    def match(self, user: LocationReport) -> List[MatchResult]:
        return self.run(user).results


__all__ = ["MatchingService", "MatchingServiceConfig", "ReportSource"]
