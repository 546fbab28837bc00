"""Conversion of raw broadcast records into :class:`LocationReport` objects.

The live location channel publishes one loosely-typed record per user, keyed
by user id::

    {"lat": 51.5, "lng": -0.12, "activity": "Running", "fitnessLevel": "pro",
     "pace": 5.2, "visibility": {"visibleToAllLevels": false,
     "allowedLevels": ["pro"]}, "searchFilter": "all", "profileVisible": true,
     "visible": true, "radiusPreference": "normal", "timestamp": 1718000000000}

Every optional field falls back to a permissive default, so a sparse record
still yields a usable report.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from .activity_types import (
    FITNESS_LEVELS,
    INTERMEDIATE,
    normalize_activity,
    normalize_fitness_level,
    normalize_radius_preference,
    normalize_search_filter,
)
from .errors import ReportFormatError
from .models import Coordinates, LocationReport, Visibility
from .utils import coerce_float, parse_timestamp

_LOG = logging.getLogger(__name__)

__all__ = ["parse_coordinates", "parse_report", "parse_snapshot", "parse_visibility"]


def _first(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def parse_coordinates(payload: Mapping[str, Any]) -> Optional[Coordinates]:
    """Read ``lat``/``lng`` either at the top level or under ``location``."""

    source: Mapping[str, Any] = payload
    nested = payload.get("location")
    if isinstance(nested, Mapping):
        source = nested
    lat = coerce_float(_first(source, "lat", "latitude"))
    lng = coerce_float(_first(source, "lng", "lon", "longitude"))
    if lat is None or lng is None:
        return None
    return Coordinates(lat=lat, lng=lng)


def parse_visibility(value: Any) -> Visibility:
    """Read visibility settings; anything unreadable means open to all."""

    if not isinstance(value, Mapping):
        return Visibility.open()
    open_to_all = value.get("visibleToAllLevels", value.get("visible_to_all_levels"))
    if open_to_all is None or bool(open_to_all):
        return Visibility.open()
    raw_levels = value.get("allowedLevels", value.get("allowed_levels")) or ()
    if isinstance(raw_levels, str):
        raw_levels = (raw_levels,)
    levels = set()
    for level in raw_levels:
        normalized = normalize_fitness_level(level)
        if normalized is not None:
            levels.add(normalized)
    return Visibility(visible_to_all_levels=False, allowed_levels=frozenset(levels))


def _flag(value: Any) -> bool:
    # Only an explicit ``false`` hides a user.
    return value is not False


def parse_report(user_id: Any, payload: Any) -> LocationReport:
    """Build a report from one raw record.

    Raises:
        ReportFormatError: when the payload is not a mapping or the user id is
            empty. Every other problem degrades to a default.
    """

    if not isinstance(payload, Mapping):
        raise ReportFormatError(
            f"Report for user {user_id!r} is {type(payload).__name__}, expected a mapping"
        )
    uid = str(user_id).strip() if user_id is not None else ""
    if not uid:
        raise ReportFormatError("Report has an empty user id")

    level = normalize_fitness_level(_first(payload, "fitnessLevel", "fitness_level"))
    pace = coerce_float(payload.get("pace"))
    return LocationReport(
        user_id=uid,
        coordinates=parse_coordinates(payload),
        activity=normalize_activity(payload.get("activity")),
        fitness_level=level if level in FITNESS_LEVELS else INTERMEDIATE,
        pace=pace if pace else None,
        visibility=parse_visibility(payload.get("visibility")),
        search_filter=normalize_search_filter(
            _first(payload, "searchFilter", "search_filter")
        ),
        profile_visible=_flag(_first(payload, "profileVisible", "profile_visible")),
        location_visible=_flag(payload.get("visible")),
        radius_preference=normalize_radius_preference(
            _first(payload, "radiusPreference", "radius_preference")
        ),
        timestamp=parse_timestamp(payload.get("timestamp")),
    )


def parse_snapshot(raw: Mapping[Any, Any] | None) -> Dict[str, LocationReport]:
    """Parse a user-id keyed pool, skipping records that cannot be read."""

    reports: Dict[str, LocationReport] = {}
    if not raw:
        return reports
    skipped = 0
    for user_id, payload in raw.items():
        try:
            report = parse_report(user_id, payload)
        except ReportFormatError as exc:
            skipped += 1
            _LOG.warning("Skipping location report: %s", exc)
            continue
        reports[report.user_id] = report
    if skipped:
        _LOG.info("Parsed %d location reports (%d skipped)", len(reports), skipped)
    return reports
