"""Run the matcher against a JSON dump of the live location pool.

Usage::

    python -m pace_match.tools.match_snapshot pool.json --user alice
    python -m pace_match.tools.match_snapshot pool.json --user alice --now 2025-06-01T10:00:00Z
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, List

from ..geo import format_distance
from ..matching import run_match
from ..snapshot import parse_snapshot
from ..utils import parse_timestamp, utc_now

LOGGER = logging.getLogger(__name__)


def load_pool(path: str | Path) -> dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    if not isinstance(raw, dict):
        raise ValueError(f"{path} does not contain a user-id keyed object")
    return raw


def format_results(outcome: Any) -> List[str]:
    lines = [
        f"reason={outcome.reason} reports={outcome.considered} nearby={outcome.nearby} "
        f"live={outcome.live} compatible={outcome.compatible}"
    ]
    for rank, result in enumerate(outcome.results, start=1):
        report = result.report
        lines.append(
            f"{rank}. {report.user_id:<20} score={result.score:.3f} "
            f"distance={format_distance(result.distance_m):>7} "
            f"level={report.fitness_level} pace={report.pace if report.pace else '-'}"
        )
    return lines


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Match one user against a location pool dump")
    parser.add_argument("snapshot", help="JSON file mapping user id -> location record")
    parser.add_argument("--user", required=True, help="Querying user id (must be in the dump)")
    parser.add_argument(
        "--now",
        help="Evaluation time (ISO 8601 or epoch ms); defaults to the current time",
    )
    parser.add_argument("--verbose", action="store_true", help="Log filter decisions")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )
    try:
        raw = load_pool(args.snapshot)
    except (OSError, ValueError) as exc:
        LOGGER.error("Failed to load snapshot %s: %s", args.snapshot, exc)
        return 2

    reports = parse_snapshot(raw)
    user = reports.get(args.user)
    if user is None:
        LOGGER.error("User %s not found in snapshot", args.user)
        return 1

    now = utc_now()
    if args.now:
        parsed = parse_timestamp(args.now)
        if parsed is None:
            LOGGER.error("Invalid --now value %s", args.now)
            return 2
        now = parsed

    for line in format_results(run_match(user, reports, now)):
        print(line)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
