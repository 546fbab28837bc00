"""Benchmark the proximity matcher and movement engine with large inputs."""

from __future__ import annotations

import argparse
import random
import statistics
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from pace_match.activity_types import ACTIVITIES, FITNESS_LEVELS  # noqa: E402
from pace_match.matching import run_match  # noqa: E402
from pace_match.models import (  # noqa: E402
    Coordinates,
    LocationReport,
    LocationSample,
    MovementState,
)
from pace_match.movement import start_session, step  # noqa: E402

NOW = datetime(2025, 6, 1, 10, 0, tzinfo=timezone.utc)
BASE = Coordinates(51.5, -0.12)
# Roughly 2 km either side of the base point.
SPREAD_DEG = 0.02


@dataclass(slots=True)
class BenchmarkSummary:
    """Aggregated statistics for multiple benchmark iterations."""

    pool_size: int
    samples: int
    iterations: int
    mean_match_ms: float
    worst_match_ms: float
    mean_movement_ms: float


def _build_pool(size: int, seed: int) -> Dict[str, LocationReport]:
    """Generate ``size`` reports scattered around the base point."""

    rng = random.Random(seed)
    activities = sorted(ACTIVITIES)
    levels = sorted(FITNESS_LEVELS)
    pool: Dict[str, LocationReport] = {}
    for idx in range(size):
        user_id = f"user-{idx}"
        pool[user_id] = LocationReport(
            user_id=user_id,
            coordinates=Coordinates(
                BASE.lat + rng.uniform(-SPREAD_DEG, SPREAD_DEG),
                BASE.lng + rng.uniform(-SPREAD_DEG, SPREAD_DEG),
            ),
            activity=rng.choice(activities),
            fitness_level=rng.choice(levels),
            pace=rng.uniform(4.0, 7.0),
            timestamp=NOW - timedelta(seconds=rng.uniform(0, 300)),
        )
    return pool


def _run_movement(samples: int) -> float:
    """Feed a wandering track through the movement engine; return seconds."""

    state: MovementState = start_session(NOW)
    start = time.perf_counter()
    for idx in range(samples):
        at = NOW + timedelta(seconds=idx * 5)
        sample = LocationSample(BASE.lat + (idx % 7) * 1e-6, BASE.lng, at)
        state, _events = step(state, sample, at)
    return time.perf_counter() - start


def run_benchmark(pool_size: int, samples: int, iterations: int, seed: int = 7) -> BenchmarkSummary:
    """Benchmark matching and movement detection and return aggregated timings."""

    if pool_size <= 0 or samples <= 0:
        raise ValueError("pool_size and samples must be positive")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    pool = _build_pool(pool_size, seed)
    user = LocationReport(
        user_id="bench",
        coordinates=BASE,
        activity="running",
        pace=5.5,
        timestamp=NOW,
    )

    match_durations: List[float] = []
    movement_durations: List[float] = []
    for _ in range(iterations):
        start = time.perf_counter()
        outcome = run_match(user, pool, NOW)
        _ = outcome  # guard against optimisation stripping the call
        match_durations.append(time.perf_counter() - start)
        movement_durations.append(_run_movement(samples))

    return BenchmarkSummary(
        pool_size=pool_size,
        samples=samples,
        iterations=iterations,
        mean_match_ms=statistics.fmean(match_durations) * 1000.0,
        worst_match_ms=max(match_durations) * 1000.0,
        mean_movement_ms=statistics.fmean(movement_durations) * 1000.0,
    )


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments for the benchmark utility."""

    parser = argparse.ArgumentParser(
        description="Benchmark the matcher against a large synthetic location pool",
    )
    parser.add_argument("--pool", type=int, default=20000, help="Number of reports in the pool")
    parser.add_argument(
        "--samples",
        type=int,
        default=2000,
        help="Number of movement samples fed per iteration",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of repetitions for averaging",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point when running the module as a script."""

    args = _parse_args()
    summary = run_benchmark(args.pool, args.samples, args.iterations)
    for key in ("pool_size", "samples", "iterations"):
        print(f"{key}: {getattr(summary, key)}")
    for key in ("mean_match_ms", "worst_match_ms", "mean_movement_ms"):
        print(f"{key}: {getattr(summary, key):.3f}")


if __name__ == "__main__":
    main()
