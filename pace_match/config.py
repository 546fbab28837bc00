"""Central configuration for the PaceMatch core.

All values are constants imported by the rest of the package. Tunables can be
overridden through environment variables (optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------
# Reports older than this are treated as stale and never matched. Fixed;
# not read from the environment.
LIVENESS_THRESHOLD_SECONDS = 180.0

# Upper bound on the ranked list returned by a matching run. Fixed.
MAX_MATCH_RESULTS = 5

# Maximum relative pace difference (against the querying user's pace).
PACE_TOLERANCE = _env_float("PACE_MATCH_PACE_TOLERANCE", 0.30)

# Linear blend used by the candidate scorer. Weights sum to 1.
SCORE_WEIGHT_DISTANCE = 0.5
SCORE_WEIGHT_PACE = 0.3
SCORE_WEIGHT_LEVEL = 0.2

# Level term when the two fitness levels differ.
LEVEL_MISMATCH_SCORE = 0.5


# ---------------------------------------------------------------------------
# Movement detection
# ---------------------------------------------------------------------------
# Trailing window inspected for a stationary verdict.
MOVEMENT_WINDOW_SECONDS = _env_float("PACE_MATCH_MOVEMENT_WINDOW_SECONDS", 5 * 60.0)

# Both path length and net displacement must stay below this (metres).
MOVEMENT_DISTANCE_THRESHOLD_M = _env_float("PACE_MATCH_MOVEMENT_THRESHOLD_M", 10.0)

# Extra history kept beyond the window before samples are pruned.
MOVEMENT_RETENTION_BUFFER_SECONDS = _env_float(
    "PACE_MATCH_MOVEMENT_RETENTION_BUFFER_SECONDS", 60.0
)

# Period of the background evaluation tick.
MOVEMENT_CHECK_INTERVAL_SECONDS = _env_float(
    "PACE_MATCH_MOVEMENT_CHECK_INTERVAL_SECONDS", 30.0
)


# ---------------------------------------------------------------------------
# Session registry
# ---------------------------------------------------------------------------
# Maximum concurrently tracked sessions.
SESSION_REGISTRY_MAX_SESSIONS = _env_int("PACE_MATCH_MAX_SESSIONS", 1024)

# Sessions that have not been touched for this long are evicted.
SESSION_REGISTRY_TTL_SECONDS = _env_int("PACE_MATCH_SESSION_TTL_SECONDS", 4 * 3600)
