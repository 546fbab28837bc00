"""General utility helpers shared across modules."""

from __future__ import annotations

from datetime import datetime, timezone
import math
from typing import Any

# Epoch values above this are taken to be milliseconds.
_EPOCH_MS_CUTOFF = 1e11


def utc_now() -> datetime:
    """Default clock: the current time as an aware UTC datetime."""

    return datetime.now(timezone.utc)


def to_utc_aware(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse epoch seconds/milliseconds, ISO strings or datetimes.

    Returns ``None`` for anything that cannot be interpreted.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return to_utc_aware(value)
    if isinstance(value, (int, float)):
        epoch = float(value)
        if not math.isfinite(epoch) or epoch <= 0:
            return None
        if epoch > _EPOCH_MS_CUTOFF:
            epoch /= 1000.0
        try:
            return datetime.fromtimestamp(epoch, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return parse_timestamp(float(text))
        except ValueError:
            pass
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return to_utc_aware(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def coerce_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
