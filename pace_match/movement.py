"""Stationary/moving inference for a single activity session.

The engine is a set of pure step functions over an immutable
:class:`~pace_match.models.MovementState`. Callers own the state object and
drive evaluation from both the position stream and a periodic tick; nothing
in here keeps timers or hidden references.

Phases::

    idle --start_session--> collecting --evaluate--> moving <--> stationary
      ^                                                          |
      +------------------------- end_session --------------------+

A session is judged stationary when, over the trailing window, both the
travelled path length and the first-to-last displacement stay below the
distance threshold. Stationary is edge-triggered and throttled to one
notification per window; the transition back to moving always notifies.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
import logging
from typing import List, Optional, Sequence, Tuple

from .config import (
    MOVEMENT_CHECK_INTERVAL_SECONDS,
    MOVEMENT_DISTANCE_THRESHOLD_M,
    MOVEMENT_RETENTION_BUFFER_SECONDS,
    MOVEMENT_WINDOW_SECONDS,
)
from .geo import distance_meters, path_length_m
from .models import (
    EVENT_MOVEMENT_RESUMED,
    EVENT_STATIONARY,
    PHASE_COLLECTING,
    PHASE_MOVING,
    PHASE_STATIONARY,
    LocationSample,
    MovementState,
)
from .utils import to_utc_aware

_LOG = logging.getLogger(__name__)

Events = Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class MovementConfig:
    """Thresholds for the movement engine."""

    window: timedelta = timedelta(seconds=MOVEMENT_WINDOW_SECONDS)
    distance_threshold_m: float = MOVEMENT_DISTANCE_THRESHOLD_M
    retention_buffer: timedelta = timedelta(seconds=MOVEMENT_RETENTION_BUFFER_SECONDS)
    check_interval: timedelta = timedelta(seconds=MOVEMENT_CHECK_INTERVAL_SECONDS)

    @property
    def retention(self) -> timedelta:
        return self.window + self.retention_buffer


DEFAULT_MOVEMENT_CONFIG = MovementConfig()


def start_session(now: datetime) -> MovementState:
    """Return a fresh collecting state: empty history, throttle reset."""

    return MovementState(
        phase=PHASE_COLLECTING,
        history=(),
        session_start=to_utc_aware(now),
        last_notified=None,
    )


def end_session(state: MovementState) -> MovementState:
    """Discard all history and return to idle."""

    return MovementState()


def record_sample(
    state: MovementState,
    sample: LocationSample,
    config: MovementConfig = DEFAULT_MOVEMENT_CONFIG,
    now: Optional[datetime] = None,
) -> MovementState:
    """Append ``sample`` and prune history older than window + buffer.

    Samples are ignored while idle. A sample older than the newest retained
    one is rejected so the first/last displacement always follows time order;
    equal timestamps are accepted.
    """

    if not state.active:
        return state
    sample = replace(sample, timestamp=to_utc_aware(sample.timestamp))
    if state.history and sample.timestamp < state.history[-1].timestamp:
        _LOG.debug(
            "Rejecting out-of-order sample at %s (latest %s)",
            sample.timestamp,
            state.history[-1].timestamp,
        )
        return state
    reference = to_utc_aware(now) if now is not None else sample.timestamp
    cutoff = reference - config.retention
    history = tuple(s for s in state.history if s.timestamp > cutoff)
    if sample.timestamp > cutoff:
        history += (sample,)
    return replace(state, history=history)


def window_samples(
    state: MovementState,
    now: datetime,
    config: MovementConfig = DEFAULT_MOVEMENT_CONFIG,
) -> List[LocationSample]:
    cutoff = to_utc_aware(now) - config.window
    return [s for s in state.history if s.timestamp > cutoff]


def is_stationary_track(samples: Sequence[LocationSample], threshold_m: float) -> bool:
    """Return ``True`` when path length and net displacement are both small."""

    points = [(s.lat, s.lng) for s in samples]
    travelled = path_length_m(points)
    straight = distance_meters(points[0], points[-1])
    return travelled < threshold_m and straight < threshold_m


def evaluate(
    state: MovementState,
    now: datetime,
    paused: bool = False,
    config: MovementConfig = DEFAULT_MOVEMENT_CONFIG,
) -> Tuple[MovementState, Events]:
    """Re-judge the session at ``now`` and return the new state plus events.

    While ``paused`` a stationary transition is still recorded but not
    announced.
    """

    if not state.active or state.session_start is None:
        return state, ()
    now = to_utc_aware(now)
    if now - state.session_start < config.window:
        return state, ()
    recent = window_samples(state, now, config)
    if len(recent) < 2:
        return state, ()

    stationary_now = is_stationary_track(recent, config.distance_threshold_m)

    if stationary_now and not state.stationary:
        notify = not paused and (
            state.last_notified is None or now - state.last_notified > config.window
        )
        if notify:
            _LOG.info("Session stationary over the last %s", config.window)
            return (
                replace(state, phase=PHASE_STATIONARY, last_notified=now),
                (EVENT_STATIONARY,),
            )
        _LOG.debug("Session stationary; notification suppressed (paused=%s)", paused)
        return replace(state, phase=PHASE_STATIONARY), ()

    if not stationary_now and state.stationary:
        _LOG.info("Movement resumed after stationary period")
        return replace(state, phase=PHASE_MOVING), (EVENT_MOVEMENT_RESUMED,)

    if not stationary_now and state.phase == PHASE_COLLECTING:
        return replace(state, phase=PHASE_MOVING), ()

    return state, ()


def step(
    state: MovementState,
    sample: Optional[LocationSample],
    now: datetime,
    paused: bool = False,
    config: MovementConfig = DEFAULT_MOVEMENT_CONFIG,
) -> Tuple[MovementState, Events]:
    """Record ``sample`` (when given) and evaluate in one call."""

    if sample is not None:
        state = record_sample(state, sample, config, now=now)
    return evaluate(state, now, paused, config)


__all__ = [
    "DEFAULT_MOVEMENT_CONFIG",
    "Events",
    "MovementConfig",
    "end_session",
    "evaluate",
    "is_stationary_track",
    "record_sample",
    "start_session",
    "step",
    "window_samples",
]
