"""Session-scoped driver for the movement engine.

:class:`MovementMonitor` owns one session's :class:`MovementState`, serialises
the position stream and the periodic evaluator behind a lock, and turns engine
events into ``on_stationary`` / ``on_movement_resumed`` callbacks.
:class:`SessionRegistry` keeps one monitor per user so concurrent sessions
never share state.
"""

from __future__ import annotations

from datetime import datetime
from functools import partial
import logging
import time
from threading import RLock, Timer
from typing import Callable, Hashable, Iterable, Optional

from cachetools import TTLCache

from .config import SESSION_REGISTRY_MAX_SESSIONS, SESSION_REGISTRY_TTL_SECONDS
from .errors import SessionLimitError
from .models import (
    EVENT_MOVEMENT_RESUMED,
    EVENT_STATIONARY,
    LocationSample,
    MovementState,
)
from .movement import (
    DEFAULT_MOVEMENT_CONFIG,
    MovementConfig,
    end_session,
    evaluate,
    record_sample,
    start_session,
)
from .utils import utc_now

Callback = Callable[[], None]
Clock = Callable[[], datetime]


class MovementMonitor:
    """Single-writer movement detection for one active session."""

    def __init__(
        self,
        on_stationary: Callback,
        on_movement_resumed: Optional[Callback] = None,
        *,
        config: MovementConfig = DEFAULT_MOVEMENT_CONFIG,
        clock: Clock = utc_now,
        auto_tick: bool = True,
    ) -> None:
        self._log = logging.getLogger(self.__class__.__name__)
        self._on_stationary = on_stationary
        self._on_movement_resumed = on_movement_resumed
        self._config = config
        self._clock = clock
        self._auto_tick = auto_tick
        self._lock = RLock()
        self._state = MovementState()
        self._paused = False
        self._timer: Optional[Timer] = None
        # Bumped on every start/stop so a timer armed for an old session
        # cannot evaluate the new one.
        self._generation = 0
        self._activity_listener: Optional[Callback] = None

    # -- public API -------------------------------------------------------
    @property
    def state(self) -> MovementState:
        with self._lock:
            return self._state

    @property
    def is_active(self) -> bool:
        return self.state.active

    @property
    def is_stationary(self) -> bool:
        return self.state.stationary

    @property
    def is_paused(self) -> bool:
        with self._lock:
            return self._paused

    @property
    def sample_count(self) -> int:
        return len(self.state.history)

    def start(self) -> None:
        """Begin (or restart) a session with empty history."""

        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._state = start_session(self._clock())
            self._paused = False
            if self._auto_tick:
                self._arm_timer(self._generation)
        self._log.debug("Movement session started")

    def stop(self) -> None:
        """End the session and discard its history."""

        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._state = end_session(self._state)
            self._paused = False
        self._log.debug("Movement session ended")

    def set_activity_listener(self, listener: Optional[Callback]) -> None:
        """Register a hook called after every position fix while active."""

        with self._lock:
            self._activity_listener = listener

    def pause(self) -> None:
        with self._lock:
            self._paused = True

    def resume(self) -> None:
        with self._lock:
            self._paused = False

    def add_position(
        self, lat: float, lng: float, timestamp: Optional[datetime] = None
    ) -> None:
        """Feed a GPS fix and re-evaluate immediately."""

        with self._lock:
            if not self._state.active:
                return
            now = self._clock()
            sample = LocationSample(lat=lat, lng=lng, timestamp=timestamp or now)
            self._state = record_sample(self._state, sample, self._config, now=now)
            events = self._evaluate_locked(now)
            listener = self._activity_listener
        if listener is not None:
            try:
                listener()
            except Exception:
                self._log.exception("Activity listener failed")
        self._dispatch(events)

    def tick(self) -> None:
        """Evaluate without a new sample; what the periodic timer calls."""

        with self._lock:
            if not self._state.active:
                return
            events = self._evaluate_locked(self._clock())
        self._dispatch(events)

    # -- internals --------------------------------------------------------
    def _evaluate_locked(self, now: datetime) -> Iterable[str]:
        self._state, events = evaluate(self._state, now, self._paused, self._config)
        return events

    def _dispatch(self, events: Iterable[str]) -> None:
        # Callbacks run outside the lock so they may call back into the monitor.
        for event in events:
            callback: Optional[Callback]
            if event == EVENT_STATIONARY:
                callback = self._on_stationary
            elif event == EVENT_MOVEMENT_RESUMED:
                callback = self._on_movement_resumed
            else:  # pragma: no cover - engine only emits the two events
                callback = None
            if callback is None:
                continue
            try:
                callback()
            except Exception:
                self._log.exception("Movement callback for %s failed", event)

    def _arm_timer(self, generation: int) -> None:
        interval = self._config.check_interval.total_seconds()
        timer = Timer(interval, self._on_timer, args=(generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or not self._state.active:
                return
            self._arm_timer(generation)
        try:
            self.tick()
        except Exception:  # pragma: no cover - timer thread must survive
            self._log.exception("Periodic movement check failed")


MonitorFactory = Callable[[Hashable], MovementMonitor]


class _MonitorCache(TTLCache):
    """TTL cache that stops the monitors it expires so their timers die too."""

    def expire(self, now=None):  # type: ignore[override]
        expired = super().expire(now)
        for _key, monitor in expired or ():
            monitor.stop()
        return expired


class SessionRegistry:
    """Thread-safe map of session key -> monitor with idle expiry.

    A session counts as idle once neither ``get_or_create`` nor a position fix
    has touched it for ``ttl_seconds``. Live sessions are never evicted to make
    room: when every slot holds an active monitor, new sessions are refused
    with :class:`~pace_match.errors.SessionLimitError`.
    """

    def __init__(
        self,
        factory: MonitorFactory,
        *,
        max_sessions: int = SESSION_REGISTRY_MAX_SESSIONS,
        ttl_seconds: float = SESSION_REGISTRY_TTL_SECONDS,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._log = logging.getLogger(self.__class__.__name__)
        self._factory = factory
        self._lock = RLock()
        self._monitors: TTLCache[Hashable, MovementMonitor] = _MonitorCache(
            maxsize=max(1, max_sessions), ttl=max(1.0, ttl_seconds), timer=timer
        )

    def get(self, key: Hashable) -> Optional[MovementMonitor]:
        with self._lock:
            return self._monitors.get(key)

    def get_or_create(self, key: Hashable) -> MovementMonitor:
        """Return the monitor for ``key``, creating and starting one if needed.

        Raises:
            SessionLimitError: when the registry is full of active sessions.
        """

        with self._lock:
            monitor = self._monitors.get(key)
            if monitor is not None and monitor.is_active:
                # Reinsert to refresh the idle TTL.
                self._monitors[key] = monitor
                return monitor
            if monitor is None:
                self._make_room()
            monitor = self._factory(key)
            monitor.set_activity_listener(partial(self.touch, key, monitor))
            monitor.start()
            self._monitors[key] = monitor
            self._log.debug("Started movement session for %s", key)
            return monitor

    def touch(self, key: Hashable, monitor: Optional[MovementMonitor] = None) -> bool:
        """Refresh the idle TTL of ``key``; ``False`` when it is not tracked.

        When ``monitor`` is given, only that exact monitor is refreshed so a
        replaced session cannot keep its successor's slot alive.
        """

        with self._lock:
            current = self._monitors.get(key)
            if current is None or (monitor is not None and current is not monitor):
                return False
            self._monitors[key] = current
            return True

    def end(self, key: Hashable) -> bool:
        """Stop and forget the session for ``key``; ``False`` when unknown."""

        with self._lock:
            monitor = self._monitors.pop(key, None)
        if monitor is None:
            return False
        monitor.stop()
        return True

    def end_all(self) -> None:
        with self._lock:
            monitors = list(self._monitors.values())
            self._monitors.clear()
        for monitor in monitors:
            monitor.stop()

    def expire(self) -> None:
        """Drop and stop sessions idle for longer than the TTL."""

        with self._lock:
            self._monitors.expire()

    def _make_room(self) -> None:
        self._monitors.expire()
        if self._monitors.currsize < self._monitors.maxsize:
            return
        finished = [k for k, m in list(self._monitors.items()) if not m.is_active]
        if finished:
            # Finished sessions hold no timer, so dropping them stops nothing.
            del self._monitors[finished[0]]
            return
        self._log.warning(
            "Session limit reached (%d active); refusing new session",
            self._monitors.maxsize,
        )
        raise SessionLimitError(
            f"All {self._monitors.maxsize} movement sessions are active"
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._monitors)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._monitors


__all__ = ["MovementMonitor", "SessionRegistry"]
