"""Cooldown gate for outbound requests.

Responsibilities:
- Enforce a minimum interval between consecutive outbound requests.
- Make "wait, then record the request start" one lock-protected critical section.
- Persist and restore the last-request timestamp through a `PersistentStore`.
- Hold the store-wide lock while deciding, so clients sharing a store never overlap.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
import math
import threading
import time
from typing import Callable, Iterator

from .store.base import PersistentStore
from .telemetry.logger import EventLogger


COOLDOWN_SECONDS = 180.0
# Persisted timestamps further ahead than this are treated as corrupt.
MAX_CLOCK_SKEW_SECONDS = 24 * 60 * 60.0

_log = EventLogger("throttle")


class Throttle:
    """Single-lock minimum-interval limiter with a wall-clock timestamp.

    The timestamp is wall-clock epoch time because it is shared with other
    processes through the store. A timestamp in the future (clock skew between
    machines sharing a store) is honored: the next request waits until that
    time plus the cooldown. Timestamps more than `MAX_CLOCK_SKEW_SECONDS` ahead
    are ignored as corrupt.
    """

    def __init__(
        self,
        cooldown_seconds: float = COOLDOWN_SECONDS,
        *,
        clock: Callable[[], float] = time.time,
        sleeper: Callable[[float], None] = time.sleep,
        store: PersistentStore | None = None,
        eager_persistence: bool = False,
    ) -> None:
        """Initialize the throttle.

        Args:
            cooldown_seconds: Minimum seconds between request starts.
            clock: Wall-clock source returning epoch seconds.
            sleeper: Blocking sleep used while waiting for the cooldown.
            store: Shared store consulted before each wait and, with eager
                persistence, written after each recorded request.
            eager_persistence: Save the timestamp as soon as it is recorded.
        """

        self.cooldown_seconds = cooldown_seconds
        self.clock = clock
        self.sleeper = sleeper
        self.store = store
        self.eager_persistence = eager_persistence
        self._last_request_at: float | None = None
        self._lock = threading.RLock()

    @property
    def last_request_time(self) -> float | None:
        """Return the start time of the most recent known request."""

        return self._last_request_at

    def _observe(self, timestamp: float | None) -> None:
        """Merge an externally known timestamp, keeping the latest one."""

        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            return
        if not math.isfinite(timestamp):
            return
        ahead = timestamp - self.clock()
        if ahead > MAX_CLOCK_SKEW_SECONDS:
            _log.warning("implausible_timestamp", ahead_seconds=f"{ahead:.3f}")
            return
        if self._last_request_at is None or timestamp > self._last_request_at:
            self._last_request_at = timestamp

    def _sync_with_store(self) -> None:
        """Pick up requests recorded by other clients sharing the store."""

        if self.store is None:
            return
        self._observe(self._safe_load(self.store))

    def seconds_until_ready(self) -> float:
        """Return how long the next request would have to wait right now."""

        with self._lock:
            return self._remaining(self.clock())

    def _remaining(self, now: float) -> float:
        last = self._last_request_at
        if last is None:
            return 0.0
        return max(0.0, last + self.cooldown_seconds - now)

    def wait_if_needed(self) -> float:
        """Block until the cooldown since the last request elapsed; return seconds waited."""

        with self._lock, self._store_lock(self.store):
            self._sync_with_store()
            now = self.clock()
            last = self._last_request_at
            if last is not None and last > now:
                _log.warning("future_timestamp", ahead_seconds=f"{last - now:.3f}")
            wait_seconds = self._remaining(now)
            if wait_seconds > 0.0:
                _log.info("wait", seconds=f"{wait_seconds:.3f}")
                self.sleeper(wait_seconds)
            return wait_seconds

    def record_request_time(self, timestamp: float | None = None) -> None:
        """Record the start of an outbound request issued right now (or at `timestamp`)."""

        with self._lock:
            self._last_request_at = self.clock() if timestamp is None else timestamp
            if self.eager_persistence and self.store is not None:
                try:
                    self.store.save_throttle(self._last_request_at)
                except Exception as exc:
                    _log.warning("save_failed", error_type=type(exc).__name__)

    @contextmanager
    def gate(self) -> Iterator[float]:
        """Wait for the cooldown and record the request start as one critical section.

        The store-wide lock is held across both steps, so another client
        sharing the store sees this request before it decides to send its own.

        Usage:
            with throttle.gate():
                fetch()
        """

        with self._lock, self._store_lock(self.store):
            waited = self.wait_if_needed()
            self.record_request_time()
        yield waited

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the throttle lock, waiting out any in-flight cooldown sleep."""

        with self._lock:
            yield

    def load_from(self, store: PersistentStore) -> float | None:
        """Restore the persisted timestamp; unreadable state means "no prior request"."""

        with self._lock:
            self._observe(self._safe_load(store))
            return self._last_request_at

    def flush_to(self, store: PersistentStore) -> None:
        """Persist the latest known timestamp without moving the stored one backwards."""

        with self._lock, self._store_lock(store):
            self._observe(self._safe_load(store))
            if self._last_request_at is None:
                return
            store.save_throttle(self._last_request_at)

    @staticmethod
    @contextmanager
    def _store_lock(store: PersistentStore | None) -> Iterator[None]:
        """Hold the store-wide lock when one can be taken; proceed unlocked otherwise."""

        with ExitStack() as stack:
            if store is not None:
                try:
                    stack.enter_context(store.lock())
                except Exception as exc:
                    _log.warning("lock_failed", error_type=type(exc).__name__)
            yield

    @staticmethod
    def _safe_load(store: PersistentStore) -> float | None:
        try:
            return store.load_throttle()
        except Exception as exc:
            _log.warning("load_failed", error_type=type(exc).__name__)
            return None
