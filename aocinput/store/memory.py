"""In-process persistent store variant.

Useful for hosts that share one store between several clients in a single
process, and for exercising persistence without touching the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import threading
from typing import Mapping

from ..keys import ResourceKey
from .base import CacheSnapshot


@dataclass(slots=True)
class MemoryStore:
    """Dictionary-backed `PersistentStore` implementation."""

    entries: dict[ResourceKey, str] = field(default_factory=dict)
    throttle_timestamp: float | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _coordination_lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def load_cache(self) -> CacheSnapshot | None:
        with self._lock:
            if not self.entries:
                return None
            return dict(self.entries)

    def save_cache(self, snapshot: Mapping[ResourceKey, str]) -> None:
        with self._lock:
            self.entries.update(snapshot)

    def load_throttle(self) -> float | None:
        with self._lock:
            return self.throttle_timestamp

    def save_throttle(self, timestamp: float) -> None:
        with self._lock:
            self.throttle_timestamp = float(timestamp)

    def lock(self) -> threading.RLock:
        return self._coordination_lock
