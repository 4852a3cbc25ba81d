"""In-memory puzzle body cache with optional persistent backing.

Responsibilities:
- Serve previously fetched bodies without network access.
- Load persisted entries fail-open and flush only entries this instance wrote.
- Track basic cache telemetry (hits/misses) for client statistics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import threading

from .keys import ResourceKey
from .store.base import CacheSnapshot, PersistentStore
from .telemetry.logger import EventLogger


_log = EventLogger("cache")


@dataclass(slots=True)
class InputCache:
    """Unbounded map from resource key to body text; entries never expire."""

    entries: dict[ResourceKey, str] = field(default_factory=dict)
    hits: int = 0
    misses: int = 0
    dirty: set[ResourceKey] = field(default_factory=set, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get(self, key: ResourceKey) -> str | None:
        """Return the cached body for key and update hit/miss telemetry counters."""

        with self._lock:
            if key in self.entries:
                self.hits += 1
                return self.entries[key]
            self.misses += 1
            return None

    def insert(self, key: ResourceKey, body: str) -> None:
        """Store a body under a key, replacing any existing entry and marking it unsaved."""

        with self._lock:
            self.entries[key] = body
            self.dirty.add(key)

    def invalidate(self, key: ResourceKey) -> bool:
        """Drop the entry for a key and report whether one existed."""

        with self._lock:
            self.dirty.discard(key)
            return self.entries.pop(key, None) is not None

    def snapshot(self) -> CacheSnapshot:
        """Return a point-in-time copy of all entries."""

        with self._lock:
            return dict(self.entries)

    def load_from(self, store: PersistentStore) -> int:
        """Populate entries from a store and return how many were loaded.

        Missing, corrupt, or unreadable persisted data leaves the cache as it was.
        """

        try:
            snapshot = store.load_cache()
        except Exception as exc:
            _log.warning("load_failed", error_type=type(exc).__name__)
            return 0
        if not snapshot:
            return 0

        loaded = 0
        with self._lock:
            for key, body in snapshot.items():
                if not isinstance(key, ResourceKey) or not isinstance(body, str):
                    _log.warning("entry_skipped", key_type=type(key).__name__)
                    continue
                self.entries[key] = body
                loaded += 1
        _log.debug("loaded", entries=loaded)
        return loaded

    def mark_persisted(self, key: ResourceKey, body: str) -> None:
        """Clear the unsaved flag for a key if its body is still the one persisted."""

        with self._lock:
            if self.entries.get(key) == body:
                self.dirty.discard(key)

    def unsaved(self) -> CacheSnapshot:
        """Return entries inserted by this instance and not yet persisted."""

        with self._lock:
            return {key: self.entries[key] for key in sorted(self.dirty) if key in self.entries}

    def flush_to(self, store: PersistentStore) -> None:
        """Write unsaved entries to a store; store errors propagate to the caller.

        Entries only loaded from the store are never written back, so a stale
        copy cannot overwrite a body another client refreshed meanwhile.
        """

        pending = self.unsaved()
        if not pending:
            return
        store.save_cache(pending)
        for key, body in pending.items():
            self.mark_persisted(key, body)

    def hit_rate(self) -> float:
        """Return cache hit rate for the current cache lifecycle."""

        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / float(total)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries
