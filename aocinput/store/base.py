"""Persistent store protocol shared by cache and throttle.

Responsibilities:
- Define the operations any durable backing must offer.
- Provide a cross-instance lock so clients sharing a backing space their requests.
- Fix the snapshot and timestamp types that flow through them.

Key types:
- `PersistentStore`: structural interface; implement it, do not subclass it.
- `CacheSnapshot`: mapping of resource keys to body text.
"""

from __future__ import annotations

from typing import ContextManager, Mapping, Protocol

from ..keys import ResourceKey


CacheSnapshot = dict[ResourceKey, str]


class PersistentStore(Protocol):
    """Durable backing for cached bodies and the last-request timestamp.

    Loads never raise for missing or corrupt data; they return `None` instead.
    Saves raise `StoreError` when the write did not happen.
    """

    def load_cache(self) -> CacheSnapshot | None:
        """Return every persisted entry, or `None` when nothing usable exists."""

    def save_cache(self, snapshot: Mapping[ResourceKey, str]) -> None:
        """Persist the given entries, leaving other persisted entries untouched."""

    def load_throttle(self) -> float | None:
        """Return the persisted last-request epoch timestamp, when known."""

    def save_throttle(self, timestamp: float) -> None:
        """Persist the last-request epoch timestamp."""

    def lock(self) -> ContextManager[object]:
        """Return a reentrant lock shared by every client using this backing.

        Held around "read timestamp, wait, record timestamp" so two clients
        never both observe "no recent request".
        """
