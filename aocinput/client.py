"""Client orchestrating cache, throttle, and fetch capability.

Responsibilities:
- Answer "give me resource X" from the cache first, falling through to one
  throttled network request on a miss.
- Load persisted state on construction and flush it exactly once on close.
- Stay safe when one client is shared by several threads.

Key types:
- `AocClient`: scoped client; use it as a context manager.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from .cache import InputCache
from .config import ClientConfig
from .errors import ClientClosedError, StoreError, TransportError
from .examples import Example
from .fetch import Fetcher, RequestsFetcher
from .identity import build_identity
from .keys import ResourceKey
from .store.base import PersistentStore
from .telemetry.logger import EventLogger
from .throttle import Throttle


_log = EventLogger("client")

KeyLike = ResourceKey | str | tuple[int, ...]


class AocClient:
    """Cache-first puzzle input client with a cross-run request cooldown.

    Usage:
        with AocClient(config) as client:
            text = client.get_input(2023, 1)

    Leaving the `with` block (normally or through an exception) flushes cache
    and throttle state to the persistent store exactly once.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        fetcher: Fetcher | None = None,
        store: PersistentStore | None = None,
        clock: Callable[[], float] = time.time,
        sleeper: Callable[[float], None] = time.sleep,
    ) -> None:
        """Validate config and restore persisted state.

        Args:
            config: Client settings; validated before any I/O.
            fetcher: Single-request capability; defaults to `RequestsFetcher`.
            store: Persistent store override; ignored when persistence is disabled.
            clock: Wall-clock source for the throttle.
            sleeper: Blocking sleep for the throttle.

        Raises:
            ConfigError: If the config is invalid or the store location is unusable.
        """

        config.validate()
        self.config = config
        self.identity = build_identity(
            config.contact or "",
            persistent_cache=config.persistent_cache,
        )
        self._session_token = (config.session_token or "").strip()
        self._fetcher: Fetcher = fetcher if fetcher is not None else RequestsFetcher(
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
        )

        self._store: PersistentStore | None = None
        if config.persistent_cache:
            self._store = store if store is not None else config.create_store()

        self.cache = InputCache()
        self.throttle = Throttle(
            clock=clock,
            sleeper=sleeper,
            store=self._store,
            eager_persistence=config.eager_persistence,
        )

        if self._store is not None:
            loaded = self.cache.load_from(self._store)
            self.throttle.load_from(self._store)
            _log.info("opened", persistent="true", cached_entries=loaded)
        else:
            _log.info("opened", persistent="false")

        self._state = threading.Condition()
        self._close_lock = threading.Lock()
        self._closed = False
        self._in_flight = 0
        self._key_locks: dict[ResourceKey, threading.Lock] = {}
        self._key_locks_guard = threading.Lock()
        self.flush_errors: list[StoreError] = []

    @property
    def store(self) -> PersistentStore | None:
        """Return the persistent store, or `None` when persistence is disabled."""

        return self._store

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> str:
        """Return `"idle"`, `"fetching"`, or `"closed"`."""

        with self._state:
            if self._closed:
                return "closed"
            if self._in_flight:
                return "fetching"
            return "idle"

    def get(self, key: KeyLike) -> str:
        """Return the body for a key, fetching it only when not cached.

        Raises:
            TransportError: If the fetch failed; the cache is left unchanged.
            ClientClosedError: If the client was closed.
        """

        resource_key = ResourceKey.parse(key)
        self._ensure_open()
        with self._key_lock(resource_key):
            cached = self.cache.get(resource_key)
            if cached is not None:
                return cached
            return self._fetch(resource_key)

    def get_without_cache(self, key: KeyLike) -> str:
        """Fetch a key ignoring any cached body, then cache the fresh body.

        Use this when a cached input is suspected to be corrupt. The request is
        still throttled.
        """

        resource_key = ResourceKey.parse(key)
        self._ensure_open()
        with self._key_lock(resource_key):
            return self._fetch(resource_key)

    def get_input(self, year: int, day: int, *, refresh: bool = False) -> str:
        """Return the personal puzzle input for a day."""

        key = ResourceKey(year, day)
        return self.get_without_cache(key) if refresh else self.get(key)

    def get_example(
        self,
        year: int,
        day: int,
        part: int = 1,
        *,
        refresh: bool = False,
    ) -> Example | None:
        """Return the worked example from the puzzle page, if one can be found.

        `part=2` fetches the page as it looks after part 1 is solved, which is
        when the part 2 example answer becomes visible.
        """

        key = ResourceKey(year, day, part)
        html = self.get_without_cache(key) if refresh else self.get(key)
        return Example.parse(html)

    def invalidate(self, key: KeyLike) -> bool:
        """Drop a cached body so the next `get` refetches it."""

        return self.cache.invalidate(ResourceKey.parse(key))

    def stats(self) -> dict[str, str]:
        """Return cache and throttle counters as display-ready strings."""

        last_request = self.throttle.last_request_time
        return {
            "cache_entries": str(len(self.cache)),
            "cache_hits": str(self.cache.hits),
            "cache_misses": str(self.cache.misses),
            "cache_hit_rate": f"{self.cache.hit_rate():.4f}",
            "last_request_time": f"{last_request:.3f}" if last_request is not None else "none",
            "persistent_cache": "true" if self._store is not None else "false",
        }

    def close(self) -> list[StoreError]:
        """Flush cache and throttle state once and reject further requests.

        Waits for in-flight requests (including a pending cooldown sleep)
        before flushing. A failure flushing one part does not skip the other.

        Returns:
            Store errors hit while flushing; empty on success or repeat calls.
        """

        with self._close_lock:
            with self._state:
                if self._closed:
                    return []
                self._closed = True
                while self._in_flight:
                    self._state.wait()

            errors: list[StoreError] = []
            if self._store is not None:
                with self.throttle.locked():
                    for part_name, flush in (
                        ("cache", self.cache.flush_to),
                        ("throttle", self.throttle.flush_to),
                    ):
                        try:
                            flush(self._store)
                        except StoreError as exc:
                            errors.append(exc)
                            _log.warning("flush_failed", part=part_name, operation=exc.operation)
                        except Exception as exc:
                            errors.append(
                                StoreError(operation=f"flush_{part_name}", detail=str(exc))
                            )
                            _log.warning(
                                "flush_failed",
                                part=part_name,
                                error_type=type(exc).__name__,
                            )
            self.flush_errors = errors
            _log.info("closed", flush_errors=len(errors))
            return list(errors)

    def __enter__(self) -> AocClient:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError("Client is closed; create a new client to fetch inputs.")

    def _key_lock(self, key: ResourceKey) -> threading.Lock:
        """Return the lock serializing requests for one key."""

        with self._key_locks_guard:
            return self._key_locks.setdefault(key, threading.Lock())

    def _fetch(self, key: ResourceKey) -> str:
        """Run one throttled request for a key and cache the body on success."""

        with self._state:
            self._ensure_open()
            self._in_flight += 1
        try:
            with self.throttle.gate() as waited:
                _log.info("fetch_start", key=key.token, waited_seconds=f"{waited:.3f}")
                try:
                    body = self._fetcher(key, self._session_token, self.identity)
                except TransportError as exc:
                    _log.warning(
                        "fetch_failed",
                        key=key.token,
                        failure_kind=exc.failure_kind,
                        status_code=exc.status_code if exc.status_code is not None else "none",
                    )
                    raise

            self.cache.insert(key, body)
            _log.info("fetch_complete", key=key.token, chars=len(body))
            if self._store is not None and self.config.eager_persistence:
                try:
                    self._store.save_cache({key: body})
                except Exception as exc:
                    _log.warning("save_failed", key=key.token, error_type=type(exc).__name__)
                else:
                    self.cache.mark_persisted(key, body)
            return body
        finally:
            with self._state:
                self._in_flight -= 1
                self._state.notify_all()
