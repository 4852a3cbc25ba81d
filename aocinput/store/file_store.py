"""Filesystem-backed persistent store.

Responsibilities:
- Persist each cached body as its own file under a store root.
- Persist the last-request timestamp as a decimal epoch value.
- Write atomically (temp file + rename) so concurrent clients never read torn files.
- Serialize throttle decisions across processes with an OS-level file lock.

Layout under the store root:
- `<year>/<day>.txt` for puzzle inputs.
- `examples/<year>/<day>_<part>.html` for puzzle pages.
- `keys/<percent-encoded name>.txt` for named keys.
- `throttle_timestamp` for the last-request time.
- `.throttle.lock` for the cross-process lock.
"""

from __future__ import annotations

import contextlib
import math
import os
from pathlib import Path
import tempfile
from typing import Iterator, Mapping

from filelock import FileLock

from ..errors import ConfigError, StoreError
from ..keys import ResourceKey
from ..telemetry.logger import EventLogger
from .base import CacheSnapshot


_THROTTLE_FILENAME = "throttle_timestamp"
_LOCK_FILENAME = ".throttle.lock"
_INPUT_SUFFIX = ".txt"
_EXAMPLE_SUFFIX = ".html"

_log = EventLogger("store")


class FileStore:
    """`PersistentStore` implementation rooted at one directory."""

    def __init__(self, root: Path) -> None:
        """Initialize the store with its root directory."""

        self.root = Path(root)
        self._file_lock = FileLock(str(self.root / _LOCK_FILENAME))

    def prepare(self) -> FileStore:
        """Create the root directory and verify it is usable.

        Raises:
            ConfigError: If the root is not a writable directory.
        """

        if self.root.exists() and not self.root.is_dir():
            raise ConfigError(
                field="store_location",
                detail=f"Store location `{self.root}` exists but is not a directory.",
                hint="Point `store_location` at a directory or remove the file.",
            )
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(
                field="store_location",
                detail=f"Cannot create store location `{self.root}`: {exc}",
                hint="Choose a writable directory or disable the persistent cache.",
            ) from exc
        if not os.access(self.root, os.R_OK | os.W_OK | os.X_OK):
            raise ConfigError(
                field="store_location",
                detail=f"Store location `{self.root}` is not readable and writable.",
                hint="Fix directory permissions or disable the persistent cache.",
            )
        return self

    def path_for(self, key: ResourceKey) -> Path:
        """Return the file path holding the body for a key."""

        suffix = _EXAMPLE_SUFFIX if key.is_example else _INPUT_SUFFIX
        return self.root / f"{key.token}{suffix}"

    def _key_for(self, path: Path) -> ResourceKey | None:
        """Map a file under the root back to its key, or `None` for foreign files."""

        relative = path.relative_to(self.root).as_posix()
        for suffix in (_INPUT_SUFFIX, _EXAMPLE_SUFFIX):
            if relative.endswith(suffix):
                key = ResourceKey.from_token(relative[: -len(suffix)])
                if key is not None and self.path_for(key) == path:
                    return key
        return None

    def load_cache(self) -> CacheSnapshot | None:
        if not self.root.is_dir():
            return None

        snapshot: CacheSnapshot = {}
        try:
            paths = sorted(self.root.rglob("*"))
        except OSError as exc:
            _log.warning("scan_failed", root=self.root, error_type=type(exc).__name__)
            return None

        for path in paths:
            if not path.is_file():
                continue
            key = self._key_for(path)
            if key is None:
                continue
            try:
                snapshot[key] = path.read_bytes().decode("utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                _log.warning("entry_unreadable", key=key.token, error_type=type(exc).__name__)
        return snapshot or None

    def save_cache(self, snapshot: Mapping[ResourceKey, str]) -> None:
        failures: list[str] = []
        for key, body in snapshot.items():
            try:
                _atomic_write_text(self.path_for(key), body)
            except OSError as exc:
                failures.append(f"{key.token} ({exc})")
        if failures:
            raise StoreError(
                operation="save_cache",
                detail=f"failed to write {', '.join(failures)}",
            )

    def load_throttle(self) -> float | None:
        path = self.root / _THROTTLE_FILENAME
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            _log.warning("throttle_unreadable", error_type=type(exc).__name__)
            return None
        try:
            timestamp = float(raw.strip())
        except ValueError:
            _log.warning("throttle_corrupt")
            return None
        if not math.isfinite(timestamp) or timestamp < 0.0:
            _log.warning("throttle_corrupt")
            return None
        return timestamp

    def save_throttle(self, timestamp: float) -> None:
        try:
            _atomic_write_text(self.root / _THROTTLE_FILENAME, repr(float(timestamp)))
        except OSError as exc:
            raise StoreError(operation="save_throttle", detail=str(exc)) from exc

    @contextlib.contextmanager
    def lock(self) -> Iterator[None]:
        """Hold the store-wide lock file; reentrant within one thread."""

        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(operation="lock", detail=str(exc)) from exc
        with self._file_lock:
            yield


def _atomic_write_text(path: Path, text: str) -> None:
    """Write text through a sibling temp file and rename it into place."""

    path.parent.mkdir(parents=True, exist_ok=True)
    descriptor, temp_name = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(descriptor, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(temp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(temp_name)
        raise
