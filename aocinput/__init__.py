"""Top-level package for aocinput.

This package fetches per-user puzzle inputs politely: every input is requested
at most once and served from a local cache afterwards, and outbound requests
are spaced at least three minutes apart across runs. The main entry point is
`AocClient`.
"""

from .client import AocClient
from .config import ClientConfig, ConfigLoader
from .errors import ClientClosedError, ConfigError, StoreError, TransportError
from .examples import Example
from .identity import LIBRARY_VERSION
from .keys import ResourceKey
from .store import FileStore, MemoryStore, PersistentStore
from .throttle import COOLDOWN_SECONDS

__all__ = [
    "AocClient",
    "ClientConfig",
    "ConfigLoader",
    "ClientClosedError",
    "ConfigError",
    "StoreError",
    "TransportError",
    "Example",
    "ResourceKey",
    "FileStore",
    "MemoryStore",
    "PersistentStore",
    "COOLDOWN_SECONDS",
    "__version__",
]

__version__ = LIBRARY_VERSION
