"""Persistent store protocol and its bundled implementations."""

from .base import CacheSnapshot, PersistentStore
from .file_store import FileStore
from .memory import MemoryStore

__all__ = ["CacheSnapshot", "PersistentStore", "FileStore", "MemoryStore"]
