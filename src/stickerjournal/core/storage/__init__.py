"""
Key-value storage backends for stickerjournal.

Provides the local-storage contract (string values under string keys in a
namespace) with a filesystem backend and an in-memory backend for tests.
"""

from .base import (
    KeyValueStore,
    StorageError,
    StoragePermissionError,
    StorageQuotaError,
)
from .local import LocalKeyValueStore
from .memory import MemoryKeyValueStore

__all__ = [
    "KeyValueStore",
    "LocalKeyValueStore",
    "MemoryKeyValueStore",
    "StorageError",
    "StoragePermissionError",
    "StorageQuotaError",
]
