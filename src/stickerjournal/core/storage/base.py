"""
Abstract base class for key-value storage backends.

Mirrors the browser local-storage contract: string values under string keys,
scoped to a namespace. Backends raise StorageError subclasses on failure;
callers decide whether to degrade or propagate.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator


class KeyValueStore(ABC):
    """Abstract base class for key-value storage backends."""

    def __init__(self, namespace: str = "sticker_journal", **config):
        self.namespace = namespace
        self.config = config

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> bool:
        """Delete a key. Returns True if deleted, False if it didn't exist."""

    @abstractmethod
    def keys(self) -> Iterator[str]:
        """Iterate over stored keys in this namespace."""

    def clear(self) -> None:
        """Remove every key in this namespace."""
        for key in list(self.keys()):
            self.remove_item(key)

    def used_bytes(self) -> int:
        """Total UTF-8 size of all stored values."""
        total = 0
        for key in self.keys():
            value = self.get_item(key)
            if value is not None:
                total += len(value.encode("utf-8"))
        return total


class StorageError(Exception):
    """Base exception for storage errors."""


class StoragePermissionError(StorageError):
    """Raised when storage operation is not permitted."""


class StorageQuotaError(StorageError):
    """Raised when storage quota is exceeded."""
