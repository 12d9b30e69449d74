"""
Local filesystem key-value backend.

Each key is one UTF-8 file under ``<base_path>/<namespace>/``. Writes go
through a temporary file and an atomic replace so a crash never leaves a
half-written value behind.
"""

import contextlib
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

from loguru import logger

from .base import KeyValueStore, StorageError, StoragePermissionError, StorageQuotaError

_VALUE_SUFFIX = ".json"


class LocalKeyValueStore(KeyValueStore):
    """Filesystem-backed local store with a byte quota."""

    def __init__(
        self,
        base_path: str = "~/.stickerjournal-data/storage",
        namespace: str = "sticker_journal",
        quota_bytes: int = 0,
        **config,
    ):
        super().__init__(namespace=namespace, **config)
        self.quota_bytes = quota_bytes
        self.base_path = (Path(base_path).expanduser() / namespace).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        """Resolve a key to a file under ``base_path``.

        Rejects empty keys, path separators, null bytes and traversal so a key
        can never address anything outside the namespace directory.
        """
        raw_key = key.strip()
        if not raw_key:
            raise StoragePermissionError("Storage key cannot be empty.")
        if "\x00" in raw_key:
            raise StoragePermissionError("Storage key cannot contain null bytes.")
        if "/" in raw_key or "\\" in raw_key or raw_key.startswith("~") or raw_key in (".", ".."):
            raise StoragePermissionError(f"Unsafe storage key '{key}'.")

        full_path = (self.base_path / f"{raw_key}{_VALUE_SUFFIX}").resolve()
        try:
            full_path.relative_to(self.base_path)
        except ValueError as e:
            raise StoragePermissionError(f"Unsafe storage key '{key}': path traversal is not allowed.") from e
        return full_path

    def get_item(self, key: str) -> str | None:
        path = self._get_full_path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read {path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._get_full_path(key)
        try:
            encoded = value.encode("utf-8")
        except UnicodeError as e:
            raise StorageError(f"Cannot encode value for '{key}': {e}") from e

        if self.quota_bytes:
            others = sum(
                (self.base_path / f"{k}{_VALUE_SUFFIX}").stat().st_size for k in self.keys() if k != key.strip()
            )
            if others + len(encoded) > self.quota_bytes:
                raise StorageQuotaError(f"Writing '{key}' would exceed the {self.quota_bytes} byte quota.")

        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.base_path, prefix=".tmp-", suffix=_VALUE_SUFFIX)
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot write to {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot write to {path}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(encoded)
            os.replace(tmp_name, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            if isinstance(e, PermissionError):
                raise StoragePermissionError(f"Cannot write to {path}: {e}") from e
            raise StorageError(f"Cannot write to {path}: {e}") from e

        logger.debug(f"Stored {len(encoded)} bytes under '{key}'")

    def remove_item(self, key: str) -> bool:
        path = self._get_full_path(key)
        if not path.exists():
            return False
        try:
            path.unlink()
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot delete {path}: {e}") from e
        return True

    def keys(self) -> Iterator[str]:
        for path in sorted(self.base_path.glob(f"*{_VALUE_SUFFIX}")):
            if path.name.startswith(".tmp-"):
                continue
            yield path.name[: -len(_VALUE_SUFFIX)]
