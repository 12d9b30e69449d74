"""In-memory key-value backend, the test double for the local store."""

from collections.abc import Iterator

from .base import KeyValueStore, StoragePermissionError, StorageQuotaError


class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed store with optional failure injection.

    Args:
        quota_bytes: Maximum total value size; 0 disables the check.
        fail_reads: Raise StoragePermissionError on every read.
        fail_writes: Raise StorageQuotaError on every write.
    """

    def __init__(
        self,
        namespace: str = "sticker_journal",
        quota_bytes: int = 0,
        fail_reads: bool = False,
        fail_writes: bool = False,
        **config,
    ):
        super().__init__(namespace=namespace, **config)
        self.quota_bytes = quota_bytes
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self._data: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        if self.fail_reads:
            raise StoragePermissionError("Storage is disabled.")
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageQuotaError("Storage quota exceeded.")
        if self.quota_bytes:
            current = self.used_bytes() - len(self._data.get(key, "").encode("utf-8"))
            if current + len(value.encode("utf-8")) > self.quota_bytes:
                raise StorageQuotaError(f"Writing '{key}' would exceed the {self.quota_bytes} byte quota.")
        self._data[key] = value

    def remove_item(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> Iterator[str]:
        yield from list(self._data)
