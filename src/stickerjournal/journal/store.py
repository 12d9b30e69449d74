"""In-memory entry store with write-through persistence.

The store is the single source of truth for displayed entries. It keeps
them newest-first: ``append`` prepends, and ids are creation timestamps, so
insertion order is reverse-chronological by construction. Every mutation
persists the full list immediately.
"""

from __future__ import annotations

import time
from collections.abc import Iterator

from loguru import logger

from stickerjournal.core.exceptions import DuplicateEntryError

from .models import Entry
from .persistence import LocalPersistence


class EntryStore:
    """Ordered, persisted list of journal entries.

    Example::

        store = EntryStore(LocalPersistence(MemoryKeyValueStore()))
        store.append(entry)
        store.update(entry.id, title="Renamed")
        newest = store.all()[0]
    """

    def __init__(self, persistence: LocalPersistence, entries: list[Entry] | None = None):
        self.persistence = persistence
        self._entries: list[Entry] = list(entries) if entries is not None else persistence.load_entries()

    @classmethod
    def load(cls, persistence: LocalPersistence) -> EntryStore:
        return cls(persistence)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.all())

    def __contains__(self, entry_id: object) -> bool:
        return any(entry.id == entry_id for entry in self._entries)

    def all(self) -> tuple[Entry, ...]:
        """Entries newest-first, as a read-only view."""
        return tuple(self._entries)

    def get(self, entry_id: int) -> Entry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def next_id(self, now_ms: int | None = None) -> int:
        """A millisecond timestamp id greater than every stored id."""
        candidate = now_ms if now_ms is not None else int(time.time() * 1000)
        newest = max((entry.id for entry in self._entries), default=0)
        return max(candidate, newest + 1)

    def append(self, entry: Entry) -> None:
        """Add an entry at the front.

        Raises:
            DuplicateEntryError: If an entry with the same id exists.
        """
        if entry.id in self:
            raise DuplicateEntryError(f"Entry {entry.id} already exists")
        self._entries.insert(0, entry)
        logger.debug(f"Appended entry {entry.id} ({len(self._entries)} total)")
        self._persist()

    def update(self, entry_id: int, title: str | None = None, content: str | None = None) -> Entry | None:
        """Replace title and/or content of one entry; no-op if the id is absent."""
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                updated = entry.with_text(title=title, content=content)
                self._entries[index] = updated
                self._persist()
                return updated
        return None

    def remove(self, entry_id: int) -> bool:
        before = len(self._entries)
        self._entries = [entry for entry in self._entries if entry.id != entry_id]
        if len(self._entries) == before:
            return False
        self._persist()
        return True

    def clear(self) -> None:
        self._entries = []
        self._persist()

    def _persist(self) -> None:
        self.persistence.save_entries(self._entries)
