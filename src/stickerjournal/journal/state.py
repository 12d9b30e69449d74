"""Top-level application state.

``AppState`` owns every piece of shared mutable state (profile, entry
store, draft composer, browse inputs) and is passed explicitly to the
web layer and CLI. Persistence goes through the injected
``LocalPersistence``, so tests can hand in an in-memory store.
"""

from __future__ import annotations

from datetime import date

from loguru import logger

from stickerjournal.composer.canvas import CanvasComposer
from stickerjournal.core.storage import KeyValueStore

from .browse import calendar_index, filter_entries
from .catalog import NO_NOTES, UNTITLED
from .dates import coerce_date_key
from .models import Entry, Profile
from .persistence import LocalPersistence
from .store import EntryStore


class AppState:
    """Everything the journal UI reads and writes."""

    def __init__(self, persistence: LocalPersistence):
        self.persistence = persistence
        self.profile: Profile | None = persistence.load_profile()
        self.entries = EntryStore.load(persistence)
        self.composer = CanvasComposer()
        self.query = ""
        self.selected_date_key: str | None = None

    @classmethod
    def from_store(cls, store: KeyValueStore) -> AppState:
        return cls(LocalPersistence(store))

    # ------------------------------------------------------------------
    # Committing entries
    # ------------------------------------------------------------------

    def submit_draft(self) -> Entry | None:
        """Commit the composer's draft; None when there is nothing to save."""
        entry = self.composer.submit(entry_id=self.entries.next_id())
        if entry is None:
            return None
        self.entries.append(entry)
        self.query = ""
        logger.info(f"Saved entry {entry.id}: {entry.title!r}")
        return entry

    def commit_scanned(self, entry: Entry) -> None:
        """Commit callback for the scan pipeline."""
        self.entries.append(entry)
        self.query = ""

    def edit_entry(self, entry_id: int, title: str, content: str) -> Entry | None:
        """Save edits from the entry dialog; blank fields fall back to placeholders."""
        return self.entries.update(entry_id, title=title.strip() or UNTITLED, content=content.strip() or NO_NOTES)

    # ------------------------------------------------------------------
    # Browsing
    # ------------------------------------------------------------------

    def set_query(self, query: str) -> None:
        self.query = query

    def select_date(self, value: date | str | None) -> str | None:
        """Select a calendar day; selecting the already-selected day clears it."""
        key = coerce_date_key(value)
        self.selected_date_key = None if key == self.selected_date_key else key
        return self.selected_date_key

    def clear_date(self) -> None:
        self.selected_date_key = None

    def visible_entries(self) -> list[Entry]:
        return filter_entries(self.entries.all(), self.query, self.selected_date_key)

    def calendar(self) -> dict[str, int]:
        return calendar_index(self.entries.all())

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Forget the profile and every entry."""
        self.persistence.clear()
        self.entries = EntryStore(self.persistence, entries=[])
        self.profile = None
        self.composer.reset()
        self.query = ""
        self.selected_date_key = None
