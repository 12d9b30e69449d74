"""Journal domain: entries, their persistence, and the views derived from them.

Provides the entry/profile models, the local persistence adapter, the
write-through entry store and search/calendar derivations. The top-level
application state lives in ``stickerjournal.journal.state``.
"""

from .browse import calendar_index, filter_entries, month_grid
from .models import Badge, Entry, EntryImage, EntryNote, Gender, Profile, Sticker
from .persistence import Err, LocalPersistence, Ok
from .store import EntryStore

__all__ = [
    "Badge",
    "Entry",
    "EntryImage",
    "EntryNote",
    "EntryStore",
    "Err",
    "Gender",
    "LocalPersistence",
    "Ok",
    "Profile",
    "Sticker",
    "calendar_index",
    "filter_entries",
    "month_grid",
]
