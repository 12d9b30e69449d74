"""Draft entry composer: text, freely placed images and sticky notes.

The composer exclusively owns the draft. ``submit()`` copies the draft into
a brand-new immutable ``Entry`` and resets, so nothing is shared between
the draft and committed entries.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from datetime import datetime

from loguru import logger

from stickerjournal.journal.catalog import (
    JOURNAL_BADGE,
    NEW_STICKER,
    NO_NOTES,
    UNTITLED,
    get_activity,
    get_decoration,
    get_mood,
    mood_badge,
)
from stickerjournal.journal.dates import format_date_label
from stickerjournal.journal.models import Entry, EntryImage, EntryNote

from .drag import DragController, ElementKind, Point, PointerCommand, PointerDown, PointerMove, PointerUp, Size

IMAGE_ORIGIN = Point(24, 24)
IMAGE_WIDTH = 220
IMAGE_ASPECT = 0.75

NOTE_TEXT = "New sticky note..."
NOTE_ORIGIN = Point(26, 84)
NOTE_CASCADE = 14
NOTE_WIDTH = 180
NOTE_HEIGHT = 136


@dataclass(frozen=True)
class PlacedImage:
    id: int
    src: str
    x: float
    y: float
    width: float = IMAGE_WIDTH

    @property
    def size(self) -> Size:
        return Size(self.width, round(self.width * IMAGE_ASPECT))


@dataclass(frozen=True)
class StickyNote:
    id: int
    text: str
    x: float
    y: float
    width: float = NOTE_WIDTH

    @property
    def size(self) -> Size:
        return Size(self.width, NOTE_HEIGHT)


class CanvasComposer:
    """Holds and edits the draft under construction."""

    def __init__(self) -> None:
        self.title = ""
        self.content = ""
        self.mood: str | None = None
        self.images: list[PlacedImage] = []
        self.notes: list[StickyNote] = []
        self.drag = DragController()
        self._last_id = 0

    def _next_id(self) -> int:
        self._last_id = max(int(time.time() * 1000), self._last_id + 1)
        return self._last_id

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def append_token(self, token: str) -> None:
        """Append to the body, space-separated unless empty or at a line start."""
        spacer = "" if not self.content or self.content.endswith("\n") else " "
        self.content = f"{self.content}{spacer}{token}"

    def select_mood(self, key: str) -> None:
        mood = get_mood(key)
        self.mood = key
        self.append_token(mood.token)

    def add_activity(self, key: str) -> None:
        self.append_token(get_activity(key).token)

    def add_decoration(self, key: str) -> None:
        self.append_token(get_decoration(key).token)

    @property
    def mood_label(self) -> str:
        return f"Feeling {get_mood(self.mood).title}" if self.mood else "Feeling Good"

    # ------------------------------------------------------------------
    # Images and notes
    # ------------------------------------------------------------------

    def place_image(self, src: str) -> PlacedImage:
        image = PlacedImage(id=self._next_id(), src=src, x=IMAGE_ORIGIN.x, y=IMAGE_ORIGIN.y)
        self.images.append(image)
        return image

    def remove_image(self, image_id: int) -> bool:
        before = len(self.images)
        self.images = [image for image in self.images if image.id != image_id]
        return len(self.images) != before

    def add_sticky_note(self) -> StickyNote:
        offset = len(self.notes) * NOTE_CASCADE
        note = StickyNote(id=self._next_id(), text=NOTE_TEXT, x=NOTE_ORIGIN.x + offset, y=NOTE_ORIGIN.y + offset)
        self.notes.append(note)
        return note

    def update_note_text(self, note_id: int, text: str) -> bool:
        for index, note in enumerate(self.notes):
            if note.id == note_id:
                self.notes[index] = replace(note, text=text)
                return True
        return False

    def remove_note(self, note_id: int) -> bool:
        before = len(self.notes)
        self.notes = [note for note in self.notes if note.id != note_id]
        return len(self.notes) != before

    def find_element(self, element_id: int) -> tuple[ElementKind, PlacedImage | StickyNote] | None:
        for image in self.images:
            if image.id == element_id:
                return ElementKind.IMAGE, image
        for note in self.notes:
            if note.id == element_id:
                return ElementKind.NOTE, note
        return None

    # ------------------------------------------------------------------
    # Dragging
    # ------------------------------------------------------------------

    def start_drag(self, element_id: int, pointer: Point) -> bool:
        found = self.find_element(element_id)
        if found is None:
            return False
        kind, element = found
        return self.drag.start(kind, element_id, pointer, Point(element.x, element.y))

    def update_drag_position(self, pointer: Point, container: Size) -> Point | None:
        """Move the dragged element under the pointer, clamped to the canvas."""
        session = self.drag.session
        if session is None:
            return None
        collection = self.images if session.kind is ElementKind.IMAGE else self.notes
        for index, element in enumerate(collection):
            if element.id == session.active_id:
                position = self.drag.position_for(pointer, element.size, container)
                collection[index] = replace(element, x=position.x, y=position.y)
                return position
        # Element was removed mid-drag
        self.drag.end()
        return None

    def end_drag(self) -> None:
        self.drag.end()

    def dispatch(self, command: PointerCommand) -> Point | bool | None:
        """Apply one pointer command."""
        if isinstance(command, PointerDown):
            return self.start_drag(command.element_id, command.pointer)
        if isinstance(command, PointerMove):
            return self.update_drag_position(command.pointer, command.container)
        if isinstance(command, PointerUp):
            self.end_drag()
            return None
        raise TypeError(f"Unknown pointer command: {command!r}")

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    @property
    def can_submit(self) -> bool:
        return bool(self.title.strip() or self.content.strip() or self.images or self.notes)

    def submit(self, entry_id: int | None = None, now: datetime | None = None) -> Entry | None:
        """Turn the draft into a new entry and reset; None when the draft is empty."""
        if not self.can_submit:
            return None

        now = now or datetime.now()
        entry = Entry(
            id=entry_id if entry_id is not None else self._next_id(),
            title=self.title.strip() or UNTITLED,
            content=self.content.strip() or NO_NOTES,
            date_label=format_date_label(now),
            images=tuple(EntryImage(src=image.src) for image in self.images),
            notes=tuple(
                EntryNote(text=note.text.strip(), x=note.x, y=note.y) for note in self.notes if note.text.strip()
            ),
            badges=(mood_badge(self.mood), JOURNAL_BADGE),
            sticker=NEW_STICKER,
        )
        logger.debug(f"Draft submitted as entry {entry.id}")
        self.reset()
        return entry

    def reset(self) -> None:
        self.title = ""
        self.content = ""
        self.images = []
        self.notes = []
        self.drag.end()

    def snapshot(self) -> dict:
        """JSON-ready view of the draft."""
        return {
            "title": self.title,
            "content": self.content,
            "mood": self.mood_label,
            "canSubmit": self.can_submit,
            "placedImages": [vars(image) for image in self.images],
            "stickyNotes": [vars(note) for note in self.notes],
            "drag": (
                {"kind": self.drag.session.kind.value, "activeId": self.drag.session.active_id}
                if self.drag.session
                else None
            ),
        }
