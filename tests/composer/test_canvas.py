"""Tests for the draft composer."""

from datetime import datetime

import pytest

from stickerjournal.composer.canvas import (
    IMAGE_WIDTH,
    NOTE_CASCADE,
    NOTE_HEIGHT,
    NOTE_ORIGIN,
    NOTE_TEXT,
    NOTE_WIDTH,
    CanvasComposer,
)
from stickerjournal.composer.drag import Point, PointerDown, PointerMove, PointerUp, Size
from stickerjournal.journal.catalog import JOURNAL_BADGE, NEW_STICKER, NO_NOTES, UNTITLED


@pytest.fixture
def composer():
    return CanvasComposer()


class TestText:
    def test_append_token_spacing(self, composer):
        composer.append_token("#Gym")
        assert composer.content == "#Gym"
        composer.append_token("✨")
        assert composer.content == "#Gym ✨"
        composer.content += "\n"
        composer.append_token("#Movie")
        assert composer.content == "#Gym ✨\n#Movie"

    def test_select_mood(self, composer):
        composer.select_mood("calm")
        assert composer.mood == "calm"
        assert composer.mood_label == "Feeling Calm"
        assert composer.content == "\U0001f9d8"

    def test_default_mood_label(self, composer):
        assert composer.mood_label == "Feeling Good"

    def test_activity_and_decoration(self, composer):
        composer.add_activity("reading")
        composer.add_decoration("bolt")
        assert composer.content == "#Reading ⚡"

    def test_unknown_activity(self, composer):
        with pytest.raises(KeyError):
            composer.add_activity("skydiving")
        assert composer.content == ""


class TestElements:
    def test_sticky_notes_cascade(self, composer):
        first = composer.add_sticky_note()
        second = composer.add_sticky_note()
        assert first.text == NOTE_TEXT
        assert (first.x, first.y) == (NOTE_ORIGIN.x, NOTE_ORIGIN.y)
        assert (second.x, second.y) == (NOTE_ORIGIN.x + NOTE_CASCADE, NOTE_ORIGIN.y + NOTE_CASCADE)
        assert first.id != second.id
        assert second.size == Size(NOTE_WIDTH, NOTE_HEIGHT)

    def test_image_size_keeps_aspect(self, composer):
        image = composer.place_image("data:image/png;base64,AAA")
        assert image.size == Size(IMAGE_WIDTH, round(IMAGE_WIDTH * 0.75))

    def test_update_and_remove_note(self, composer):
        note = composer.add_sticky_note()
        assert composer.update_note_text(note.id, "hello")
        assert composer.notes[0].text == "hello"
        assert composer.remove_note(note.id)
        assert not composer.remove_note(note.id)
        assert not composer.update_note_text(note.id, "x")

    def test_remove_image(self, composer):
        image = composer.place_image("src")
        assert composer.remove_image(image.id)
        assert composer.images == []


class TestDragging:
    def test_drag_note_with_clamping(self, composer):
        note = composer.add_sticky_note()
        container = Size(400, 300)
        assert composer.dispatch(PointerDown(note.id, Point(36, 94)))
        position = composer.dispatch(PointerMove(Point(110, 150), container))
        assert position == Point(100, 140)
        # Dragged past the bottom-right corner
        position = composer.dispatch(PointerMove(Point(1000, 1000), container))
        assert position == Point(400 - NOTE_WIDTH, 300 - NOTE_HEIGHT)
        composer.dispatch(PointerUp())
        assert composer.drag.session is None
        assert (composer.notes[0].x, composer.notes[0].y) == (220, 164)

    def test_drag_image(self, composer):
        image = composer.place_image("src")
        composer.start_drag(image.id, Point(24, 24))
        composer.update_drag_position(Point(-50, 10), Size(800, 600))
        assert (composer.images[0].x, composer.images[0].y) == (0, 10)

    def test_pointer_down_on_unknown_element(self, composer):
        assert composer.dispatch(PointerDown(123, Point(0, 0))) is False
        assert composer.drag.session is None

    def test_move_without_drag(self, composer):
        assert composer.dispatch(PointerMove(Point(0, 0), Size(10, 10))) is None

    def test_removed_mid_drag(self, composer):
        note = composer.add_sticky_note()
        composer.start_drag(note.id, Point(30, 90))
        composer.remove_note(note.id)
        assert composer.update_drag_position(Point(50, 50), Size(400, 400)) is None
        assert composer.drag.session is None

    def test_only_one_drag_at_a_time(self, composer):
        first = composer.add_sticky_note()
        second = composer.add_sticky_note()
        composer.start_drag(first.id, Point(30, 90))
        assert composer.start_drag(second.id, Point(50, 110)) is False
        assert composer.drag.session.active_id == first.id

    def test_unknown_command(self, composer):
        with pytest.raises(TypeError):
            composer.dispatch("click")


class TestSubmit:
    def test_empty_draft_not_submitted(self, composer):
        composer.title = "   "
        assert not composer.can_submit
        assert composer.submit() is None

    def test_image_only_draft_gets_placeholders(self, composer):
        composer.place_image("data:image/png;base64,AAA")
        entry = composer.submit(entry_id=1, now=datetime(2024, 1, 5, 9))
        assert entry.title == UNTITLED
        assert entry.content == NO_NOTES
        assert entry.date_label == "Jan 5, 2024"
        assert [img.src for img in entry.images] == ["data:image/png;base64,AAA"]
        assert entry.notes == ()

    def test_badges_and_sticker(self, composer):
        composer.select_mood("happy")
        entry = composer.submit(entry_id=1)
        assert [b.label for b in entry.badges] == ["Happy", JOURNAL_BADGE.label]
        assert entry.sticker == NEW_STICKER

    def test_default_mood_badge(self, composer):
        composer.title = "x"
        assert composer.submit(entry_id=1).badges[0].label == "Mood"

    def test_blank_notes_are_dropped(self, composer):
        keep = composer.add_sticky_note()
        blank = composer.add_sticky_note()
        composer.update_note_text(keep.id, "  keep me ")
        composer.update_note_text(blank.id, "   ")
        entry = composer.submit(entry_id=1)
        assert [(n.text, n.x, n.y) for n in entry.notes] == [("keep me", keep.x, keep.y)]

    def test_submit_resets_draft_but_keeps_mood(self, composer):
        composer.select_mood("sleepy")
        composer.title = "Nap"
        composer.add_sticky_note()
        composer.submit(entry_id=1)
        assert composer.title == ""
        assert composer.content == ""
        assert composer.notes == []
        assert composer.images == []
        assert composer.mood == "sleepy"

    def test_entry_is_independent_of_draft(self, composer):
        note = composer.add_sticky_note()
        entry = composer.submit(entry_id=1)
        composer.notes.append(note)
        assert len(entry.notes) == 1

    def test_trims_text(self, composer):
        composer.title = "  Lake  "
        composer.content = "  heron \n"
        entry = composer.submit(entry_id=1)
        assert (entry.title, entry.content) == ("Lake", "heron")


def test_snapshot(composer):
    composer.title = "t"
    note = composer.add_sticky_note()
    composer.start_drag(note.id, Point(30, 90))
    snap = composer.snapshot()
    assert snap["canSubmit"] is True
    assert snap["mood"] == "Feeling Good"
    assert snap["stickyNotes"][0]["text"] == NOTE_TEXT
    assert snap["drag"] == {"kind": "note", "activeId": note.id}
