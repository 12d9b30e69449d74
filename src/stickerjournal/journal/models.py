"""Core data models for the journal.

Entries and the profile are pydantic models so that the persistence
boundary can validate stored records explicitly. Field aliases keep the
stored JSON in the camelCase shape the browser build wrote
(``dateLabel``), so existing exports load unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator


class Gender(str, Enum):
    """Profile gender, used only to pick an avatar style."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Profile(BaseModel):
    """The single user's onboarding profile."""

    model_config = ConfigDict(frozen=True)

    name: str
    gender: Gender

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v


class Badge(BaseModel):
    """A small labeled tag rendered on an entry card."""

    model_config = ConfigDict(frozen=True)

    label: str
    icon: str
    tone: str


class Sticker(BaseModel):
    """Decorative provenance marker (new vs. scanned)."""

    model_config = ConfigDict(frozen=True)

    label: str
    icon: str
    tone: str
    tilt: str


class EntryImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    src: str


class EntryNote(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    x: float
    y: float


class Entry(BaseModel):
    """A persisted journal record.

    Attributes:
        id: Creation timestamp in milliseconds; unique within the store.
        title: Entry title.
        content: Body text.
        date_label: Display date (``"Jan 5, 2024"``); parsed back for filtering.
        badges: Ordered badges (mood / provenance, then category).
        images: Images copied from the draft canvas, if any.
        notes: Sticky notes copied from the draft canvas, if any.
        sticker: Provenance sticker.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: StrictInt
    title: str = ""
    content: str = ""
    date_label: str = Field(default="", alias="dateLabel")
    badges: tuple[Badge, ...] = ()
    images: tuple[EntryImage, ...] | None = None
    notes: tuple[EntryNote, ...] | None = None
    sticker: Sticker | None = None

    @field_validator("badges", mode="before")
    @classmethod
    def _default_badges(cls, v: Any) -> Any:
        # Older records may lack badges or carry junk there
        if not isinstance(v, (list, tuple)):
            return ()
        return v

    def with_text(self, title: str | None = None, content: str | None = None) -> Entry:
        """Return a copy with title and/or content replaced; everything else is kept."""
        changes: dict[str, Any] = {}
        if title is not None:
            changes["title"] = title
        if content is not None:
            changes["content"] = content
        return self.model_copy(update=changes)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the stored JSON shape (camelCase, optional fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def search_haystacks(self) -> list[str]:
        """Lowercased strings a free-text query is matched against."""
        return [self.title.lower(), self.content.lower(), *(badge.label.lower() for badge in self.badges)]
