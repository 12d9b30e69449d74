"""Pointer-drag sessions for canvas elements.

Pointer input arrives as explicit command objects (``PointerDown``,
``PointerMove``, ``PointerUp``) so a drag can be replayed and tested
without a UI. At most one session is active at a time, whatever the
element kind; a pointer-down while a session is active is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ElementKind(Enum):
    IMAGE = "image"
    NOTE = "note"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class PointerDown:
    """Pointer pressed over an element; ``pointer`` is in canvas coordinates."""

    element_id: int
    pointer: Point


@dataclass(frozen=True)
class PointerMove:
    pointer: Point
    container: Size


@dataclass(frozen=True)
class PointerUp:
    """Pointer released anywhere in the window."""


PointerCommand = PointerDown | PointerMove | PointerUp


@dataclass(frozen=True)
class DragSession:
    kind: ElementKind
    active_id: int
    offset: Point


def clamp_axis(value: float, container: float, element: float) -> float:
    """Clamp to ``[0, container - element]``; collapses to 0 when the element is larger."""
    return min(max(value, 0), max(container - element, 0))


def clamp_position(pointer: Point, offset: Point, element: Size, container: Size) -> Point:
    """Top-left for an element dragged to ``pointer``, kept inside the container."""
    return Point(
        x=clamp_axis(pointer.x - offset.x, container.width, element.width),
        y=clamp_axis(pointer.y - offset.y, container.height, element.height),
    )


class DragController:
    """Tracks the single active drag session."""

    def __init__(self) -> None:
        self.session: DragSession | None = None

    @property
    def active(self) -> bool:
        return self.session is not None

    def start(self, kind: ElementKind, element_id: int, pointer: Point, origin: Point) -> bool:
        """Begin dragging; remembers the pointer's offset from the element's top-left.

        Returns False (and changes nothing) if a session is already active.
        """
        if self.session is not None:
            return False
        offset = Point(pointer.x - origin.x, pointer.y - origin.y)
        self.session = DragSession(kind=kind, active_id=element_id, offset=offset)
        return True

    def position_for(self, pointer: Point, element: Size, container: Size) -> Point | None:
        if self.session is None:
            return None
        return clamp_position(pointer, self.session.offset, element, container)

    def end(self) -> None:
        self.session = None
