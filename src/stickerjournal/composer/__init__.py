"""Canvas composer: the draft entry and pointer-driven placement of images and notes."""

from .canvas import CanvasComposer, PlacedImage, StickyNote
from .drag import DragController, DragSession, ElementKind, Point, PointerDown, PointerMove, PointerUp, Size

__all__ = [
    "CanvasComposer",
    "DragController",
    "DragSession",
    "ElementKind",
    "PlacedImage",
    "Point",
    "PointerDown",
    "PointerMove",
    "PointerUp",
    "Size",
    "StickyNote",
]
