"""Scan-to-entry pipeline.

Each scan walks a small state machine::

    Idle -> Preparing -> Scanning -> Creating -> Done | Failed

State changes happen only through ``reduce(state, command)``, a pure
function over immutable ``ScanState`` values, so the machine can be tested
without any I/O. ``ScanPipeline`` drives it: read the image, ask the OCR
oracle for text, template it, hand the new entry to ``on_commit``.

Only one scan runs at a time; starting another while one is in flight
raises ``ScanBusyError``.
"""

from __future__ import annotations

import base64
import mimetypes
import re
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from pathlib import Path

from loguru import logger

from stickerjournal.core.exceptions import OCRError, ScanBusyError
from stickerjournal.core.types import PathLike
from stickerjournal.journal.catalog import AUTO_STICKER, JOURNAL_BADGE, SCANNED_BADGE
from stickerjournal.journal.dates import format_date_label
from stickerjournal.journal.models import Entry, EntryImage

from .oracle import OcrOracle
from .template import build_scanned_template

AUTO_DISMISS_SECONDS = 1.8

MSG_PREPARING = "Preparing image..."
MSG_SCANNING = "Scanning image..."
MSG_CREATING = "Creating journal entry..."
MSG_DONE = "Scanned and saved."
MSG_NOT_LOCAL = "Only local uploaded images can be scanned."
MSG_UNEXPECTED = "Could not scan this image."
MSG_BUSY = "A scan is already in progress."
MSG_NO_IMAGES = "Only image files can be scanned."

_DATA_URI = re.compile(r"^data:(.*?);base64,(.*)$")


class ScanPhase(Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    SCANNING = "scanning"
    CREATING = "creating"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ScanState:
    phase: ScanPhase = ScanPhase.IDLE
    message: str = ""
    dialog_open: bool = False
    entry_id: int | None = None
    finished_at: float | None = None

    @property
    def busy(self) -> bool:
        return self.phase in (ScanPhase.PREPARING, ScanPhase.SCANNING, ScanPhase.CREATING)

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "message": self.message,
            "busy": self.busy,
            "dialogOpen": self.dialog_open,
            "entryId": self.entry_id,
        }


# ── Commands ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BeginPreparing:
    pass


@dataclass(frozen=True)
class BeginScanning:
    pass


@dataclass(frozen=True)
class TextExtracted:
    text: str


@dataclass(frozen=True)
class EntryCommitted:
    entry_id: int
    at: float


@dataclass(frozen=True)
class ScanFailed:
    message: str


@dataclass(frozen=True)
class Dismiss:
    pass


ScanCommand = BeginPreparing | BeginScanning | TextExtracted | EntryCommitted | ScanFailed | Dismiss

_SETTLED = (ScanPhase.IDLE, ScanPhase.DONE, ScanPhase.FAILED)

_ALLOWED: dict[type, tuple[ScanPhase, ...]] = {
    BeginPreparing: _SETTLED,
    BeginScanning: (*_SETTLED, ScanPhase.PREPARING),
    TextExtracted: (ScanPhase.SCANNING,),
    EntryCommitted: (ScanPhase.CREATING,),
    ScanFailed: (*_SETTLED, ScanPhase.PREPARING, ScanPhase.SCANNING, ScanPhase.CREATING),
    Dismiss: (ScanPhase.DONE, ScanPhase.FAILED),
}


def reduce(state: ScanState, command: ScanCommand) -> ScanState:
    """Next state for a command; commands that don't apply leave the state unchanged."""
    allowed = _ALLOWED.get(type(command))
    if allowed is None:
        raise TypeError(f"Unknown scan command: {command!r}")
    if state.phase not in allowed:
        logger.debug(f"Ignoring {type(command).__name__} in phase {state.phase.value}")
        return state

    if isinstance(command, BeginPreparing):
        return ScanState(phase=ScanPhase.PREPARING, message=MSG_PREPARING, dialog_open=True)
    if isinstance(command, BeginScanning):
        return ScanState(phase=ScanPhase.SCANNING, message=MSG_SCANNING, dialog_open=True)
    if isinstance(command, TextExtracted):
        return replace(state, phase=ScanPhase.CREATING, message=MSG_CREATING)
    if isinstance(command, EntryCommitted):
        return replace(
            state, phase=ScanPhase.DONE, message=MSG_DONE, entry_id=command.entry_id, finished_at=command.at
        )
    if isinstance(command, ScanFailed):
        return ScanState(phase=ScanPhase.FAILED, message=command.message, dialog_open=True)
    return ScanState()


# ── Image input ──────────────────────────────────────────────────────


def parse_data_uri(src: str) -> tuple[str, str] | None:
    """Split ``data:<mime>;base64,<payload>`` into (mime, payload)."""
    match = _DATA_URI.match(src or "")
    if not match:
        return None
    return match.group(1), match.group(2)


def image_to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def read_image_file(path: PathLike) -> str | None:
    """Read an image file as a data URI; None for anything that isn't an image."""
    mime_type, _ = mimetypes.guess_type(str(path))
    if not mime_type or not mime_type.startswith("image/"):
        logger.debug(f"Skipping non-image file {path}")
        return None
    return image_to_data_uri(Path(path).read_bytes(), mime_type)


# ── Driver ───────────────────────────────────────────────────────────


def build_scanned_entry(raw_text: str, image_src: str, entry_id: int, now: datetime | None = None) -> Entry:
    template = build_scanned_template(raw_text)
    return Entry(
        id=entry_id,
        title=template.title,
        content=template.content,
        date_label=format_date_label(now or datetime.now()),
        images=(EntryImage(src=image_src),) if image_src else None,
        badges=(SCANNED_BADGE, JOURNAL_BADGE),
        sticker=AUTO_STICKER,
    )


class ScanPipeline:
    """Runs scans against an OCR oracle and commits the resulting entries.

    Args:
        oracle: Text extraction service.
        on_commit: Receives each new entry (normally ``AppState.commit_scanned``).
        id_factory: Produces entry ids; defaults to millisecond timestamps.
        clock: Monotonic clock used for auto-dismiss timing.
    """

    def __init__(
        self,
        oracle: OcrOracle,
        on_commit: Callable[[Entry], None],
        id_factory: Callable[[], int] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.oracle = oracle
        self.on_commit = on_commit
        self.id_factory = id_factory or (lambda: int(time.time() * 1000))
        self.clock = clock
        self._state = ScanState()
        self._lock = threading.Lock()

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def _apply(self, command: ScanCommand) -> ScanState:
        self._state = reduce(self._state, command)
        logger.debug(f"Scan {self._state.phase.value}: {self._state.message}")
        return self._state

    def _acquire(self) -> None:
        if not self._lock.acquire(blocking=False):
            raise ScanBusyError(MSG_BUSY)

    def scan_source(self, src: str) -> ScanState:
        """Scan one image given as a data URI.

        Raises:
            ScanBusyError: If another scan is in flight.
        """
        self._acquire()
        try:
            self._apply(BeginPreparing())
            return self._scan(src)
        finally:
            self._lock.release()

    def scan_files(self, paths: Iterable[PathLike]) -> list[ScanState]:
        """Read and scan each image file in turn; non-image files are skipped."""
        self._acquire()
        try:
            self._apply(BeginPreparing())
            results = []
            for path in paths:
                src = read_image_file(path)
                if src is None:
                    continue
                results.append(self._scan(src))
            if not results:
                self._apply(ScanFailed(MSG_NO_IMAGES))
            return results
        finally:
            self._lock.release()

    def _scan(self, src: str) -> ScanState:
        parsed = parse_data_uri(src)
        if parsed is None:
            return self._apply(ScanFailed(MSG_NOT_LOCAL))
        mime_type, payload = parsed

        self._apply(BeginScanning())
        try:
            text = self.oracle.recognize(mime_type, payload)
        except OCRError as e:
            logger.warning(f"Scan failed: {e.message}")
            return self._apply(ScanFailed(e.message))
        except Exception as e:
            logger.exception(f"Scan failed unexpectedly: {e}")
            return self._apply(ScanFailed(MSG_UNEXPECTED))

        self._apply(TextExtracted(text))
        entry = build_scanned_entry(text, src, self.id_factory())
        try:
            self.on_commit(entry)
        except Exception as e:
            logger.exception(f"Could not commit scanned entry: {e}")
            return self._apply(ScanFailed(MSG_UNEXPECTED))
        logger.info(f"Scanned entry {entry.id} committed: {entry.title!r}")
        return self._apply(EntryCommitted(entry_id=entry.id, at=self.clock()))

    def should_auto_dismiss(self, now: float | None = None) -> bool:
        if self._state.phase is not ScanPhase.DONE or self._state.finished_at is None:
            return False
        now = self.clock() if now is None else now
        return now - self._state.finished_at >= AUTO_DISMISS_SECONDS

    def refresh(self) -> ScanState:
        """Apply the auto-dismiss of a finished scan once its delay has passed."""
        if self.should_auto_dismiss():
            return self._apply(Dismiss())
        return self._state

    def dismiss(self) -> ScanState:
        return self._apply(Dismiss())
