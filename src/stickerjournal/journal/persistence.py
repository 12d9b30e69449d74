"""Local persistence adapter for the profile and the entry list.

Two keys in a namespaced key-value store hold the serialized profile and
entry list. Reads validate against the pydantic models and come back as
``Ok``/``Err`` results; the ``load_*``/``save_*`` methods wrap those in the
never-raising contract the rest of the app relies on: any storage or shape
problem degrades to ``None`` / ``[]``, any write failure is a logged no-op.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from stickerjournal.core.storage import KeyValueStore, StorageError

from .models import Badge, Entry, Profile

PROFILE_KEY = "profile_v1"
ENTRIES_KEY = "entries_v1"

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    """A read that could not produce data.

    Attributes:
        reason: ``"unavailable"`` (storage raised), ``"corrupt"`` (not JSON)
            or ``"shape"`` (JSON of the wrong structure).
        message: Human-readable detail for logs.
    """

    reason: str
    message: str = ""


ReadResult = Ok[T] | Err


def _has_numeric_id(record: dict[str, Any]) -> bool:
    value = record.get("id")
    return isinstance(value, int) and not isinstance(value, bool)


def _repair(record: dict[str, Any], error: PydanticValidationError) -> dict[str, Any]:
    """Fall back to defaults for the optional fields named in ``error``.

    Invalid badges are filtered out one by one; any other broken field is
    removed so the model default applies.
    """
    repaired = dict(record)
    for field in {err["loc"][0] for err in error.errors() if err["loc"]}:
        if field == "badges" and isinstance(repaired.get("badges"), list):
            repaired["badges"] = [badge for badge in repaired["badges"] if _valid_badge(badge)]
        elif field != "id":
            repaired.pop(field, None)
    return repaired


def _valid_badge(value: Any) -> bool:
    try:
        Badge.model_validate(value)
    except PydanticValidationError:
        return False
    return True


def sanitize_entries(records: Iterable[Any]) -> list[Entry]:
    """Validate raw records one by one, dropping the ones that don't fit.

    Records without an integer ``id`` are skipped. For the rest, broken
    optional fields fall back to their defaults (``title: null`` becomes
    ``""``, malformed badges are left out) rather than losing the record.
    """
    entries: list[Entry] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning(f"Dropping stored entry #{index}: not an object")
            continue
        if not _has_numeric_id(record):
            logger.warning(f"Dropping stored entry #{index}: missing numeric id")
            continue
        try:
            entries.append(Entry.model_validate(record))
        except PydanticValidationError as e:
            logger.warning(f"Repairing stored entry #{index}: {e.error_count()} validation error(s)")
            try:
                entries.append(Entry.model_validate(_repair(record, e)))
            except PydanticValidationError as retry_error:
                logger.warning(f"Dropping stored entry #{index}: {retry_error.error_count()} validation error(s)")
    return entries


class LocalPersistence:
    """Profile + entry persistence over a ``KeyValueStore``."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    # ------------------------------------------------------------------
    # Typed reads
    # ------------------------------------------------------------------

    def _read_json(self, key: str) -> ReadResult[Any]:
        try:
            raw = self.store.get_item(key)
        except StorageError as e:
            return Err("unavailable", str(e))
        if not raw:
            return Ok(None)
        try:
            return Ok(json.loads(raw))
        except json.JSONDecodeError as e:
            return Err("corrupt", f"{key}: {e}")

    def read_profile(self) -> ReadResult[Profile | None]:
        result = self._read_json(PROFILE_KEY)
        if isinstance(result, Err) or result.value is None:
            return result
        try:
            return Ok(Profile.model_validate(result.value))
        except PydanticValidationError as e:
            return Err("shape", f"{PROFILE_KEY}: {e.error_count()} validation error(s)")

    def read_entries(self) -> ReadResult[list[Entry]]:
        result = self._read_json(ENTRIES_KEY)
        if isinstance(result, Err):
            return result
        if result.value is None:
            return Ok([])
        if not isinstance(result.value, list):
            return Err("shape", f"{ENTRIES_KEY}: expected a list, got {type(result.value).__name__}")
        return Ok(sanitize_entries(result.value))

    # ------------------------------------------------------------------
    # Never-raising contract
    # ------------------------------------------------------------------

    def load_profile(self) -> Profile | None:
        result = self.read_profile()
        if isinstance(result, Err):
            logger.warning(f"Ignoring stored profile ({result.reason}): {result.message}")
            return None
        return result.value

    def load_entries(self) -> list[Entry]:
        result = self.read_entries()
        if isinstance(result, Err):
            logger.warning(f"Ignoring stored entries ({result.reason}): {result.message}")
            return []
        return result.value

    def save_profile(self, profile: Profile) -> None:
        self._write(PROFILE_KEY, profile.model_dump(mode="json"))

    def save_entries(self, entries: Iterable[Entry]) -> None:
        self._write(ENTRIES_KEY, [entry.to_record() for entry in entries])

    def clear(self) -> None:
        """Drop both keys; used for a full reset."""
        for key in (PROFILE_KEY, ENTRIES_KEY):
            try:
                self.store.remove_item(key)
            except StorageError as e:
                logger.warning(f"Could not remove '{key}': {e}")

    def _write(self, key: str, payload: Any) -> None:
        try:
            self.store.set_item(key, json.dumps(payload, ensure_ascii=False))
        except (StorageError, UnicodeError, TypeError, ValueError) as e:
            # Best effort: data loss on a failed write is accepted
            logger.warning(f"Could not persist '{key}': {e}")
