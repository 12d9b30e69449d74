"""
Flask application: the OCR proxy plus a JSON API over the journal state.

Build with ``create_app()``; every collaborator (config, state, OCR client,
weather client) can be injected, which is how the tests run it.
"""

from __future__ import annotations

import threading
from datetime import date
from typing import Any

from flask import Blueprint, Flask, current_app, jsonify, request
from loguru import logger

from stickerjournal.composer.drag import Point, PointerDown, PointerMove, PointerUp, Size
from stickerjournal.context.weather import WeatherClient
from stickerjournal.core.config import Config, get_config
from stickerjournal.core.exceptions import ConfigurationError, OCRError, ScanBusyError
from stickerjournal.core.storage import LocalKeyValueStore
from stickerjournal.journal.browse import month_grid
from stickerjournal.journal.dates import coerce_date_key
from stickerjournal.journal.onboarding import avatar_style, complete_onboarding, greeting, needs_onboarding
from stickerjournal.journal.state import AppState
from stickerjournal.scan.ocr import OCRClient
from stickerjournal.scan.oracle import LocalOcrOracle
from stickerjournal.scan.pipeline import ScanPhase, ScanPipeline

EXTENSION_KEY = "stickerjournal"

api = Blueprint("api", __name__)


def build_state(config: Config) -> AppState:
    """AppState backed by the on-disk key-value store described by config."""
    store = LocalKeyValueStore(
        base_path=config.get("paths.storage_dir"),
        namespace=config.get("storage.namespace", "sticker_journal"),
        quota_bytes=int(config.get("storage.quota_bytes", 0) or 0),
    )
    return AppState.from_store(store)


def create_app(
    config: Config | None = None,
    state: AppState | None = None,
    ocr_client: OCRClient | None = None,
    weather_client: WeatherClient | None = None,
) -> Flask:
    config = config or get_config()
    state = state or build_state(config)
    ocr_client = ocr_client or OCRClient.from_config(config)
    lock = threading.RLock()

    def commit(entry) -> None:
        with lock:
            state.commit_scanned(entry)

    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = {
        "config": config,
        "state": state,
        "lock": lock,
        "ocr": ocr_client,
        "weather": weather_client or WeatherClient.from_config(config),
        "scanner": ScanPipeline(LocalOcrOracle(ocr_client), on_commit=commit, id_factory=state.entries.next_id),
    }
    app.register_blueprint(api)
    logger.debug(f"App created with {len(state.entries)} stored entries")
    return app


def _ext(name: str) -> Any:
    return current_app.extensions[EXTENSION_KEY][name]


def _body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _text_field(body: dict[str, Any], name: str, current: str) -> str:
    """Text value from a JSON body; absent or null keeps ``current``."""
    value = body.get(name)
    return current if value is None else str(value)


def _error(message: str, status: int, **extra):
    return jsonify({"error": message, **extra}), status


# ── Health ────────────────────────────────────────────────────────────


@api.route("/health")
def health():
    return jsonify({"ok": True})


# ── OCR proxy ─────────────────────────────────────────────────────────


@api.route("/api/ocr", methods=["POST"])
def ocr():
    client: OCRClient = _ext("ocr")
    try:
        client.require_api_key()
    except ConfigurationError as e:
        return _error(str(e), 500)

    body = _body()
    mime_type = body.get("mimeType")
    payload = body.get("base64")
    if not mime_type or not payload or not isinstance(mime_type, str) or not isinstance(payload, str):
        return _error("mimeType and base64 are required.", 400)

    try:
        text = client.extract_text(mime_type, payload)
    except ConfigurationError as e:
        return _error(str(e), 500)
    except OCRError as e:
        return _error(e.message, e.status, details=e.details)
    return jsonify({"text": text})


# ── Profile ───────────────────────────────────────────────────────────


def _profile_payload(state: AppState) -> dict[str, Any]:
    profile = state.profile
    return {
        "profile": profile.model_dump(mode="json") if profile else None,
        "greeting": greeting(profile),
        "avatarStyle": avatar_style(profile.gender) if profile else avatar_style("other"),
        "needsOnboarding": needs_onboarding(state),
    }


@api.route("/api/profile", methods=["GET"])
def get_profile():
    return jsonify(_profile_payload(_ext("state")))


@api.route("/api/profile", methods=["PUT"])
def put_profile():
    body = _body()
    state: AppState = _ext("state")
    try:
        with _ext("lock"):
            profile = complete_onboarding(state, str(body.get("name") or ""), body.get("gender") or "other")
    except ValueError:
        return _error("gender must be one of male, female, other.", 400)
    if profile is None:
        return _error("name is required.", 400)
    return jsonify(_profile_payload(state))


# ── Entries ───────────────────────────────────────────────────────────


@api.route("/api/entries", methods=["GET"])
def list_entries():
    state: AppState = _ext("state")
    with _ext("lock"):
        if "q" in request.args:
            state.set_query(request.args.get("q", ""))
        if "date" in request.args:
            try:
                state.selected_date_key = coerce_date_key(request.args.get("date", ""))
            except ValueError:
                return _error("date must be YYYY-MM-DD.", 400)
        entries = state.visible_entries()
    return jsonify(
        {
            "query": state.query,
            "selectedDate": state.selected_date_key,
            "entries": [entry.to_record() for entry in entries],
        }
    )


@api.route("/api/entries/<int:entry_id>", methods=["GET"])
def get_entry(entry_id: int):
    entry = _ext("state").entries.get(entry_id)
    if entry is None:
        return _error("Entry not found.", 404)
    return jsonify(entry.to_record())


@api.route("/api/entries/<int:entry_id>", methods=["PATCH"])
def edit_entry(entry_id: int):
    body = _body()
    state: AppState = _ext("state")
    with _ext("lock"):
        current = state.entries.get(entry_id)
        if current is None:
            return _error("Entry not found.", 404)
        updated = state.edit_entry(
            entry_id,
            title=_text_field(body, "title", current.title),
            content=_text_field(body, "content", current.content),
        )
    return jsonify(updated.to_record())


@api.route("/api/entries/<int:entry_id>", methods=["DELETE"])
def delete_entry(entry_id: int):
    with _ext("lock"):
        removed = _ext("state").entries.remove(entry_id)
    if not removed:
        return _error("Entry not found.", 404)
    return jsonify({"ok": True})


@api.route("/api/calendar", methods=["GET"])
def calendar_view():
    today = date.today()
    try:
        year = int(request.args.get("year", today.year))
        month = int(request.args.get("month", today.month))
        cells = month_grid(year, month)
    except ValueError:
        return _error("year and month must form a valid month.", 400)
    state: AppState = _ext("state")
    counts = state.calendar()
    return jsonify(
        {
            "year": year,
            "month": month,
            "selectedDate": state.selected_date_key,
            "cells": [
                {"key": cell.key, "day": cell.day, "dateKey": cell.date_key, "count": counts.get(cell.date_key, 0)}
                for cell in cells
            ],
            "counts": counts,
        }
    )


# ── Draft composer ────────────────────────────────────────────────────


def _draft_response(status: int = 200):
    return jsonify(_ext("state").composer.snapshot()), status


@api.route("/api/draft", methods=["GET"])
def get_draft():
    return _draft_response()


@api.route("/api/draft", methods=["PUT"])
def put_draft():
    body = _body()
    composer = _ext("state").composer
    with _ext("lock"):
        composer.title = _text_field(body, "title", composer.title)
        composer.content = _text_field(body, "content", composer.content)
    return _draft_response()


@api.route("/api/draft/<kind>", methods=["POST"])
def add_to_draft(kind: str):
    body = _body()
    composer = _ext("state").composer
    actions = {
        "tokens": lambda: composer.append_token(str(body["token"])),
        "mood": lambda: composer.select_mood(str(body["key"])),
        "activities": lambda: composer.add_activity(str(body["key"])),
        "decorations": lambda: composer.add_decoration(str(body["key"])),
        "images": lambda: composer.place_image(str(body["src"])),
        "notes": composer.add_sticky_note,
    }
    action = actions.get(kind)
    if action is None:
        return _error(f"Unknown draft collection '{kind}'.", 404)
    try:
        with _ext("lock"):
            action()
    except KeyError as e:
        return _error(f"Missing or unknown value: {e}", 400)
    return _draft_response(201)


@api.route("/api/draft/notes/<int:note_id>", methods=["PATCH"])
def edit_draft_note(note_id: int):
    with _ext("lock"):
        found = _ext("state").composer.update_note_text(note_id, str(_body().get("text", "")))
    if not found:
        return _error("Note not found.", 404)
    return _draft_response()


@api.route("/api/draft/<kind>/<int:element_id>", methods=["DELETE"])
def remove_from_draft(kind: str, element_id: int):
    composer = _ext("state").composer
    removers = {"images": composer.remove_image, "notes": composer.remove_note}
    remover = removers.get(kind)
    if remover is None:
        return _error(f"Unknown draft collection '{kind}'.", 404)
    with _ext("lock"):
        removed = remover(element_id)
    if not removed:
        return _error("Element not found.", 404)
    return _draft_response()


@api.route("/api/draft/pointer", methods=["POST"])
def pointer_event():
    body = _body()
    try:
        kind = body["type"]
        if kind == "down":
            command = PointerDown(element_id=int(body["elementId"]), pointer=Point(float(body["x"]), float(body["y"])))
        elif kind == "move":
            command = PointerMove(
                pointer=Point(float(body["x"]), float(body["y"])),
                container=Size(float(body["containerWidth"]), float(body["containerHeight"])),
            )
        elif kind == "up":
            command = PointerUp()
        else:
            return _error("type must be down, move or up.", 400)
    except (KeyError, TypeError, ValueError) as e:
        return _error(f"Invalid pointer event: {e}", 400)

    with _ext("lock"):
        _ext("state").composer.dispatch(command)
    return _draft_response()


@api.route("/api/draft/submit", methods=["POST"])
def submit_draft():
    state: AppState = _ext("state")
    with _ext("lock"):
        entry = state.submit_draft()
    if entry is None:
        return _error("Add a title, notes, an image or a sticky note first.", 400)
    return jsonify(entry.to_record()), 201


# ── Scan ──────────────────────────────────────────────────────────────


@api.route("/api/scan", methods=["GET"])
def scan_status():
    return jsonify(_ext("scanner").refresh().to_dict())


@api.route("/api/scan", methods=["POST"])
def scan():
    scanner: ScanPipeline = _ext("scanner")
    try:
        result = scanner.scan_source(str(_body().get("src") or ""))
    except ScanBusyError as e:
        return _error(str(e), 409)
    status = 201 if result.phase is ScanPhase.DONE else 422
    return jsonify(result.to_dict()), status


@api.route("/api/scan/dismiss", methods=["POST"])
def dismiss_scan():
    return jsonify(_ext("scanner").dismiss().to_dict())


# ── Weather ───────────────────────────────────────────────────────────


@api.route("/api/weather", methods=["GET"])
def weather():
    client: WeatherClient = _ext("weather")
    lat = request.args.get("lat", type=float)
    lon = request.args.get("lon", type=float)
    info = client.current_weather(lat, lon)
    return jsonify({"weather": info.to_dict() if info else None})
