"""Tests for the Flask API."""

import base64
from unittest.mock import MagicMock

import pytest

from stickerjournal.context.weather import WeatherInfo
from stickerjournal.core.config import Config
from stickerjournal.core.exceptions import ConfigurationError, OCRError
from stickerjournal.core.storage import LocalKeyValueStore
from stickerjournal.journal.state import AppState
from stickerjournal.web import create_app

PNG_SRC = "data:image/png;base64," + base64.b64encode(b"png").decode()


@pytest.fixture
def config(tmp_dir):
    return Config(data_dir=tmp_dir)


@pytest.fixture
def state(memory_store):
    return AppState.from_store(memory_store)


@pytest.fixture
def ocr_client():
    client = MagicMock()
    client.require_api_key.return_value = "key"
    client.extract_text.return_value = "Trip to the lake\nSaw a heron"
    return client


@pytest.fixture
def weather_client():
    client = MagicMock()
    client.current_weather.return_value = WeatherInfo(label="Clear", temp_c=18, icon="sunny")
    return client


@pytest.fixture
def client(config, state, ocr_client, weather_client):
    app = create_app(config=config, state=state, ocr_client=ocr_client, weather_client=weather_client)
    app.config["TESTING"] = True
    return app.test_client()


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}


class TestOcrEndpoint:
    def test_success(self, client, ocr_client):
        resp = client.post("/api/ocr", json={"mimeType": "image/png", "base64": "AAA"})
        assert resp.status_code == 200
        assert resp.get_json() == {"text": "Trip to the lake\nSaw a heron"}
        ocr_client.extract_text.assert_called_once_with("image/png", "AAA")

    def test_missing_key_checked_first(self, client, ocr_client):
        ocr_client.require_api_key.side_effect = ConfigurationError("Missing GEMINI_API_KEY in environment.")
        resp = client.post("/api/ocr", json={})
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Missing GEMINI_API_KEY in environment."}

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"mimeType": "image/png"},
            {"base64": "AAA"},
            {"mimeType": "", "base64": "AAA"},
            {"mimeType": 1, "base64": 2},
        ],
    )
    def test_missing_fields(self, client, body):
        resp = client.post("/api/ocr", json=body)
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "mimeType and base64 are required."}

    def test_non_json_body(self, client):
        resp = client.post("/api/ocr", data="not json", content_type="text/plain")
        assert resp.status_code == 400

    def test_upstream_failure(self, client, ocr_client):
        ocr_client.extract_text.side_effect = OCRError("Gemini OCR request failed.", details="quota")
        resp = client.post("/api/ocr", json={"mimeType": "image/png", "base64": "AAA"})
        assert resp.status_code == 502
        assert resp.get_json() == {"error": "Gemini OCR request failed.", "details": "quota"}


class TestProfile:
    def test_new_user_needs_onboarding(self, client):
        data = client.get("/api/profile").get_json()
        assert data["needsOnboarding"] is True
        assert data["profile"] is None
        assert "Friend" in data["greeting"]

    def test_onboard(self, client, state):
        resp = client.put("/api/profile", json={"name": "  Ada ", "gender": "female"})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["profile"] == {"name": "Ada", "gender": "female"}
        assert data["needsOnboarding"] is False
        assert state.profile.name == "Ada"

    def test_blank_name(self, client):
        assert client.put("/api/profile", json={"name": "  "}).status_code == 400

    def test_bad_gender(self, client):
        assert client.put("/api/profile", json={"name": "Ada", "gender": "robot"}).status_code == 400


class TestEntries:
    @pytest.fixture(autouse=True)
    def _seed(self, state, make_entry):
        state.entries.append(make_entry(1, title="Gym day", content="#Gym", date_label="Jan 5, 2024"))
        state.entries.append(make_entry(2, title="Lake", content="Heron", date_label="Feb 10, 2024"))

    def test_list(self, client):
        data = client.get("/api/entries").get_json()
        assert [e["id"] for e in data["entries"]] == [2, 1]
        assert data["entries"][0]["dateLabel"] == "Feb 10, 2024"

    def test_query_and_date(self, client):
        assert [e["id"] for e in client.get("/api/entries?q=gym").get_json()["entries"]] == [1]
        data = client.get("/api/entries?q=&date=2024-02-10").get_json()
        assert data["selectedDate"] == "2024-02-10"
        assert [e["id"] for e in data["entries"]] == [2]
        # Selecting the same date again is not a toggle over HTTP
        data = client.get("/api/entries?date=2024-02-10").get_json()
        assert data["selectedDate"] == "2024-02-10"
        data = client.get("/api/entries?date=").get_json()
        assert data["selectedDate"] is None
        assert len(data["entries"]) == 2

    def test_bad_date(self, client):
        assert client.get("/api/entries?date=nope").status_code == 400

    def test_bad_date_keeps_selection(self, client):
        client.get("/api/entries?date=2024-02-10")
        assert client.get("/api/entries?date=2024-13-40").status_code == 400
        data = client.get("/api/entries").get_json()
        assert data["selectedDate"] == "2024-02-10"
        assert [e["id"] for e in data["entries"]] == [2]

    def test_get_one(self, client):
        assert client.get("/api/entries/1").get_json()["title"] == "Gym day"
        assert client.get("/api/entries/99").status_code == 404

    def test_edit(self, client, state):
        resp = client.patch("/api/entries/2", json={"title": "  Lake walk "})
        assert resp.status_code == 200
        assert resp.get_json()["title"] == "Lake walk"
        assert resp.get_json()["content"] == "Heron"
        assert state.entries.get(2).title == "Lake walk"

    def test_edit_blank_gets_placeholders(self, client):
        data = client.patch("/api/entries/2", json={"title": "", "content": " "}).get_json()
        assert (data["title"], data["content"]) == ("Untitled memory", "No notes added.")

    def test_edit_null_keeps_current_text(self, client):
        data = client.patch("/api/entries/1", json={"title": None, "content": "Leg day"}).get_json()
        assert data["title"] == "Gym day"
        assert data["content"] == "Leg day"

    def test_edit_missing(self, client):
        assert client.patch("/api/entries/99", json={"title": "x"}).status_code == 404

    def test_delete(self, client, state):
        assert client.delete("/api/entries/1").status_code == 200
        assert 1 not in state.entries
        assert client.delete("/api/entries/1").status_code == 404

    def test_calendar(self, client):
        data = client.get("/api/calendar?year=2024&month=2").get_json()
        assert data["counts"] == {"2024-01-05": 1, "2024-02-10": 1}
        day = next(c for c in data["cells"] if c["dateKey"] == "2024-02-10")
        assert day["count"] == 1
        assert data["cells"][0]["key"] == "blank-0"

    def test_calendar_bad_month(self, client):
        assert client.get("/api/calendar?year=2024&month=13").status_code == 400
        assert client.get("/api/calendar?year=abc").status_code == 400


class TestDraft:
    def test_compose_and_submit(self, client, state):
        client.put("/api/draft", json={"title": "Lake day"})
        assert client.post("/api/draft/mood", json={"key": "happy"}).status_code == 201
        client.post("/api/draft/activities", json={"key": "gym"})
        client.post("/api/draft/decorations", json={"key": "star"})
        client.post("/api/draft/tokens", json={"token": "fun"})
        draft = client.get("/api/draft").get_json()
        assert draft["content"] == "\U0001f600 #Gym ✨ fun"
        assert draft["mood"] == "Feeling Happy"

        resp = client.post("/api/draft/submit")
        assert resp.status_code == 201
        entry = resp.get_json()
        assert entry["title"] == "Lake day"
        assert [b["label"] for b in entry["badges"]] == ["Happy", "Journal"]
        assert entry["sticker"]["label"] == "New"
        assert state.entries.all()[0].id == entry["id"]
        assert client.get("/api/draft").get_json()["title"] == ""

    def test_null_draft_fields_are_ignored(self, client):
        client.put("/api/draft", json={"title": "Lake day", "content": "Calm"})
        draft = client.put("/api/draft", json={"title": None, "content": None}).get_json()
        assert (draft["title"], draft["content"]) == ("Lake day", "Calm")

    def test_unencodable_title_still_submits(self, config, tmp_dir, ocr_client, weather_client):
        state = AppState.from_store(LocalKeyValueStore(base_path=tmp_dir, namespace="web"))
        app = create_app(config=config, state=state, ocr_client=ocr_client, weather_client=weather_client)
        client = app.test_client()
        assert client.put("/api/draft", json={"title": "\ud800"}).status_code == 200
        resp = client.post("/api/draft/submit")
        assert resp.status_code == 201
        assert len(state.entries) == 1

    def test_submit_empty(self, client):
        assert client.post("/api/draft/submit").status_code == 400

    def test_unknown_values(self, client):
        assert client.post("/api/draft/mood", json={"key": "ecstatic"}).status_code == 400
        assert client.post("/api/draft/tokens", json={}).status_code == 400
        assert client.post("/api/draft/stickers", json={}).status_code == 404

    def test_notes_and_drag(self, client):
        note = client.post("/api/draft/notes").get_json()["stickyNotes"][0]
        assert (note["x"], note["y"]) == (26, 84)

        client.patch(f"/api/draft/notes/{note['id']}", json={"text": "hello"})
        client.post("/api/draft/pointer", json={"type": "down", "elementId": note["id"], "x": 36, "y": 94})
        draft = client.post(
            "/api/draft/pointer",
            json={"type": "move", "x": 1000, "y": 1000, "containerWidth": 400, "containerHeight": 300},
        ).get_json()
        assert (draft["stickyNotes"][0]["x"], draft["stickyNotes"][0]["y"]) == (220, 164)
        assert draft["drag"]["activeId"] == note["id"]
        draft = client.post("/api/draft/pointer", json={"type": "up"}).get_json()
        assert draft["drag"] is None
        assert draft["stickyNotes"][0]["text"] == "hello"

        assert client.delete(f"/api/draft/notes/{note['id']}").status_code == 200
        assert client.delete(f"/api/draft/notes/{note['id']}").status_code == 404
        assert client.patch(f"/api/draft/notes/{note['id']}", json={"text": "x"}).status_code == 404

    def test_images(self, client):
        draft = client.post("/api/draft/images", json={"src": PNG_SRC}).get_json()
        image_id = draft["placedImages"][0]["id"]
        assert draft["canSubmit"] is True
        assert client.delete(f"/api/draft/images/{image_id}").get_json()["placedImages"] == []

    def test_bad_pointer_event(self, client):
        assert client.post("/api/draft/pointer", json={"type": "down"}).status_code == 400
        assert client.post("/api/draft/pointer", json={"type": "wiggle"}).status_code == 400


class TestScan:
    def test_scan_creates_entry(self, client, state):
        resp = client.post("/api/scan", json={"src": PNG_SRC})
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["phase"] == "done"
        assert data["message"] == "Scanned and saved."
        entry = state.entries.get(data["entryId"])
        assert entry.title == "Trip to the lake"
        assert [b.label for b in entry.badges] == ["Scanned", "Journal"]

    def test_scan_failure(self, client, ocr_client, state):
        ocr_client.extract_text.side_effect = OCRError("Gemini OCR request failed.")
        resp = client.post("/api/scan", json={"src": PNG_SRC})
        assert resp.status_code == 422
        assert resp.get_json()["message"] == "Gemini OCR request failed."
        assert len(state.entries) == 0

    def test_scan_remote_image(self, client):
        resp = client.post("/api/scan", json={"src": "https://example.com/a.png"})
        assert resp.status_code == 422
        assert resp.get_json()["message"] == "Only local uploaded images can be scanned."

    def test_status_and_dismiss(self, client):
        client.post("/api/scan", json={"src": PNG_SRC})
        assert client.get("/api/scan").get_json()["phase"] in ("done", "idle")
        assert client.post("/api/scan/dismiss").get_json()["phase"] == "idle"


class TestWeather:
    def test_weather(self, client, weather_client):
        data = client.get("/api/weather?lat=51.5&lon=-0.12").get_json()
        assert data == {"weather": {"label": "Clear", "tempC": 18, "icon": "sunny"}}
        weather_client.current_weather.assert_called_once_with(51.5, -0.12)

    def test_unavailable(self, client, weather_client):
        weather_client.current_weather.return_value = None
        assert client.get("/api/weather").get_json() == {"weather": None}
