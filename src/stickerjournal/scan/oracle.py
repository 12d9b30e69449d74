"""OCR oracles consumed by the scan pipeline.

The pipeline only needs ``recognize(mime_type, base64) -> str``. Failures
come back as ``OCRError`` whose message is what the user should see.
``LocalOcrOracle`` runs extraction in-process; ``HttpOcrOracle`` talks to a
running server's ``/api/ocr`` endpoint.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import Protocol, runtime_checkable

from stickerjournal.core.exceptions import ConfigurationError, OCRError

from .ocr import OCRClient

DEFAULT_FAILURE = "OCR request failed."


@runtime_checkable
class OcrOracle(Protocol):
    """Opaque text-extraction service."""

    def recognize(self, mime_type: str, base64_data: str) -> str:
        """Return the extracted text.

        Raises:
            OCRError: With a user-facing message when extraction fails.
        """
        ...


class LocalOcrOracle:
    """Calls ``OCRClient`` directly, mapping errors the way the endpoint does."""

    def __init__(self, client: OCRClient):
        self.client = client

    def recognize(self, mime_type: str, base64_data: str) -> str:
        try:
            return self.client.extract_text(mime_type, base64_data)
        except ConfigurationError as e:
            raise OCRError(str(e), status=500) from e


def failure_message(raw: str) -> str:
    """The ``error`` field of a JSON failure body, else the raw body."""
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict) and isinstance(parsed.get("error"), str) and parsed["error"]:
        return parsed["error"]
    return raw.strip() or DEFAULT_FAILURE


class HttpOcrOracle:
    """POSTs ``{mimeType, base64}`` to ``<base_url>/api/ocr``."""

    def __init__(self, base_url: str, timeout: int = 90):
        self.url = f"{base_url.rstrip('/')}/api/ocr"
        self.timeout = timeout

    def recognize(self, mime_type: str, base64_data: str) -> str:
        payload = json.dumps({"mimeType": mime_type, "base64": base64_data}).encode("utf-8")
        req = urllib.request.Request(
            url=self.url,
            data=payload,
            method="POST",
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read().decode("utf-8", errors="ignore")
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="ignore") if hasattr(e, "read") else ""
            raise OCRError(failure_message(body or str(e.reason)), status=e.code) from e
        except urllib.error.URLError as e:
            raise OCRError(f"OCR endpoint unreachable: {e.reason}", status=503) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise OCRError(failure_message(raw)) from e
        text = data.get("text") if isinstance(data, dict) else None
        return text if isinstance(text, str) else ""
