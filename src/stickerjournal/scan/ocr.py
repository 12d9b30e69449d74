"""
Vision-model text extraction via LiteLLM.

Tries an ordered list of vision models and returns the text from the first
one that answers. Model names follow litellm conventions
(``"gemini/gemini-2.5-flash"``). Requires ``litellm``.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import Any

from loguru import logger

from stickerjournal.core.config import DEFAULT_OCR_MODELS
from stickerjournal.core.config_schema import OCRConfig
from stickerjournal.core.exceptions import ConfigurationError, OCRError

API_KEY_ENV = "GEMINI_API_KEY"
MISSING_KEY_MESSAGE = f"Missing {API_KEY_ENV} in environment."
EXTRACTION_PROMPT = (
    "Extract all readable text from this image. Return plain text only. Keep line breaks where possible."
)


def join_text_fragments(content: Any) -> str:
    """Join every text fragment of a response message with newlines, trimmed.

    LiteLLM usually normalizes content to a string, but Gemini responses can
    surface as content-block lists or objects with ``.parts``.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content.strip()

    parts = getattr(content, "parts", content)
    fragments: list[str] = []
    if isinstance(parts, (list, tuple)):
        for part in parts:
            if isinstance(part, str):
                fragments.append(part)
            elif isinstance(part, dict):
                fragments.append(part.get("text") or "")
            else:
                fragments.append(getattr(part, "text", "") or "")
        return "\n".join(fragments).strip()

    return str(getattr(content, "text", "") or "").strip()


def _error_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or exc.__class__.__name__


class OCRClient:
    """Ordered-fallback OCR over vision models.

    Example::

        client = OCRClient(api_key="...")
        text = client.extract_text("image/png", base64_payload)
    """

    def __init__(
        self,
        models: Sequence[str] | None = None,
        api_key: str | None = None,
        timeout: int = 60,
    ):
        self.models = list(models or DEFAULT_OCR_MODELS)
        self._api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> OCRClient:
        # Goes through the schema so "a,b" env overrides become a model list
        section = OCRConfig.model_validate(
            {
                "models": config.get("ocr.models") or DEFAULT_OCR_MODELS,
                "api_key": config.get("ocr.api_key") or "",
                "timeout": config.get("ocr.timeout", 60),
            }
        )
        return cls(models=section.models, api_key=section.api_key or None, timeout=section.timeout)

    @property
    def api_key(self) -> str:
        return self._api_key or os.environ.get(API_KEY_ENV, "")

    def require_api_key(self) -> str:
        key = self.api_key
        if not key:
            raise ConfigurationError(MISSING_KEY_MESSAGE)
        return key

    def _messages(self, mime_type: str, base64_data: str) -> list[dict[str, Any]]:
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": EXTRACTION_PROMPT},
                    {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{base64_data}"}},
                ],
            }
        ]

    def extract_text(self, mime_type: str, base64_data: str) -> str:
        """Return the text read from the image by the first model that succeeds.

        Raises:
            ImportError: If litellm is not installed.
            ConfigurationError: If no API key is configured.
            OCRError: If every model fails; ``details`` holds the last error.
        """
        try:
            import litellm
        except ImportError:
            raise ImportError("OCR needs litellm: pip install litellm") from None

        api_key = self.require_api_key()
        messages = self._messages(mime_type, base64_data)
        last_error: str | None = None

        for model in self.models:
            try:
                response = litellm.completion(
                    model=model,
                    messages=messages,
                    api_key=api_key,
                    timeout=self.timeout,
                )
            except Exception as e:
                last_error = _error_message(e)
                logger.warning(f"OCR model {model} failed: {last_error}")
                continue

            choices = getattr(response, "choices", None) or []
            message = getattr(choices[0], "message", None) if choices else None
            text = join_text_fragments(getattr(message, "content", None))
            logger.info(f"OCR via {model}: extracted {len(text)} chars")
            return text

        raise OCRError("Gemini OCR request failed.", status=502, details=last_error)
