"""Turn raw OCR text into a templated journal entry body."""

from __future__ import annotations

from dataclasses import dataclass

from stickerjournal.core.utils.text import non_empty_lines, normalize_block_text, truncate_text

SCANNED_TITLE = "Scanned Memory"
TITLE_MAX_CHARS = 64
SUMMARY_LINES = 2
HIGHLIGHT_LINES = 5

NO_SUMMARY = "No clear summary detected from the image."
NO_HIGHLIGHTS = "- No highlights detected."
NO_TEXT = "No readable text found in this image."


@dataclass(frozen=True)
class ScannedTemplate:
    title: str
    content: str
    summary: str
    highlights: tuple[str, ...]
    cleaned_text: str


def clean_scanned_text(raw_text: str) -> str:
    return normalize_block_text(raw_text or "")


def scanned_title(text: str) -> str:
    """First non-empty line, truncated to 64 chars, or the placeholder."""
    lines = non_empty_lines(text)
    if not lines:
        return SCANNED_TITLE
    return truncate_text(lines[0], max_length=TITLE_MAX_CHARS)


def build_scanned_template(raw_text: str) -> ScannedTemplate:
    """Build the fixed-section document for a scanned page.

    Sections: ``SCANNED JOURNAL``, ``Summary:`` (first two lines),
    ``Highlights:`` (first five lines as bullets) and ``Extracted Text:``
    (the whitespace-normalized full text). Empty input still yields a
    complete document made of placeholders.
    """
    cleaned = clean_scanned_text(raw_text)
    lines = non_empty_lines(cleaned)
    summary = " ".join(lines[:SUMMARY_LINES])
    highlights = tuple(lines[:HIGHLIGHT_LINES])

    content = "\n".join(
        [
            "SCANNED JOURNAL",
            "",
            "Summary:",
            summary or NO_SUMMARY,
            "",
            "Highlights:",
            *([f"- {line}" for line in highlights] or [NO_HIGHLIGHTS]),
            "",
            "Extracted Text:",
            cleaned or NO_TEXT,
        ]
    )
    return ScannedTemplate(
        title=scanned_title(cleaned),
        content=content,
        summary=summary,
        highlights=highlights,
        cleaned_text=cleaned,
    )
