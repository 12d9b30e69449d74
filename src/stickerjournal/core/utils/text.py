"""Text processing utilities: whitespace normalization and truncation."""

import re


def normalize_block_text(text: str) -> str:
    """Normalize a multi-line block while keeping its line structure.

    Strips whitespace that precedes a newline, collapses runs of blank
    lines to a single blank line, and trims the result.
    """
    if not text or not isinstance(text, str):
        return ""
    text = text.replace("\r\n", "\n")
    text = re.sub(r"[^\S\n]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def non_empty_lines(text: str) -> list[str]:
    """Split text into trimmed, non-empty lines."""
    if not text:
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]


def truncate_text(text: str, max_length: int = 100, ellipsis: str = "...") -> str:
    """Keep the first max_length characters, appending ellipsis if truncated."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + ellipsis
