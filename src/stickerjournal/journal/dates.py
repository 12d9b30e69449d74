"""Date label formatting and parsing.

Entries carry a human display label (``"Jan 5, 2024"``) rather than a
timestamp; filtering and the calendar parse that label back into a local
calendar date and compare date-keys (``"2024-01-05"``).
"""

from __future__ import annotations

from datetime import date, datetime

_LABEL_FORMATS = ("%b %d, %Y", "%B %d, %Y", "%Y-%m-%d")


def format_date_label(value: date) -> str:
    """``Jan 5, 2024``"""
    return f"{value:%b} {value.day}, {value.year}"


def format_long_date(value: date) -> str:
    """``January 5, 2024``"""
    return f"{value:%B} {value.day}, {value.year}"


def format_time(value: datetime) -> str:
    """``9:05 AM``"""
    hour = value.hour % 12 or 12
    return f"{hour}:{value:%M} {'AM' if value.hour < 12 else 'PM'}"


def parse_date_label(label: str) -> date | None:
    """Parse a display label back into a calendar date, or None if unparseable."""
    if not label or not isinstance(label, str):
        return None
    text = " ".join(label.split())
    for fmt in _LABEL_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def to_date_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def coerce_date_key(value: date | str | None) -> str | None:
    """Normalize a selected date (date object or ``YYYY-MM-DD``) to a date-key.

    Raises:
        ValueError: If a string is not a valid ``YYYY-MM-DD`` date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_date_key(value.date())
    if isinstance(value, date):
        return to_date_key(value)
    return to_date_key(datetime.strptime(value.strip(), "%Y-%m-%d").date())
