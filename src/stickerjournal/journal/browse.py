"""Search, date filtering and calendar derivations over the entry list.

All functions are pure: they take the current entries plus the query /
selected date and return a fresh result, so callers simply recompute
whenever any input changes.
"""

from __future__ import annotations

import calendar
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from .dates import coerce_date_key, parse_date_label, to_date_key
from .models import Entry


def entry_date_key(entry: Entry) -> str | None:
    parsed = parse_date_label(entry.date_label)
    return to_date_key(parsed) if parsed else None


def matches_date(entry: Entry, date_key: str | None) -> bool:
    if date_key is None:
        return True
    return entry_date_key(entry) == date_key


def matches_query(entry: Entry, query: str) -> bool:
    """Case-insensitive substring match on title, content or any badge label."""
    needle = query.strip().lower()
    if not needle:
        return True
    return any(needle in haystack for haystack in entry.search_haystacks())


def filter_entries(entries: Iterable[Entry], query: str = "", selected_date: date | str | None = None) -> list[Entry]:
    """Entries passing both the date filter and the text filter, order preserved.

    An entry whose date label cannot be parsed never matches a selected
    date but still shows up when no date is selected.
    """
    date_key = coerce_date_key(selected_date)
    return [entry for entry in entries if matches_date(entry, date_key) and matches_query(entry, query)]


def calendar_index(entries: Iterable[Entry]) -> dict[str, int]:
    """Map of date-key to entry count, skipping unparseable labels."""
    counts: Counter[str] = Counter()
    for entry in entries:
        key = entry_date_key(entry)
        if key:
            counts[key] += 1
    return dict(counts)


@dataclass(frozen=True)
class CalendarCell:
    """One slot in a month grid; blanks pad the first week and have ``day == 0``."""

    key: str
    day: int
    date_key: str

    @property
    def is_blank(self) -> bool:
        return self.day == 0


def month_grid(year: int, month: int) -> list[CalendarCell]:
    """Sunday-first grid for one month, with leading blank cells."""
    # calendar.weekday: Monday == 0; shift so Sunday == 0
    start_weekday = (calendar.weekday(year, month, 1) + 1) % 7
    days_in_month = calendar.monthrange(year, month)[1]

    cells = [CalendarCell(key=f"blank-{i}", day=0, date_key="") for i in range(start_weekday)]
    for day in range(1, days_in_month + 1):
        cells.append(CalendarCell(key=f"day-{day}", day=day, date_key=to_date_key(date(year, month, day))))
    return cells


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a (year, month) pair by delta months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
