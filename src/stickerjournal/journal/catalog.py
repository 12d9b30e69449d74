"""Static sticker, activity and badge taxonomy.

Everything the composer and scan pipeline stamp onto entries is looked up
here by key, so badge derivation stays table-driven.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import Badge, Sticker


@dataclass(frozen=True)
class MoodSticker:
    title: str
    icon: str
    token: str
    tone: str


@dataclass(frozen=True)
class Activity:
    label: str
    icon: str
    token: str
    tone: str


@dataclass(frozen=True)
class Decoration:
    icon: str
    token: str
    tone: str


MOOD_STICKERS: dict[str, MoodSticker] = {
    "happy": MoodSticker(
        "Happy", "sentiment_very_satisfied", "\U0001f600", "bg-yellow-50 hover:bg-yellow-100 text-yellow-500"
    ),
    "calm": MoodSticker("Calm", "spa", "\U0001f9d8", "bg-blue-50 hover:bg-blue-100 text-blue-500"),
    "stressed": MoodSticker(
        "Stressed", "sentiment_stressed", "\U0001f62e\u200d\U0001f4a8", "bg-red-50 hover:bg-red-100 text-red-500"
    ),
    "sleepy": MoodSticker("Sleepy", "bedtime", "\U0001f634", "bg-purple-50 hover:bg-purple-100 text-purple-500"),
}

ACTIVITIES: dict[str, Activity] = {
    "gym": Activity("Gym", "fitness_center", "#Gym", "text-orange-500"),
    "reading": Activity("Reading", "book", "#Reading", "text-sky-500"),
    "foodie": Activity("Foodie", "restaurant", "#Foodie", "text-emerald-500"),
    "movie": Activity("Movie", "movie", "#Movie", "text-pink-500"),
}

DECORATIONS: dict[str, Decoration] = {
    "star": Decoration("star", "\u2728", "from-indigo-100 to-purple-100 text-indigo-400"),
    "eco": Decoration("eco", "\U0001f33f", "from-green-100 to-teal-100 text-teal-500"),
    "bolt": Decoration("bolt", "\u26a1", "from-orange-100 to-amber-100 text-orange-400"),
}

DEFAULT_MOOD_LABEL = "Mood"
UNTITLED = "Untitled memory"
NO_NOTES = "No notes added."

JOURNAL_BADGE = Badge(
    label="Journal", icon="auto_stories", tone="bg-slate-100 text-slate-700 border border-slate-200/90"
)
SCANNED_BADGE = Badge(
    label="Scanned", icon="document_scanner", tone="bg-violet-50 text-violet-700 border border-violet-200/80"
)

NEW_STICKER = Sticker(label="New", icon="fiber_new", tone="bg-emerald-100 text-emerald-700", tilt="rotate-3")
AUTO_STICKER = Sticker(label="Auto", icon="auto_awesome", tone="bg-cyan-100 text-cyan-700", tilt="-rotate-2")


def mood_badge(mood_key: str | None) -> Badge:
    """Badge for the last-selected mood sticker, or the generic "Mood" badge."""
    label = MOOD_STICKERS[mood_key].title if mood_key else DEFAULT_MOOD_LABEL
    return Badge(label=label, icon="mood", tone="bg-blue-50 text-blue-700 border border-blue-200/80")


def get_mood(key: str) -> MoodSticker:
    try:
        return MOOD_STICKERS[key]
    except KeyError:
        raise KeyError(f"Unknown mood sticker: {key!r}") from None


def get_activity(key: str) -> Activity:
    try:
        return ACTIVITIES[key]
    except KeyError:
        raise KeyError(f"Unknown activity: {key!r}") from None


def get_decoration(key: str) -> Decoration:
    try:
        return DECORATIONS[key]
    except KeyError:
        raise KeyError(f"Unknown decoration: {key!r}") from None
