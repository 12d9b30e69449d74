"""Onboarding profile capture and greeting helpers."""

from __future__ import annotations

from datetime import datetime

from .models import Gender, Profile
from .state import AppState

FALLBACK_NAME = "Friend"

_AVATAR_STYLES = {
    Gender.MALE: "from-sky-500 to-indigo-600",
    Gender.FEMALE: "from-pink-500 to-rose-500",
    Gender.OTHER: "from-emerald-500 to-teal-600",
}


def needs_onboarding(state: AppState) -> bool:
    return state.profile is None


def complete_onboarding(state: AppState, name: str, gender: Gender | str = Gender.OTHER) -> Profile | None:
    """Create and persist the profile; a blank name is ignored.

    Raises:
        ValueError: If gender is not one of male/female/other.
    """
    name = (name or "").strip()
    if not name:
        return None
    profile = Profile(name=name, gender=Gender(gender))
    state.persistence.save_profile(profile)
    state.profile = profile
    return profile


def greeting_prefix(hour: int) -> str:
    if hour < 12:
        return "Good morning"
    if hour < 18:
        return "Good afternoon"
    return "Good evening"


def greeting(profile: Profile | None, now: datetime | None = None) -> str:
    now = now or datetime.now()
    name = profile.name if profile else FALLBACK_NAME
    return f"{greeting_prefix(now.hour)}, {name}. Ready to capture today's memories?"


def avatar_style(gender: Gender | str) -> str:
    return _AVATAR_STYLES.get(Gender(gender), _AVATAR_STYLES[Gender.OTHER])
