"""Functional core - pure business logic with no I/O."""

from .entries import Entry, Mood, MoodKind, Tag, compose_entry, sort_chronological
from .analytics import (
    Dashboard,
    build_dashboard,
    first_entry_date,
    last_entry_date,
    mood_distribution,
    most_used_tags,
    streak,
    total_entries,
)
from .users import User

__all__ = [
    # Entries
    "Entry",
    "Mood",
    "MoodKind",
    "Tag",
    "compose_entry",
    "sort_chronological",
    # Analytics
    "Dashboard",
    "build_dashboard",
    "streak",
    "total_entries",
    "mood_distribution",
    "most_used_tags",
    "first_entry_date",
    "last_entry_date",
    # Users
    "User",
]
