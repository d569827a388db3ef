"""Daybook - one journal entry per day, with moods, tags and stats."""

__version__ = "0.1.0"
