"""Journal statistics - pure functions over an entry snapshot."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta

from .entries import Entry, MoodKind

DEFAULT_TAG_LIMIT = 10


@dataclass
class Dashboard:
    """All statistics computed from one snapshot."""

    streak: int = 0
    total_entries: int = 0
    mood_distribution: dict[MoodKind, int] = field(default_factory=dict)
    top_tags: list[str] = field(default_factory=list)
    first_entry_date: date | None = None
    last_entry_date: date | None = None

    @property
    def mood_distribution_max(self) -> int:
        """Largest histogram bar, never below 1 so it can scale a chart."""
        return max([1, *self.mood_distribution.values()])

    def to_dict(self) -> dict:
        return {
            "streak": self.streak,
            "total_entries": self.total_entries,
            "mood_distribution": {k.label: v for k, v in self.mood_distribution.items()},
            "top_tags": list(self.top_tags),
            "first_entry_date": self.first_entry_date.isoformat() if self.first_entry_date else None,
            "last_entry_date": self.last_entry_date.isoformat() if self.last_entry_date else None,
        }


def streak(entries: list[Entry], today: date | None = None) -> int:
    """
    Consecutive days with an entry, ending today.

    No entry today means no streak, even if yesterday has one.
    """
    today = today or date.today()
    days = {e.date for e in entries}
    if today not in days:
        return 0

    count = 1
    current = today - timedelta(days=1)
    while current in days:
        count += 1
        current -= timedelta(days=1)
    return count


def total_entries(entries: list[Entry]) -> int:
    return len(entries)


def mood_distribution(entries: list[Entry]) -> dict[MoodKind, int]:
    """
    Count each entry's primary mood.

    Secondary moods are excluded; entries without a primary mood add nothing.
    """
    distribution: dict[MoodKind, int] = {}
    for entry in entries:
        primary = entry.primary_mood
        if primary is None:
            continue
        distribution[primary.kind] = distribution.get(primary.kind, 0) + 1
    return distribution


def most_used_tags(entries: list[Entry], limit: int = DEFAULT_TAG_LIMIT) -> list[str]:
    """
    Tag names by descending frequency.

    Ties keep the order in which names were first seen while iterating the
    snapshot (sorted() is stable). Names are counted exactly as stored.
    """
    if limit <= 0:
        return []
    counts = Counter(tag.name for entry in entries for tag in entry.tags)
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [name for name, _ in ranked[:limit]]


def first_entry_date(entries: list[Entry]) -> date | None:
    return min((e.date for e in entries), default=None)


def last_entry_date(entries: list[Entry]) -> date | None:
    return max((e.date for e in entries), default=None)


def build_dashboard(
    entries: list[Entry],
    today: date | None = None,
    tag_limit: int = DEFAULT_TAG_LIMIT,
) -> Dashboard:
    """Compute every statistic from a single snapshot."""
    return Dashboard(
        streak=streak(entries, today),
        total_entries=total_entries(entries),
        mood_distribution=mood_distribution(entries),
        top_tags=most_used_tags(entries, tag_limit),
        first_entry_date=first_entry_date(entries),
        last_entry_date=last_entry_date(entries),
    )
