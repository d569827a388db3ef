"""Pure journal entry domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import IntEnum
from typing import Iterable

from daybook.errors import ValidationError

MAX_SECONDARY_MOODS = 2
NO_CATEGORY = "None"


class MoodKind(IntEnum):
    """Mood kinds. Values are persisted as integers; never renumber."""

    HAPPY = 0
    SAD = 1
    ANGRY = 2
    ANXIOUS = 3
    EXCITED = 4
    CALM = 5
    TIRED = 6
    ENERGETIC = 7
    CONFUSED = 8
    GRATEFUL = 9
    LONELY = 10
    CONTENT = 11
    RELAXED = 12
    CONFIDENT = 13
    THOUGHTFUL = 14
    CURIOUS = 15
    NOSTALGIC = 16
    BORED = 17
    STRESSED = 18

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: "str | int | MoodKind") -> "MoodKind":
        """Resolve a mood from its name (any case) or ordinal."""
        if isinstance(value, MoodKind):
            return value
        text = str(value).strip()
        try:
            if text.lstrip("-").isdigit():
                return cls(int(text))
            return cls[text.upper()]
        except (KeyError, ValueError):
            raise ValidationError(f"Unknown mood: {value!r}") from None


@dataclass
class Mood:
    """A mood recorded on an entry."""

    kind: MoodKind
    is_primary: bool = False
    id: int | None = field(default=None, compare=False)


@dataclass
class Tag:
    """A free-form label attached to an entry."""

    name: str
    id: int | None = field(default=None, compare=False)


@dataclass
class Entry:
    """One journal record, keyed by calendar date."""

    date: date
    content: str = ""
    category: str | None = None
    moods: list[Mood] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        self.date = as_day(self.date)

    @property
    def primary_mood(self) -> Mood | None:
        return next((m for m in self.moods if m.is_primary), None)

    @property
    def secondary_moods(self) -> list[Mood]:
        return [m for m in self.moods if not m.is_primary]

    @property
    def tag_names(self) -> list[str]:
        return [t.name for t in self.tags]

    def has_mood(self, kind: MoodKind) -> bool:
        """True if any mood (primary or secondary) is of this kind."""
        return any(m.kind == kind for m in self.moods)

    def has_tag(self, name: str) -> bool:
        """Case-insensitive exact tag match."""
        wanted = name.casefold()
        return any(t.name.casefold() == wanted for t in self.tags)

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on content or any tag name."""
        needle = term.casefold()
        if needle in self.content.casefold():
            return True
        return any(needle in t.name.casefold() for t in self.tags)


def as_day(value: date | datetime) -> date:
    """Drop any time component, keeping the calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def unique_tags(names: Iterable[str]) -> list[Tag]:
    """
    Trim names, drop blanks and case-insensitive duplicates.

    First occurrence wins, so display casing is the one the user typed first.
    """
    seen: set[str] = set()
    tags = []
    for raw in names:
        name = (raw or "").strip()
        if not name or name.casefold() in seen:
            continue
        seen.add(name.casefold())
        tags.append(Tag(name=name))
    return tags


def normalize_category(category: str | None) -> str | None:
    """Map blank and the "None" sentinel to no category."""
    if category is None:
        return None
    category = category.strip()
    if not category or category.casefold() == NO_CATEGORY.casefold():
        return None
    return category


def compose_entry(
    entry_date: date,
    content: str,
    primary_mood: MoodKind = MoodKind.CALM,
    secondary_moods: Iterable[MoodKind] = (),
    tags: Iterable[str] = (),
    category: str | None = None,
) -> Entry:
    """
    Build an entry the way the journal form does.

    Exactly one primary mood. Secondary moods never repeat the primary,
    are deduplicated and capped at MAX_SECONDARY_MOODS.
    """
    moods = [Mood(kind=primary_mood, is_primary=True)]
    picked: list[MoodKind] = []
    for kind in secondary_moods:
        if kind == primary_mood or kind in picked:
            continue
        if len(picked) >= MAX_SECONDARY_MOODS:
            break
        picked.append(kind)
    moods.extend(Mood(kind=k, is_primary=False) for k in picked)

    return Entry(
        date=entry_date,
        content=content,
        category=normalize_category(category),
        moods=moods,
        tags=unique_tags(tags),
    )


def sort_chronological(entries: list[Entry]) -> list[Entry]:
    """Oldest first. Used for export; display order is newest first."""
    return sorted(entries, key=lambda e: e.date)
