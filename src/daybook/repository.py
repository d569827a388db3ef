"""Entry repository - upsert, delete and queries over the entry store."""

import logging
from datetime import date, datetime

from .core.entries import Entry, MoodKind, as_day, unique_tags
from .errors import ValidationError
from .ports.entry_store import EntryStore

logger = logging.getLogger(__name__)


class EntryRepository:
    """
    Entry-level operations over an EntryStore.

    save_entry is the only way to create or edit history. Every read
    returns entries with moods and tags populated, newest first.
    """

    def __init__(self, store: EntryStore):
        self.store = store

    def save_entry(self, entry: Entry | None) -> Entry:
        """
        Insert or update the entry for entry.date.

        An existing entry keeps its id and creation time; its content and
        category are overwritten and its moods and tags replaced. Everything
        happens in one transaction, rolled back on any failure.
        """
        if entry is None:
            raise ValidationError("Journal entry cannot be null.")

        entry_date = as_day(entry.date)
        moods = [m for m in entry.moods if m is not None]
        tags = unique_tags(t.name for t in entry.tags if t is not None)
        now = datetime.now()

        with self.store.transaction() as conn:
            existing = self.store.get_entry_by_date(entry_date, conn=conn)
            if existing is not None:
                self.store.update_entry(existing.id, entry.content, entry.category, now, conn=conn)
                entry_id, created_at, updated_at = existing.id, existing.created_at, now
            else:
                entry_id = self.store.insert_entry(
                    entry_date, entry.content, entry.category, now, conn=conn
                )
                created_at, updated_at = now, None
            self.store.replace_children(entry_id, moods, tags, conn=conn)

        if existing is not None:
            logger.info(f"Updated entry {entry_id} for {entry_date}")
        else:
            logger.info(f"Created entry {entry_id} for {entry_date}")

        entry.id = entry_id
        entry.created_at = created_at
        entry.updated_at = updated_at
        entry.moods = moods
        entry.tags = tags
        return entry

    def delete_entry(self, entry_date: date) -> None:
        """Delete the entry for a date. Nothing happens if there is none."""
        self.store.delete_entry(as_day(entry_date))
        logger.info(f"Deleted entry for {as_day(entry_date)}")

    def get_entry_by_date(self, entry_date: date) -> Entry | None:
        return self.store.get_entry_by_date(as_day(entry_date))

    def get_all_entries(self) -> list[Entry]:
        return self.store.get_all_entries()

    def search_entries(self, term: str) -> list[Entry]:
        """Case-insensitive substring match on content or any tag name."""
        entries = self.get_all_entries()
        if not term or not term.strip():
            return entries
        return [e for e in entries if e.matches(term)]

    def filter_by_mood(self, kind: MoodKind) -> list[Entry]:
        """Entries with a primary or secondary mood of this kind."""
        return [e for e in self.get_all_entries() if e.has_mood(kind)]

    def filter_by_tag(self, name: str) -> list[Entry]:
        """Entries tagged with this exact name, ignoring case."""
        return [e for e in self.get_all_entries() if e.has_tag(name)]
