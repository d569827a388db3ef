"""Entry storage interface."""

from contextlib import AbstractContextManager
from datetime import date, datetime
from typing import Any, Protocol

from daybook.core.entries import Entry, Mood, Tag


class EntryStore(Protocol):
    """
    Interface for durable entry storage.

    Every operation accepts an optional conn from transaction() so that
    several operations commit or roll back together.
    """

    def create_schema_if_missing(self) -> None:
        """Create tables and add missing optional columns. Idempotent."""
        ...

    def transaction(self) -> AbstractContextManager[Any]:
        """Open one transaction, committed on success and rolled back on error."""
        ...

    def insert_entry(
        self,
        entry_date: date,
        content: str,
        category: str | None,
        created_at: datetime,
        conn: Any = None,
    ) -> int:
        """Insert an entry row and return its id. Duplicate date raises ConstraintViolation."""
        ...

    def update_entry(
        self,
        entry_id: int,
        content: str,
        category: str | None,
        updated_at: datetime,
        conn: Any = None,
    ) -> bool:
        """Update an entry row. Returns False if the id does not exist."""
        ...

    def delete_entry(self, entry_date: date, conn: Any = None) -> None:
        """Delete the entry for a date, with its moods and tags. Idempotent."""
        ...

    def replace_children(
        self, entry_id: int, moods: list[Mood], tags: list[Tag], conn: Any = None
    ) -> None:
        """Replace all moods and tags of an entry."""
        ...

    def get_entry_by_date(self, entry_date: date, conn: Any = None) -> Entry | None:
        """Read the entry for a date. Returns None if not found."""
        ...

    def get_all_entries(self, conn: Any = None) -> list[Entry]:
        """Read all entries, newest date first."""
        ...
