"""Adapters - I/O implementations of ports."""

from .sqlite_store import SqliteJournalStore
from .sqlite_auth import SqliteAuthProvider
from .markdown_export import MarkdownExporter

__all__ = [
    "SqliteJournalStore",
    "SqliteAuthProvider",
    "MarkdownExporter",
]
