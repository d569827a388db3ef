"""Shared workflow layer between the CLI and any other front end.

Each function resolves its collaborators from Config so callers never
construct adapters themselves.
"""

from datetime import date, datetime
from pathlib import Path

from .adapters.markdown_export import MarkdownExporter
from .adapters.sqlite_auth import SqliteAuthProvider
from .adapters.sqlite_store import SqliteJournalStore
from .config import Config
from .core.analytics import Dashboard, build_dashboard
from .repository import EntryRepository


def get_store(config: Config) -> SqliteJournalStore:
    """Open the configured database, creating or migrating its schema."""
    store = SqliteJournalStore(Path(config.database_path).expanduser())
    store.create_schema_if_missing()
    return store


def get_repository(config: Config) -> EntryRepository:
    return EntryRepository(get_store(config))


def get_auth(config: Config) -> SqliteAuthProvider:
    return SqliteAuthProvider(get_store(config))


def get_dashboard(config: Config, today: date | None = None) -> Dashboard:
    """Compute statistics from one snapshot of the whole journal."""
    entries = get_repository(config).get_all_entries()
    return build_dashboard(entries, today=today, tag_limit=config.top_tags)


def default_export_path(config: Config, now: datetime | None = None) -> Path:
    now = now or datetime.now()
    return Path(config.export_dir).expanduser() / f"journal-{now:%Y%m%d-%H%M%S}.md"


def export_journal(config: Config, path: Path | str | None = None) -> Path:
    """Export every entry, oldest first, and return the written path."""
    entries = get_repository(config).get_all_entries()
    exporter = MarkdownExporter(title=config.journal_title)
    return exporter.export(entries, path if path is not None else default_export_path(config))
