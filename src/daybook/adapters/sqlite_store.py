"""SQLite journal storage adapter."""

import logging
import sqlite3
from collections import defaultdict
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Iterator

from daybook.core.entries import Entry, Mood, MoodKind, Tag
from daybook.core.users import User
from daybook.errors import ConstraintViolation, StorageError

logger = logging.getLogger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        pin_hash TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS journal_entries (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL UNIQUE,
        content TEXT NOT NULL,
        category TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS moods (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        entry_id INTEGER NOT NULL,
        kind INTEGER NOT NULL,
        is_primary INTEGER NOT NULL,
        FOREIGN KEY (entry_id) REFERENCES journal_entries(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tags (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        entry_id INTEGER NOT NULL,
        name TEXT NOT NULL,
        FOREIGN KEY (entry_id) REFERENCES journal_entries(id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_moods_entry_id ON moods(entry_id)",
    "CREATE INDEX IF NOT EXISTS idx_tags_entry_id ON tags(entry_id)",
)

# Columns added after the first release: (table, column, type)
OPTIONAL_COLUMNS = (("journal_entries", "category", "TEXT"),)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Translate sqlite3 failures into daybook errors."""
    try:
        yield
    except sqlite3.IntegrityError as e:
        if "UNIQUE" in str(e):
            raise ConstraintViolation(f"{action} failed: {e}") from e
        logger.error(f"{action} failed: {e}")
        raise StorageError(f"{action} failed: {e}", e) from e
    except sqlite3.Error as e:
        logger.error(f"{action} failed: {e}")
        raise StorageError(f"{action} failed: {e}", e) from e


class SqliteJournalStore:
    """
    SQLite journal storage.

    Implements EntryStore protocol and holds the user rows the auth
    provider persists. Each call opens a short-lived connection unless
    handed one from transaction().
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Context manager for one connection and one transaction."""
        with storage_errors("Opening database"):
            conn = self._connect()
        try:
            yield conn
            with storage_errors("Commit"):
                conn.commit()
        except BaseException:
            try:
                conn.rollback()
            except sqlite3.Error as e:
                logger.error(f"Rollback failed: {e}")
            raise
        finally:
            conn.close()

    @contextmanager
    def _session(self, conn: sqlite3.Connection | None, action: str) -> Iterator[sqlite3.Connection]:
        """Reuse the caller's connection, or run in a transaction of our own."""
        with storage_errors(action):
            if conn is not None:
                yield conn
            else:
                with self.transaction() as own:
                    yield own

    # ============== Schema ==============

    def create_schema_if_missing(self) -> None:
        """Create tables and add optional columns missing from older databases."""
        with self._session(None, "Schema setup") as conn:
            for statement in SCHEMA:
                conn.execute(statement)
            for table, column, type_sql in OPTIONAL_COLUMNS:
                self._ensure_column(conn, table, column, type_sql)
        logger.debug(f"Schema ready at {self.db_path}")

    @staticmethod
    def _ensure_column(conn: sqlite3.Connection, table: str, column: str, type_sql: str) -> None:
        columns = {row["name"].lower() for row in conn.execute(f"PRAGMA table_info({table})")}
        if column.lower() in columns:
            return
        logger.info(f"Migrating database: adding {table}.{column}")
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {type_sql}")

    # ============== Entries ==============

    def insert_entry(
        self,
        entry_date: date,
        content: str,
        category: str | None,
        created_at: datetime,
        conn: sqlite3.Connection | None = None,
    ) -> int:
        with self._session(conn, "Inserting entry") as c:
            try:
                cursor = c.execute(
                    "INSERT INTO journal_entries (date, content, category, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (entry_date.isoformat(), content, category, created_at.isoformat()),
                )
            except sqlite3.IntegrityError as e:
                if "UNIQUE" not in str(e):
                    raise
                raise ConstraintViolation(
                    f"An entry for {entry_date.isoformat()} already exists"
                ) from e
            return cursor.lastrowid

    def update_entry(
        self,
        entry_id: int,
        content: str,
        category: str | None,
        updated_at: datetime,
        conn: sqlite3.Connection | None = None,
    ) -> bool:
        with self._session(conn, "Updating entry") as c:
            cursor = c.execute(
                "UPDATE journal_entries SET content = ?, category = ?, updated_at = ? WHERE id = ?",
                (content, category, updated_at.isoformat(), entry_id),
            )
            return cursor.rowcount > 0

    def delete_entry(self, entry_date: date, conn: sqlite3.Connection | None = None) -> None:
        with self._session(conn, "Deleting entry") as c:
            c.execute("DELETE FROM journal_entries WHERE date = ?", (entry_date.isoformat(),))

    def replace_children(
        self,
        entry_id: int,
        moods: list[Mood],
        tags: list[Tag],
        conn: sqlite3.Connection | None = None,
    ) -> None:
        with self._session(conn, "Replacing moods and tags") as c:
            c.execute("DELETE FROM moods WHERE entry_id = ?", (entry_id,))
            c.execute("DELETE FROM tags WHERE entry_id = ?", (entry_id,))
            c.executemany(
                "INSERT INTO moods (entry_id, kind, is_primary) VALUES (?, ?, ?)",
                [(entry_id, int(m.kind), 1 if m.is_primary else 0) for m in moods],
            )
            c.executemany(
                "INSERT INTO tags (entry_id, name) VALUES (?, ?)",
                [(entry_id, t.name) for t in tags],
            )

    def get_entry_by_date(
        self, entry_date: date, conn: sqlite3.Connection | None = None
    ) -> Entry | None:
        with self._session(conn, "Reading entry") as c:
            row = c.execute(
                "SELECT * FROM journal_entries WHERE date = ?", (entry_date.isoformat(),)
            ).fetchone()
            if row is None:
                return None
            return self._hydrate(c, [row], only_ids=[row["id"]])[0]

    def get_all_entries(self, conn: sqlite3.Connection | None = None) -> list[Entry]:
        with self._session(conn, "Reading entries") as c:
            rows = c.execute("SELECT * FROM journal_entries ORDER BY date DESC, id ASC").fetchall()
            return self._hydrate(c, rows)

    def _hydrate(
        self,
        conn: sqlite3.Connection,
        rows: list[sqlite3.Row],
        only_ids: list[int] | None = None,
    ) -> list[Entry]:
        """Build entries with moods and tags populated, keeping row order."""
        where, params = "", ()
        if only_ids is not None:
            where = f"WHERE entry_id IN ({', '.join('?' for _ in only_ids)})"
            params = tuple(only_ids)

        moods: dict[int, list[Mood]] = defaultdict(list)
        for m in conn.execute(f"SELECT * FROM moods {where} ORDER BY id", params):
            moods[m["entry_id"]].append(_mood_from_row(m))

        tags: dict[int, list[Tag]] = defaultdict(list)
        for t in conn.execute(f"SELECT * FROM tags {where} ORDER BY id", params):
            tags[t["entry_id"]].append(Tag(name=t["name"], id=t["id"]))

        return [
            _entry_from_row(row, moods.get(row["id"], []), tags.get(row["id"], []))
            for row in rows
        ]

    # ============== Users ==============

    def insert_user(
        self,
        username: str,
        password_hash: str,
        pin_hash: str | None,
        created_at: datetime,
    ) -> int:
        with self._session(None, "Creating user") as c:
            try:
                cursor = c.execute(
                    "INSERT INTO users (username, password_hash, pin_hash, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (username, password_hash, pin_hash, created_at.isoformat()),
                )
            except sqlite3.IntegrityError as e:
                if "UNIQUE" not in str(e):
                    raise
                raise ConstraintViolation(f"Username '{username}' is already taken") from e
            return cursor.lastrowid

    def get_user(self, username: str) -> User | None:
        with self._session(None, "Reading user") as c:
            row = c.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()
            if row is None:
                return None
            return User(
                id=row["id"],
                username=row["username"],
                password_hash=row["password_hash"],
                pin_hash=row["pin_hash"],
                created_at=datetime.fromisoformat(row["created_at"]),
            )

    def count_users(self) -> int:
        with self._session(None, "Counting users") as c:
            return c.execute("SELECT COUNT(*) FROM users").fetchone()[0]


def _mood_from_row(row: sqlite3.Row) -> Mood:
    try:
        kind = MoodKind(row["kind"])
    except ValueError as e:
        raise StorageError(f"Unknown mood value {row['kind']} in mood {row['id']}", e) from e
    return Mood(kind=kind, is_primary=bool(row["is_primary"]), id=row["id"])


def _entry_from_row(row: sqlite3.Row, moods: list[Mood], tags: list[Tag]) -> Entry:
    return Entry(
        id=row["id"],
        date=date.fromisoformat(row["date"]),
        content=row["content"],
        category=row["category"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None,
        moods=moods,
        tags=tags,
    )
