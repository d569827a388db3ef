"""Tests for the SQLite journal store."""

import sqlite3
from datetime import date, datetime
from unittest.mock import MagicMock, patch

import pytest

from daybook.adapters.sqlite_store import SqliteJournalStore
from daybook.core.entries import Mood, MoodKind, Tag
from daybook.errors import ConstraintViolation, StorageError


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "data" / "journal.db"


@pytest.fixture
def store(db_path):
    s = SqliteJournalStore(db_path)
    s.create_schema_if_missing()
    return s


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 21, 30)


def count_rows(db_path, table):
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    finally:
        conn.close()


class TestSchema:
    def test_creates_parent_dir_and_tables(self, store, db_path):
        assert db_path.exists()
        for table in ("users", "journal_entries", "moods", "tags"):
            assert count_rows(db_path, table) == 0

    def test_idempotent(self, store):
        store.create_schema_if_missing()
        store.create_schema_if_missing()
        assert store.get_all_entries() == []

    def test_adds_category_to_legacy_table_without_data_loss(self, db_path):
        db_path.parent.mkdir(parents=True)
        conn = sqlite3.connect(db_path)
        conn.execute(
            "CREATE TABLE journal_entries (id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "date TEXT NOT NULL UNIQUE, content TEXT NOT NULL, "
            "created_at TEXT NOT NULL, updated_at TEXT)"
        )
        conn.execute(
            "INSERT INTO journal_entries (date, content, created_at) VALUES (?, ?, ?)",
            ("2024-12-31", "Old entry", "2024-12-31T20:00:00"),
        )
        conn.commit()
        conn.close()

        store = SqliteJournalStore(db_path)
        store.create_schema_if_missing()
        store.create_schema_if_missing()

        entry = store.get_entry_by_date(date(2024, 12, 31))
        assert entry.content == "Old entry"
        assert entry.category is None
        assert entry.moods == []

        store.update_entry(entry.id, "Old entry", "Work", datetime(2025, 1, 1))
        assert store.get_entry_by_date(date(2024, 12, 31)).category == "Work"


class TestEntries:
    def test_insert_and_read(self, store, now):
        entry_id = store.insert_entry(date(2025, 1, 15), "Hello", "Personal", now)
        entry = store.get_entry_by_date(date(2025, 1, 15))
        assert entry.id == entry_id
        assert entry.content == "Hello"
        assert entry.category == "Personal"
        assert entry.created_at == now
        assert entry.updated_at is None

    def test_duplicate_date_is_constraint_violation(self, store, now):
        store.insert_entry(date(2025, 1, 15), "First", None, now)
        with pytest.raises(ConstraintViolation, match="2025-01-15"):
            store.insert_entry(date(2025, 1, 15), "Second", None, now)
        assert len(store.get_all_entries()) == 1

    def test_not_null_failure_is_storage_error(self, store, now):
        with pytest.raises(StorageError, match="NOT NULL") as exc_info:
            store.insert_entry(date(2025, 1, 3), None, None, now)
        assert not isinstance(exc_info.value, ConstraintViolation)
        assert store.get_all_entries() == []

    def test_update_missing_id_is_noop(self, store, now):
        assert store.update_entry(999, "x", None, now) is False

    def test_update_existing(self, store, now):
        entry_id = store.insert_entry(date(2025, 1, 15), "Hello", None, now)
        later = datetime(2025, 1, 15, 23, 0)
        assert store.update_entry(entry_id, "Edited", "Work", later) is True
        entry = store.get_entry_by_date(date(2025, 1, 15))
        assert entry.content == "Edited"
        assert entry.updated_at == later

    def test_missing_date_returns_none(self, store):
        assert store.get_entry_by_date(date(2020, 1, 1)) is None

    def test_all_entries_newest_first(self, store, now):
        for day in (10, 12, 11):
            store.insert_entry(date(2025, 1, day), f"day {day}", None, now)
        assert [e.date.day for e in store.get_all_entries()] == [12, 11, 10]


class TestChildren:
    def test_replace_children(self, store, now):
        entry_id = store.insert_entry(date(2025, 1, 15), "Hello", None, now)
        store.replace_children(
            entry_id,
            [Mood(MoodKind.HAPPY, True), Mood(MoodKind.CALM, False)],
            [Tag("Work"), Tag("Gym")],
        )
        store.replace_children(entry_id, [Mood(MoodKind.SAD, True)], [Tag("Rest")])

        entry = store.get_entry_by_date(date(2025, 1, 15))
        assert entry.moods == [Mood(MoodKind.SAD, True)]
        assert entry.tag_names == ["Rest"]
        assert all(m.id is not None for m in entry.moods)

    def test_children_hydrated_per_entry(self, store, now):
        a = store.insert_entry(date(2025, 1, 14), "a", None, now)
        b = store.insert_entry(date(2025, 1, 15), "b", None, now)
        store.replace_children(a, [Mood(MoodKind.TIRED, True)], [Tag("A")])
        store.replace_children(b, [Mood(MoodKind.HAPPY, True)], [Tag("B1"), Tag("B2")])

        newest, oldest = store.get_all_entries()
        assert newest.tag_names == ["B1", "B2"]
        assert newest.primary_mood.kind is MoodKind.HAPPY
        assert oldest.tag_names == ["A"]

    def test_delete_cascades(self, store, db_path, now):
        entry_id = store.insert_entry(date(2025, 1, 15), "Hello", None, now)
        store.replace_children(entry_id, [Mood(MoodKind.HAPPY, True)], [Tag("Work")])

        store.delete_entry(date(2025, 1, 15))

        assert store.get_entry_by_date(date(2025, 1, 15)) is None
        assert count_rows(db_path, "moods") == 0
        assert count_rows(db_path, "tags") == 0

    def test_delete_missing_is_noop(self, store):
        store.delete_entry(date(2020, 1, 1))

    def test_unknown_mood_value_is_storage_error(self, store, db_path, now):
        entry_id = store.insert_entry(date(2025, 1, 15), "Hello", None, now)
        conn = sqlite3.connect(db_path)
        conn.execute("INSERT INTO moods (entry_id, kind, is_primary) VALUES (?, 99, 1)", (entry_id,))
        conn.commit()
        conn.close()
        with pytest.raises(StorageError, match="99"):
            store.get_entry_by_date(date(2025, 1, 15))


class TestTransaction:
    def test_rollback_on_error(self, store, now):
        with pytest.raises(RuntimeError):
            with store.transaction() as conn:
                store.insert_entry(date(2025, 1, 15), "Hello", None, now, conn=conn)
                raise RuntimeError("boom")
        assert store.get_all_entries() == []

    def test_failed_rollback_keeps_original_error(self, store):
        conn = MagicMock()
        conn.rollback.side_effect = sqlite3.OperationalError("disk I/O error")
        with patch.object(store, "_connect", return_value=conn):
            with pytest.raises(RuntimeError, match="boom"):
                with store.transaction():
                    raise RuntimeError("boom")
        conn.rollback.assert_called_once()
        conn.close.assert_called_once()

    def test_commit_on_success(self, store, now):
        with store.transaction() as conn:
            entry_id = store.insert_entry(date(2025, 1, 15), "Hello", None, now, conn=conn)
            store.replace_children(entry_id, [Mood(MoodKind.CALM, True)], [], conn=conn)
        assert store.get_entry_by_date(date(2025, 1, 15)).primary_mood.kind is MoodKind.CALM


class TestErrors:
    def test_unopenable_database_is_storage_error(self, tmp_path):
        store = SqliteJournalStore(tmp_path)
        with pytest.raises(StorageError) as exc_info:
            store.get_all_entries()
        assert isinstance(exc_info.value.original, sqlite3.Error)

    def test_missing_schema_is_storage_error(self, db_path):
        store = SqliteJournalStore(db_path)
        with pytest.raises(StorageError, match="no such table"):
            store.get_all_entries()


class TestUsers:
    def test_insert_and_get(self, store, now):
        user_id = store.insert_user("alice", "hash", None, now)
        user = store.get_user("alice")
        assert user.id == user_id
        assert user.pin_hash is None
        assert user.created_at == now
        assert store.count_users() == 1

    def test_duplicate_username(self, store, now):
        store.insert_user("alice", "hash", None, now)
        with pytest.raises(ConstraintViolation):
            store.insert_user("alice", "other", None, now)

    def test_missing_password_hash_is_storage_error(self, store, now):
        with pytest.raises(StorageError, match="NOT NULL"):
            store.insert_user("bob", None, None, now)
        assert store.get_user("bob") is None

    def test_missing_user(self, store):
        assert store.get_user("nobody") is None
