"""
Unit Tests for Persistence Adapters

Tests for:
- FileByteStore reads and writes
- InMemoryHistoryLog
- SQLiteHistoryLog on a temporary database
"""

from datetime import UTC, datetime

import pytest

from session_player.domain.shared.exceptions import PersistenceIOError
from session_player.infrastructure.persistence.database import Database
from session_player.infrastructure.persistence.file_byte_store import FileByteStore
from session_player.infrastructure.persistence.history_log import InMemoryHistoryLog
from session_player.infrastructure.persistence.sqlite_history_log import SQLiteHistoryLog

SESSION_ID = 111111111111111111

# =============================================================================
# FileByteStore Tests
# =============================================================================


class TestFileByteStore:
    """Unit tests for the filesystem byte store."""

    async def test_write_then_read(self, tmp_path):
        store = FileByteStore(tmp_path)

        await store.write("nested/dir/q.json", b"payload")

        assert await store.read("nested/dir/q.json") == b"payload"
        assert (tmp_path / "nested" / "dir" / "q.json").read_bytes() == b"payload"

    async def test_absolute_paths_ignore_base_dir(self, tmp_path):
        store = FileByteStore(tmp_path / "base")
        target = tmp_path / "elsewhere.json"

        await store.write(str(target), b"x")

        assert target.read_bytes() == b"x"

    async def test_read_missing_raises_persistence_error(self, tmp_path):
        store = FileByteStore(tmp_path)

        with pytest.raises(PersistenceIOError) as exc_info:
            await store.read("missing.json")
        assert exc_info.value.location == "missing.json"
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    async def test_write_failure_raises_persistence_error(self, tmp_path):
        (tmp_path / "file").write_text("not a dir")
        store = FileByteStore(tmp_path)

        with pytest.raises(PersistenceIOError):
            await store.write("file/child.json", b"x")


# =============================================================================
# HistoryLog Tests
# =============================================================================


class TestInMemoryHistoryLog:
    """Unit tests for the default history log."""

    async def test_append_list_clear(self, tracks):
        log = InMemoryHistoryLog()
        for track in tracks[:3]:
            await log.append(track, session_id=SESSION_ID)

        entries = await log.list()

        assert [e.track.title for e in entries] == ["a", "b", "c"]
        assert all(e.session_id == SESSION_ID for e in entries)
        assert await log.clear() == 3
        assert await log.list() == []

    async def test_list_returns_a_copy(self, sample_track):
        log = InMemoryHistoryLog()
        await log.append(sample_track)

        (await log.list()).clear()

        assert len(await log.list()) == 1

    async def test_custom_played_at(self, sample_track):
        log = InMemoryHistoryLog()
        played_at = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

        entry = await log.append(sample_track, played_at=played_at)

        assert entry.played_at == played_at
        assert entry.session_id is None


class TestSQLiteHistoryLog:
    """Unit tests for the aiosqlite history log."""

    async def test_append_and_list_in_insertion_order(self, sqlite_history_log, tracks):
        for track in tracks:
            await sqlite_history_log.append(track, session_id=SESSION_ID)

        entries = await sqlite_history_log.list()

        assert [e.track for e in entries] == tracks
        assert entries[0].session_id == SESSION_ID
        assert entries[0].played_at.tzinfo is not None

    async def test_preserves_played_at(self, sqlite_history_log, sample_track):
        played_at = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)

        await sqlite_history_log.append(sample_track, played_at=played_at)

        entries = await sqlite_history_log.list()
        assert entries[0].played_at == played_at
        assert entries[0].session_id is None

    async def test_clear_returns_count(self, sqlite_history_log, tracks):
        for track in tracks[:2]:
            await sqlite_history_log.append(track)

        assert await sqlite_history_log.clear() == 2
        assert await sqlite_history_log.list() == []

    async def test_initializes_database_lazily(self, tmp_path, sample_track):
        database = Database(f"sqlite:///{tmp_path / 'lazy' / 'h.db'}")
        log = SQLiteHistoryLog(database)

        await log.append(sample_track)

        assert database.initialized is True
        assert len(await log.list()) == 1
        await database.close()

    async def test_history_survives_new_log_instance(self, sqlite_database, sample_track):
        await SQLiteHistoryLog(sqlite_database).append(sample_track)

        assert len(await SQLiteHistoryLog(sqlite_database).list()) == 1


class TestDatabase:
    """Unit tests for the Database helper."""

    async def test_strips_sqlite_prefix(self, tmp_path):
        database = Database(f"sqlite:///{tmp_path / 'x.db'}")

        assert database.db_path == str(tmp_path / "x.db")

    async def test_in_memory_database(self, sample_track):
        database = Database(":memory:")
        await database.initialize()
        try:
            log = SQLiteHistoryLog(database)
            await log.append(sample_track)
            assert len(await log.list()) == 1
        finally:
            await database.close()

        assert database.initialized is False
