"""
Unit Tests for QueuePersistence

Tests for:
- save/load round trip through a file byte store
- failure results instead of exceptions
- lenient parsing
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from session_player.application.services.queue_persistence import QueuePersistence
from session_player.domain.music.entities import PlaybackSession
from session_player.domain.music.snapshot import Snapshot
from session_player.domain.shared.exceptions import PersistenceIOError


class TestQueuePersistenceRoundTrip:
    """save then load reproduces the session's queue state."""

    @pytest.mark.asyncio
    async def test_round_trip(self, queue_persistence, sample_session):
        sample_session.set_volume(70)
        sample_session.set_loop("queue")

        assert await queue_persistence.save(sample_session, "guild/queue.json") is True
        snapshot = await queue_persistence.load("guild/queue.json")

        assert [view.title for view in snapshot.songs] == ["a", "b", "c", "d"]
        assert snapshot.now_playing.title == "a"
        assert snapshot.volume == 70
        assert snapshot.repeat_mode == 2

        restored = PlaybackSession(session_id=sample_session.session_id)
        restored.apply_snapshot(snapshot)
        assert restored.queue == sample_session.queue

    @pytest.mark.asyncio
    async def test_save_accepts_snapshot(self, queue_persistence, sample_session, tmp_path):
        snapshot = Snapshot.from_session(sample_session)

        assert await queue_persistence.save(snapshot, "snap.json") is True
        assert (tmp_path / "snap.json").read_bytes() == snapshot.to_json()

    @pytest.mark.asyncio
    async def test_load_does_not_range_check(self, queue_persistence, tmp_path):
        (tmp_path / "loud.json").write_text('{"songs": [], "volume": 500, "repeatMode": 9}')

        snapshot = await queue_persistence.load("loud.json")

        assert snapshot.volume == 500
        assert snapshot.repeat_mode == 9

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("payload", "field", "expected"),
        [
            ('{"volume": 55.5, "songs": []}', "volume", 55.5),
            ('{"repeatMode": "queue", "songs": []}', "repeat_mode", "queue"),
            ('{"songs": null}', "songs", None),
            ('{"songs": "nope"}', "songs", "nope"),
        ],
    )
    async def test_load_keeps_unexpected_shapes(
        self, queue_persistence, tmp_path, payload, field, expected
    ):
        (tmp_path / "shape.json").write_text(payload)

        snapshot = await queue_persistence.load("shape.json")

        assert snapshot is not None
        assert getattr(snapshot, field) == expected

    @pytest.mark.asyncio
    async def test_load_keeps_malformed_song_entries(self, queue_persistence, tmp_path):
        (tmp_path / "songs.json").write_text('{"songs": [{"title": "a", "url": "u"}, 5]}')

        snapshot = await queue_persistence.load("songs.json")

        assert snapshot.songs == [{"title": "a", "url": "u"}, 5]


class TestQueuePersistenceFailures:
    """I/O and parse failures become False / None."""

    @pytest.mark.asyncio
    async def test_load_missing_file_returns_none(self, queue_persistence):
        assert await queue_persistence.load("missing.json") is None

    @pytest.mark.asyncio
    async def test_load_invalid_json_returns_none(self, queue_persistence, tmp_path):
        (tmp_path / "bad.json").write_text("{not json")

        assert await queue_persistence.load("bad.json") is None

    @pytest.mark.asyncio
    async def test_load_non_object_returns_none(self, queue_persistence, tmp_path):
        (tmp_path / "list.json").write_text("[1, 2, 3]")

        assert await queue_persistence.load("list.json") is None

    @pytest.mark.asyncio
    async def test_save_returns_false_on_write_error(self, sample_session):
        store = MagicMock()
        store.write = AsyncMock(side_effect=PersistenceIOError("x.json"))

        assert await QueuePersistence(store).save(sample_session, "x.json") is False

    @pytest.mark.asyncio
    async def test_save_returns_false_on_os_error(self, sample_session):
        store = MagicMock()
        store.write = AsyncMock(side_effect=PermissionError("denied"))

        assert await QueuePersistence(store).save(sample_session, "x.json") is False

    @pytest.mark.asyncio
    async def test_save_into_unwritable_location_returns_false(
        self, queue_persistence, sample_session, tmp_path
    ):
        (tmp_path / "blocker").write_text("file, not a directory")

        assert await queue_persistence.save(sample_session, "blocker/queue.json") is False
