from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

SESSION_ID = 111111111111111111
OTHER_SESSION_ID = 222222222222222222

# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def sqlite_database(tmp_path):
    """Create a file-backed SQLite database for testing."""
    from session_player.infrastructure.persistence.database import Database

    db = Database(f"sqlite:///{tmp_path / 'history.db'}")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def sqlite_history_log(sqlite_database):
    from session_player.infrastructure.persistence.sqlite_history_log import SQLiteHistoryLog

    return SQLiteHistoryLog(sqlite_database)


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


def make_track(name: str = "Test Track", duration: float = 180, requested_by: str = "tester#0001"):
    from session_player.domain.music.entities import Track
    from session_player.domain.music.value_objects import track_id_from_url

    url = f"https://example.com/watch?v={name.replace(' ', '-').lower()}"
    return Track(
        id=track_id_from_url(url),
        title=name,
        url=url,
        duration_seconds=duration,
        requested_by=requested_by,
    )


@pytest.fixture
def sample_track():
    """Create a sample track for testing."""
    return make_track()


@pytest.fixture
def tracks():
    """Four distinct tracks a, b, c, d."""
    return [make_track(name, duration=60 * (i + 1)) for i, name in enumerate("abcd")]


@pytest.fixture
def sample_session(tracks):
    """A session playing track a with b, c, d queued."""
    from session_player.domain.music.entities import PlaybackSession

    session = PlaybackSession(session_id=SESSION_ID)
    session.enqueue_many(tracks)
    return session


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def event_sink():
    """An EventSink whose publish calls are recorded."""
    sink = MagicMock()
    sink.published = []

    async def publish(event):
        sink.published.append(event)

    sink.publish = AsyncMock(side_effect=publish)
    return sink


@pytest.fixture
def voice_transport():
    transport = MagicMock()
    transport.join = AsyncMock(return_value=True)
    transport.leave = AsyncMock(return_value=True)
    transport.current_non_bot_member_count = MagicMock(return_value=4)
    return transport


@pytest.fixture
def track_resolver():
    resolver = MagicMock()
    resolver.resolve = AsyncMock()
    return resolver


@pytest.fixture
def history_log():
    from session_player.infrastructure.persistence.history_log import InMemoryHistoryLog

    return InMemoryHistoryLog()


@pytest.fixture
def byte_store(tmp_path):
    from session_player.infrastructure.persistence.file_byte_store import FileByteStore

    return FileByteStore(tmp_path)


@pytest.fixture
def vote_coordinator():
    from session_player.domain.voting.services import VoteSkipCoordinator

    return VoteSkipCoordinator()


@pytest.fixture
def session_registry(vote_coordinator):
    from session_player.application.services.session_registry import SessionRegistry

    return SessionRegistry(vote_coordinator=vote_coordinator)


@pytest.fixture
def queue_persistence(byte_store):
    from session_player.application.services.queue_persistence import QueuePersistence

    return QueuePersistence(byte_store)


@pytest.fixture
def playback_service(
    session_registry,
    vote_coordinator,
    event_sink,
    history_log,
    queue_persistence,
    voice_transport,
    track_resolver,
):
    from session_player.application.services.playback_service import PlaybackApplicationService

    return PlaybackApplicationService(
        session_registry=session_registry,
        vote_coordinator=vote_coordinator,
        event_sink=event_sink,
        history_log=history_log,
        queue_persistence=queue_persistence,
        voice_transport=voice_transport,
        track_resolver=track_resolver,
    )


@pytest.fixture
def track_factory():
    """Build tracks by name: ``track_factory("x", duration=30)``."""
    return make_track
