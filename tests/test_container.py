"""
Unit Tests for Dependency Injection Container

Tests for:
- Lazy creation and caching of collaborators
- History backend selection
- Host-supplied ports
- Lifecycle methods (initialize, shutdown)
"""

from unittest.mock import MagicMock

import pytest

from session_player.application.services.playback_service import PlaybackApplicationService
from session_player.config.container import Container, create_container
from session_player.config.settings import PersistenceSettings, Settings
from session_player.domain.shared.events import EventBus
from session_player.infrastructure.persistence.file_byte_store import FileByteStore
from session_player.infrastructure.persistence.history_log import InMemoryHistoryLog
from session_player.infrastructure.persistence.sqlite_history_log import SQLiteHistoryLog


@pytest.fixture
def settings(tmp_path):
    return Settings(
        persistence=PersistenceSettings(
            snapshot_dir=str(tmp_path / "queues"),
            history_database_url=f"sqlite:///{tmp_path / 'history.db'}",
        )
    )


@pytest.fixture
def container(settings):
    return Container(settings=settings)


class TestContainerInitialization:
    """Unit tests for Container construction."""

    def test_create_container_factory(self, settings):
        container = create_container(settings)

        assert isinstance(container, Container)
        assert container.settings is settings

    def test_ports_default_to_none(self, container):
        assert container.track_resolver is None
        assert container.voice_transport is None


class TestContainerLazyProperties:
    """Collaborators are created once and shared."""

    def test_cached_instances(self, container):
        assert container.event_bus is container.event_bus
        assert container.session_registry is container.session_registry
        assert container.playback_service is container.playback_service

    def test_types(self, container):
        assert isinstance(container.event_bus, EventBus)
        assert isinstance(container.byte_store, FileByteStore)
        assert isinstance(container.history_log, InMemoryHistoryLog)
        assert isinstance(container.playback_service, PlaybackApplicationService)

    def test_sqlite_history_backend(self, tmp_path):
        settings = Settings(
            persistence=PersistenceSettings(
                history_backend="sqlite",
                history_database_url=f"sqlite:///{tmp_path / 'h.db'}",
            )
        )

        assert isinstance(Container(settings=settings).history_log, SQLiteHistoryLog)

    def test_registry_uses_configured_default_volume(self, tmp_path):
        settings = Settings(playback={"default_volume": 35})
        container = Container(settings=settings)

        assert container.session_registry.get_or_create(111111111111111111).volume == 35

    def test_byte_store_resolves_against_snapshot_dir(self, container, tmp_path):
        assert container.byte_store.resolve("q.json") == tmp_path / "queues" / "q.json"

    def test_host_ports_are_wired_into_service(self, container):
        resolver = MagicMock()
        transport = MagicMock()
        container.set_track_resolver(resolver)
        container.set_voice_transport(transport)

        service = container.playback_service

        assert service._resolver is resolver
        assert service._voice is transport


class TestContainerLifecycle:
    """Unit tests for initialize and shutdown."""

    async def test_initialize_sqlite_backend(self, tmp_path):
        settings = Settings(
            persistence=PersistenceSettings(
                history_backend="sqlite",
                history_database_url=f"sqlite:///{tmp_path / 'h.db'}",
            )
        )
        container = Container(settings=settings)

        await container.initialize()

        assert container.database.initialized is True
        await container.shutdown()
        assert container.database.initialized is False

    async def test_memory_backend_skips_database(self, container):
        await container.initialize()

        assert container._database is None
        await container.shutdown()
