"""Dependency Injection Container

Manages the dependency graph of the session layer with lazy initialization.
Components are created on first access and cached for reuse. The host
(e.g. a Discord bot) supplies the track resolver and voice transport.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.byte_store import ByteStore
    from ..application.interfaces.track_resolver import TrackResolver
    from ..application.interfaces.voice_transport import VoiceTransport
    from ..application.services.playback_service import PlaybackApplicationService
    from ..application.services.queue_persistence import QueuePersistence
    from ..application.services.session_registry import SessionRegistry
    from ..domain.music.repository import HistoryLog
    from ..domain.shared.events import EventBus
    from ..domain.voting.services import VoteSkipCoordinator
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    One history log is shared by every session created through this container.
    """

    settings: Settings

    # Ports supplied by the host
    _track_resolver: TrackResolver | None = None
    _voice_transport: VoiceTransport | None = None

    # Persistence
    _database: Database | None = None
    _history_log: HistoryLog | None = None
    _byte_store: ByteStore | None = None
    _queue_persistence: QueuePersistence | None = None

    # Services
    _event_bus: EventBus | None = None
    _vote_coordinator: VoteSkipCoordinator | None = None
    _session_registry: SessionRegistry | None = None
    _playback_service: PlaybackApplicationService | None = None

    def set_track_resolver(self, resolver: TrackResolver) -> None:
        self._track_resolver = resolver

    def set_voice_transport(self, transport: VoiceTransport) -> None:
        self._voice_transport = transport

    @property
    def track_resolver(self) -> TrackResolver | None:
        return self._track_resolver

    @property
    def voice_transport(self) -> VoiceTransport | None:
        return self._voice_transport

    # === Events ===

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    # === Persistence ===

    @property
    def database(self) -> Database:
        """Database backing the SQLite history log."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            persistence = self.settings.persistence
            self._database = Database(
                persistence.history_database_url,
                busy_timeout_ms=persistence.busy_timeout_ms,
                connection_timeout_s=persistence.connection_timeout_s,
            )
        return self._database

    @property
    def history_log(self) -> HistoryLog:
        if self._history_log is None:
            if self.settings.persistence.history_backend == "sqlite":
                from ..infrastructure.persistence.sqlite_history_log import SQLiteHistoryLog

                self._history_log = SQLiteHistoryLog(self.database)
            else:
                from ..infrastructure.persistence.history_log import InMemoryHistoryLog

                self._history_log = InMemoryHistoryLog()
        return self._history_log

    @property
    def byte_store(self) -> ByteStore:
        if self._byte_store is None:
            from ..infrastructure.persistence.file_byte_store import FileByteStore

            self._byte_store = FileByteStore(self.settings.persistence.snapshot_dir)
        return self._byte_store

    @property
    def queue_persistence(self) -> QueuePersistence:
        if self._queue_persistence is None:
            from ..application.services.queue_persistence import QueuePersistence

            self._queue_persistence = QueuePersistence(self.byte_store)
        return self._queue_persistence

    # === Sessions ===

    @property
    def vote_coordinator(self) -> VoteSkipCoordinator:
        if self._vote_coordinator is None:
            from ..domain.voting.services import VoteSkipCoordinator

            self._vote_coordinator = VoteSkipCoordinator()
        return self._vote_coordinator

    @property
    def session_registry(self) -> SessionRegistry:
        if self._session_registry is None:
            from ..application.services.session_registry import SessionRegistry

            self._session_registry = SessionRegistry(
                vote_coordinator=self.vote_coordinator,
                default_volume=self.settings.playback.default_volume,
            )
        return self._session_registry

    @property
    def playback_service(self) -> PlaybackApplicationService:
        if self._playback_service is None:
            from ..application.services.playback_service import PlaybackApplicationService

            playback = self.settings.playback
            self._playback_service = PlaybackApplicationService(
                session_registry=self.session_registry,
                vote_coordinator=self.vote_coordinator,
                event_sink=self.event_bus,
                history_log=self.history_log,
                queue_persistence=self.queue_persistence,
                voice_transport=self._voice_transport,
                track_resolver=self._track_resolver,
                leave_on_empty=playback.leave_on_empty,
                leave_on_stop=playback.leave_on_stop,
                volume_step=playback.volume_step,
                progress_bar_length=playback.progress_bar_length,
            )
        return self._playback_service

    async def initialize(self) -> None:
        """Prepare storage that needs async setup."""
        if self.settings.persistence.history_backend == "sqlite":
            await self.database.initialize()
        logger.info("Container initialized")

    async def shutdown(self) -> None:
        if self._database is not None:
            await self._database.close()
        if self._event_bus is not None:
            self._event_bus.clear()
        logger.info("Container shutdown complete")


def create_container(settings: Settings | None = None) -> Container:
    """Create a container from the given or cached settings."""
    if settings is None:
        from .settings import get_settings

        settings = get_settings()
    return Container(settings=settings)
