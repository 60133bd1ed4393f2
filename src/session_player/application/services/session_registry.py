"""Registry of live playback sessions, one per destination."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from ...domain.music.entities import DEFAULT_VOLUME, PlaybackSession
from ...domain.shared.exceptions import NotFoundError
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.voting.services import VoteSkipCoordinator

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Owns every PlaybackSession and the lock that serializes its mutations.

    Locks are kept per destination id for the life of the registry, so a
    session recreated under the same id shares the lock its predecessor used
    and waiters queued on it stay serialized. Only ids that have had a session
    get an entry.
    """

    def __init__(
        self,
        *,
        vote_coordinator: VoteSkipCoordinator | None = None,
        default_volume: int = DEFAULT_VOLUME,
    ) -> None:
        self._sessions: dict[int, PlaybackSession] = {}
        self._locks: dict[int, asyncio.Lock] = {}
        self._vote_coordinator = vote_coordinator
        self._default_volume = default_volume

    @asynccontextmanager
    async def lock(self, session_id: int, *, create: bool = False) -> AsyncIterator[None]:
        """Hold the destination's critical section.

        Pass ``create`` when the caller may create the session. Otherwise an id
        with no session gets a throwaway lock and leaves nothing behind.
        """
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            if create or session_id in self._sessions:
                self._locks[session_id] = lock
        async with lock:
            yield

    def get_or_create(self, session_id: int) -> PlaybackSession:
        session = self._sessions.get(session_id)
        if session is None:
            session = PlaybackSession(session_id=session_id, volume=self._default_volume)
            self._sessions[session_id] = session
            logger.info(LogTemplates.SESSION_CREATED, session_id)
        return session

    def get(self, session_id: int) -> PlaybackSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(
                "Session",
                session_id,
                message=ErrorMessages.SESSION_NOT_FOUND.format(session_id=session_id),
            )
        return session

    def find(self, session_id: int) -> PlaybackSession | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: int) -> bool:
        """Drop a session together with any pending skip votes."""
        if self._vote_coordinator is not None:
            self._vote_coordinator.reset(session_id)
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        logger.info(LogTemplates.SESSION_REMOVED, session_id)
        return True

    def exists(self, session_id: int) -> bool:
        return session_id in self._sessions

    def count(self) -> int:
        return len(self._sessions)

    def session_ids(self) -> list[int]:
        return list(self._sessions)
