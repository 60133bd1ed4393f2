"""Queue snapshot persistence.

Unlike the rest of the session layer, failures here are not raised: ``save``
answers ``False`` and ``load`` answers ``None`` when the byte store or the
payload cannot be used. Callers that want a reason look at the log.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from ...domain.music.entities import PlaybackSession
from ...domain.music.snapshot import Snapshot
from ...domain.shared.exceptions import PersistenceIOError
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..interfaces.byte_store import ByteStore

logger = logging.getLogger(__name__)


class QueuePersistence:
    def __init__(self, byte_store: ByteStore) -> None:
        self._store = byte_store

    async def save(self, session: PlaybackSession | Snapshot, location: str) -> bool:
        """Write a session (or an already taken snapshot) to ``location``."""
        snapshot = session if isinstance(session, Snapshot) else Snapshot.from_session(session)
        try:
            await self._store.write(location, snapshot.to_json())
        except (PersistenceIOError, OSError) as e:
            logger.warning(LogTemplates.SNAPSHOT_SAVE_FAILED, location, e)
            return False

        logger.info(
            LogTemplates.SNAPSHOT_SAVED,
            session.session_id if isinstance(session, PlaybackSession) else "-",
            location,
        )
        return True

    async def load(self, location: str) -> Snapshot | None:
        """Read and decode a snapshot.

        ``None`` means the bytes could not be read, were not JSON, or were not a
        JSON object. Field shapes are not checked here.
        """
        try:
            data = await self._store.read(location)
            snapshot = Snapshot.from_json(data)
        except (PersistenceIOError, OSError, ValidationError, UnicodeDecodeError) as e:
            logger.warning(LogTemplates.SNAPSHOT_LOAD_FAILED, location, e)
            return None

        logger.info(LogTemplates.SNAPSHOT_LOADED, location)
        return snapshot
