"""In-memory implementation of the history log."""

from __future__ import annotations

import logging
from datetime import datetime

from session_player.domain.music.entities import Track
from session_player.domain.music.repository import HistoryEntry, HistoryLog
from session_player.domain.shared.datetime_utils import utcnow
from session_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class InMemoryHistoryLog(HistoryLog):
    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []

    async def append(
        self, track: Track, session_id: int | None = None, played_at: datetime | None = None
    ) -> HistoryEntry:
        entry = HistoryEntry(track=track, session_id=session_id, played_at=played_at or utcnow())
        self._entries.append(entry)
        logger.debug(LogTemplates.HISTORY_RECORDED, track.title, session_id)
        return entry

    async def list(self) -> list[HistoryEntry]:
        return self._entries.copy()

    async def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        logger.info(LogTemplates.HISTORY_CLEARED, count)
        return count
