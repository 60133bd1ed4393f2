"""SQLite implementation of the history log."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from session_player.domain.music.entities import Track
from session_player.domain.music.repository import HistoryEntry, HistoryLog
from session_player.domain.shared.datetime_utils import UtcDateTime
from session_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)


class SQLiteHistoryLog(HistoryLog):
    """History stored in the ``track_history`` table; rows come back in insertion order."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def _ensure_ready(self) -> None:
        if not self._db.initialized:
            await self._db.initialize()

    async def append(
        self, track: Track, session_id: int | None = None, played_at: datetime | None = None
    ) -> HistoryEntry:
        await self._ensure_ready()
        entry = HistoryEntry(
            track=track, session_id=session_id, played_at=played_at or UtcDateTime.now().dt
        )

        await self._db.execute(
            """
            INSERT INTO track_history (
                session_id, track_id, title, url, duration_seconds, requested_by, played_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                session_id,
                track.id,
                track.title,
                track.url,
                float(track.duration_seconds),
                track.requested_by,
                UtcDateTime(entry.played_at).iso,
            ),
        )
        logger.debug(LogTemplates.HISTORY_RECORDED, track.title, session_id)
        return entry

    async def list(self) -> list[HistoryEntry]:
        await self._ensure_ready()
        rows = await self._db.fetch_all("SELECT * FROM track_history ORDER BY id ASC")
        return [self._row_to_entry(row) for row in rows]

    async def clear(self) -> int:
        await self._ensure_ready()
        count = await self._db.execute("DELETE FROM track_history")
        logger.info(LogTemplates.HISTORY_CLEARED, count)
        return count

    @staticmethod
    def _row_to_entry(row: dict[str, Any]) -> HistoryEntry:
        track = Track(
            id=row["track_id"],
            title=row["title"],
            url=row["url"],
            duration_seconds=float(row["duration_seconds"]),
            requested_by=row["requested_by"],
        )
        return HistoryEntry(
            track=track,
            session_id=row["session_id"],
            played_at=UtcDateTime.from_iso(row["played_at"]).dt,
        )
