"""
Music Domain Repository Interfaces

Abstract base classes defining the contracts for history storage.
Implementations live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from session_player.domain.music.entities import Track
from session_player.domain.shared.datetime_utils import utcnow
from session_player.domain.shared.types import SessionIdInt, UtcDatetimeField


class HistoryEntry(BaseModel):
    """One "now playing" transition; ordering is append order."""

    model_config = ConfigDict(frozen=True)

    track: Track
    session_id: SessionIdInt | None = None
    played_at: UtcDatetimeField = Field(default_factory=utcnow)


class HistoryLog(ABC):
    """Append-only record of tracks that started playing.

    One instance is normally shared by every session in the process; the
    composing layer decides the scope by choosing what to inject.
    """

    @abstractmethod
    async def append(
        self, track: Track, session_id: int | None = None, played_at: datetime | None = None
    ) -> HistoryEntry:
        """Record that a track started playing.

        Args:
            track: The track now playing.
            session_id: The session it started in, if known.
            played_at: When it started (defaults to now).

        Returns:
            The stored entry.
        """
        ...

    @abstractmethod
    async def list(self) -> list[HistoryEntry]:
        """Return every entry, oldest first."""
        ...

    @abstractmethod
    async def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed.
        """
        ...
