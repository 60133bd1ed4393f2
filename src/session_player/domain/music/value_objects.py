"""Immutable value objects for the music bounded context."""

from __future__ import annotations

import hashlib
from enum import Enum, IntEnum

from session_player.domain.shared.exceptions import InvalidArgumentError
from session_player.domain.shared.messages import ErrorMessages


def track_id_from_url(url: str) -> str:
    """Stable identifier for a track known only by its source URL."""
    return hashlib.md5(url.encode()).hexdigest()[:16]


class RepeatMode(IntEnum):
    """Repeat settings; the integer value is the persisted form."""

    OFF = 0
    TRACK = 1  # Keep replaying the current track
    QUEUE = 2  # Rotate finished tracks to the tail

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: str | int | RepeatMode) -> RepeatMode:
        """Accept a mode, its persisted integer, or one of off/track/song/queue."""
        if isinstance(value, RepeatMode):
            return value
        if isinstance(value, bool):
            raise InvalidArgumentError(ErrorMessages.INVALID_LOOP_MODE, field="mode")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidArgumentError(ErrorMessages.INVALID_LOOP_MODE, field="mode") from None
        if isinstance(value, str):
            key = value.strip().lower()
            aliases = {"off": cls.OFF, "track": cls.TRACK, "song": cls.TRACK, "queue": cls.QUEUE}
            if key in aliases:
                return aliases[key]
        raise InvalidArgumentError(ErrorMessages.INVALID_LOOP_MODE, field="mode")

    def next_mode(self) -> RepeatMode:
        """Cycle to next repeat mode."""
        modes = list(RepeatMode)
        return modes[(modes.index(self) + 1) % len(modes)]


class SessionDestroyReason(Enum):
    """Reasons a session can be destroyed."""

    STOP = "stop"
    DISCONNECT = "disconnect"
    EMPTY = "empty"
