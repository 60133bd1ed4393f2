"""
Music Bounded Context

Domain logic for tracks, the playback session aggregate, snapshots and history.
"""

from session_player.domain.music.entities import PlaybackSession, QueueInfo, Track
from session_player.domain.music.repository import HistoryEntry, HistoryLog
from session_player.domain.music.snapshot import Snapshot, TrackView
from session_player.domain.music.value_objects import RepeatMode

__all__ = [
    # Entities
    "Track",
    "PlaybackSession",
    "QueueInfo",
    # Value Objects
    "RepeatMode",
    "Snapshot",
    "TrackView",
    # Repository
    "HistoryEntry",
    "HistoryLog",
]
