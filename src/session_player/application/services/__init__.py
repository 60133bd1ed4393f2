"""Application services: the session registry and the commands run against it."""

from session_player.application.services.playback_service import PlaybackApplicationService
from session_player.application.services.queue_persistence import QueuePersistence
from session_player.application.services.session_registry import SessionRegistry

__all__ = [
    "PlaybackApplicationService",
    "QueuePersistence",
    "SessionRegistry",
]
