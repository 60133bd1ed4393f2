"""Ports the application layer depends on; adapters live in infrastructure."""

from session_player.application.interfaces.byte_store import ByteStore
from session_player.application.interfaces.track_resolver import TrackResolver
from session_player.application.interfaces.voice_transport import VoiceTransport

__all__ = [
    "ByteStore",
    "TrackResolver",
    "VoiceTransport",
]
