"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (file byte store, in-memory and SQLite history logs)
- Discord (voice transport)
"""

from session_player.infrastructure.discord.voice_transport import DiscordVoiceTransport
from session_player.infrastructure.persistence.database import Database

__all__ = [
    "DiscordVoiceTransport",
    "Database",
]
