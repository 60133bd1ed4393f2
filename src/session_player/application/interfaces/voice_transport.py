"""Port interface for the voice connection a session plays into."""

from __future__ import annotations

from abc import ABC, abstractmethod

from session_player.domain.shared.types import DiscordSnowflake


class VoiceTransport(ABC):
    """Interface for voice destination operations."""

    @abstractmethod
    async def join(self, destination: DiscordSnowflake) -> bool:
        """Connect to a voice destination."""
        ...

    @abstractmethod
    async def leave(self, destination: DiscordSnowflake) -> bool:
        """Disconnect from a voice destination."""
        ...

    @abstractmethod
    def current_non_bot_member_count(self, destination: DiscordSnowflake) -> int:
        """Members present in the destination right now, bots excluded.

        Read on every call; callers must not cache the result.
        """
        ...
