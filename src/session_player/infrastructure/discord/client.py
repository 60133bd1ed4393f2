"""Discord client hosting the playback sessions, one per voice channel."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from session_player.domain.shared.messages import LogTemplates
from session_player.infrastructure.discord.voice_transport import DiscordVoiceTransport

if TYPE_CHECKING:
    from ...config.container import Container

logger = logging.getLogger(__name__)


class SessionHostClient(discord.Client):
    """Wires the container to a live gateway connection.

    The command surface is left to whoever subclasses or wraps this client;
    it only supplies the voice transport and reacts to channels emptying.
    """

    def __init__(self, container: Container, **kwargs) -> None:
        intents = discord.Intents.default()
        intents.voice_states = True
        intents.guilds = True
        intents.members = True

        super().__init__(intents=intents, **kwargs)

        self.container = container
        container.set_voice_transport(DiscordVoiceTransport(self))

    async def setup_hook(self) -> None:
        await self.container.initialize()
        logger.info(LogTemplates.HOST_SETUP_COMPLETE)

    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        left = before.channel
        if left is None or (after.channel is not None and after.channel.id == left.id):
            return
        await self.check_channel_empty(left.id)

    async def check_channel_empty(self, channel_id: int) -> bool:
        """Hand an abandoned session to the playback service; True if it was empty."""
        if not self.container.session_registry.exists(channel_id):
            return False

        transport = self.container.voice_transport
        if transport is None or transport.current_non_bot_member_count(channel_id) > 0:
            return False

        logger.info(LogTemplates.CHANNEL_EMPTIED, channel_id)
        await self.container.playback_service.handle_channel_empty(channel_id)
        return True

    async def close(self) -> None:
        await super().close()
        await self.container.shutdown()


def create_client(container: Container) -> SessionHostClient:
    return SessionHostClient(container)
