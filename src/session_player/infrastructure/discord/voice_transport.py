"""Discord voice transport: sessions are keyed by voice channel id."""

from __future__ import annotations

import asyncio
import logging

import discord

from session_player.application.interfaces.voice_transport import VoiceTransport
from session_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: float = 10.0

VoiceChannelLike = discord.VoiceChannel | discord.StageChannel


class DiscordVoiceTransport(VoiceTransport):
    def __init__(self, bot: discord.Client, *, connect_timeout: float = CONNECT_TIMEOUT) -> None:
        self._bot = bot
        self._connect_timeout = connect_timeout

    def _get_channel(self, channel_id: int) -> VoiceChannelLike | None:
        channel = self._bot.get_channel(channel_id)
        return channel if isinstance(channel, VoiceChannelLike) else None

    def _get_voice_client(self, channel: VoiceChannelLike) -> discord.VoiceClient | None:
        vc = channel.guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    async def join(self, destination: int) -> bool:
        channel = self._get_channel(destination)
        if channel is None:
            logger.warning(LogTemplates.VOICE_CHANNEL_NOT_FOUND, destination)
            return False

        vc = self._get_voice_client(channel)
        if vc is not None and vc.channel is not None and vc.channel.id == destination:
            return True

        try:
            async with asyncio.timeout(self._connect_timeout):
                if vc is not None:
                    await vc.move_to(channel)
                else:
                    await channel.connect(self_deaf=True)
            logger.info(LogTemplates.VOICE_CONNECTED, channel.name)
            return True
        except TimeoutError:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, destination)
            return False
        except discord.Forbidden:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, destination)
            return False
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False

    async def leave(self, destination: int) -> bool:
        channel = self._get_channel(destination)
        if channel is None:
            return True

        vc = self._get_voice_client(channel)
        if vc is None or vc.channel is None or vc.channel.id != destination:
            return True  # Not connected here

        try:
            await vc.disconnect(force=True)
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False
        logger.info(LogTemplates.VOICE_DISCONNECTED, destination)
        return True

    def current_non_bot_member_count(self, destination: int) -> int:
        channel = self._get_channel(destination)
        if channel is None:
            return 0
        return sum(1 for member in channel.members if not member.bot)
