"""
Routes human-readable moderation events to the configured log channels.

Three destinations exist (security, warn and ban). A destination that is not
configured, cannot be resolved, or rejects the message never raises into the
caller: the event is dropped and the reason is logged.
"""

from __future__ import annotations

from typing import Optional

import discord

from staffguard.configuration.app_configuration import BotSettings
from staffguard.datatypes.moderation_datatypes import LogCategory
from staffguard.util.logger import get_logger

logger = get_logger("notification_sink")


class NotificationSink:
    """Sends text or embeds to the log channel of a :class:`LogCategory`."""

    def __init__(self, bot, settings: BotSettings):
        self.bot = bot
        self.settings = settings

    async def resolve_channel(self, category: LogCategory) -> Optional[discord.abc.Messageable]:
        channel_id = self.settings.log_channel_for(category)
        if channel_id is None:
            logger.debug("[NOTIFICATION SINK] No %s log channel configured", category)
            return None

        channel = self.bot.get_channel(channel_id.to_int())
        if channel is not None:
            return channel

        try:
            return await self.bot.fetch_channel(channel_id.to_int())
        except Exception as exc:
            logger.warning("[NOTIFICATION SINK] Could not resolve %s log channel %s: %s", category, channel_id, exc)
            return None

    async def send(
        self,
        category: LogCategory,
        text: Optional[str] = None,
        embed: Optional[discord.Embed] = None,
    ) -> bool:
        """Deliver a notification; returns True when the message was sent.

        When both are given the embed is sent with the text as its content.
        """
        if text is None and embed is None:
            raise ValueError("A notification needs text or an embed")

        channel = await self.resolve_channel(category)
        if channel is None:
            return False

        try:
            if embed is not None:
                await channel.send(content=text, embed=embed)
            else:
                await channel.send(text)
        except Exception as exc:
            logger.error("[NOTIFICATION SINK] Failed to send %s notification: %s", category, exc)
            return False
        return True

    async def security(self, text: Optional[str] = None, embed: Optional[discord.Embed] = None) -> bool:
        return await self.send(LogCategory.SECURITY, text=text, embed=embed)

    async def warn(self, text: Optional[str] = None, embed: Optional[discord.Embed] = None) -> bool:
        return await self.send(LogCategory.WARN, text=text, embed=embed)

    async def ban(self, text: Optional[str] = None, embed: Optional[discord.Embed] = None) -> bool:
        return await self.send(LogCategory.BAN, text=text, embed=embed)
