"""
Moderation cog: slash commands for taking disciplinary actions on members.

Every command forwards its options to the shared :class:`CommandDispatcher`,
which checks that the invoking user is staff (or the owner, for ``/restore``)
before the handler touches the guild. Replies and log channel notifications
are produced by the handlers in :mod:`staffguard.bot.command_handlers`.

Quick usage example
    from staffguard.bot.cogs import moderation_cmds
    moderation_cmds.setup(bot, dispatcher)
"""

import discord
from discord import Option
from discord.ext import commands

from staffguard.bot.command_dispatcher import CommandDispatcher
from staffguard.util.logger import get_logger

logger = get_logger("moderation_cog")


class ModerationActionCog(commands.Cog):
    """Cog containing the ban, kick, mute, unban, warn and restore commands."""

    def __init__(self, discord_bot_instance, dispatcher: CommandDispatcher):
        self.discord_bot_instance = discord_bot_instance
        self.dispatcher = dispatcher
        logger.info("Moderation cog loaded")

    @commands.slash_command(name="ban", description="Ban a member", guild_only=True)
    async def ban(
        self,
        ctx: discord.ApplicationContext,
        target: Option(discord.Member, "Member to ban", required=True),  # type: ignore
        reason: Option(str, "Reason", required=False, default=None),  # type: ignore
    ) -> None:
        await self.dispatcher.dispatch("ban", ctx, target=target, reason=reason)

    @commands.slash_command(name="kick", description="Kick a member", guild_only=True)
    async def kick(
        self,
        ctx: discord.ApplicationContext,
        target: Option(discord.Member, "Member to kick", required=True),  # type: ignore
        reason: Option(str, "Reason", required=False, default=None),  # type: ignore
    ) -> None:
        await self.dispatcher.dispatch("kick", ctx, target=target, reason=reason)

    @commands.slash_command(name="mute", description="Mute a member (timeout)", guild_only=True)
    async def mute(
        self,
        ctx: discord.ApplicationContext,
        target: Option(discord.Member, "Member to mute", required=True),  # type: ignore
        minutes: Option(int, "Duration in minutes", required=True),  # type: ignore
    ) -> None:
        await self.dispatcher.dispatch("mute", ctx, target=target, minutes=minutes)

    @commands.slash_command(name="unban", description="Unban a user and restore deleted channels", guild_only=True)
    async def unban(
        self,
        ctx: discord.ApplicationContext,
        userid: Option(str, "User ID to unban", required=True),  # type: ignore
    ) -> None:
        await self.dispatcher.dispatch("unban", ctx, user_id=userid)

    @commands.slash_command(name="warn", description="Warn a member", guild_only=True)
    async def warn(
        self,
        ctx: discord.ApplicationContext,
        target: Option(discord.Member, "Member to warn", required=True),  # type: ignore
        reason: Option(str, "Reason", required=False, default=None),  # type: ignore
    ) -> None:
        await self.dispatcher.dispatch("warn", ctx, target=target, reason=reason)

    @commands.slash_command(name="warnings", description="Show a member's warnings", guild_only=True)
    async def warnings(
        self,
        ctx: discord.ApplicationContext,
        target: Option(discord.Member, "Member to look up", required=True),  # type: ignore
    ) -> None:
        await self.dispatcher.dispatch("warnings", ctx, target=target)

    @commands.slash_command(name="restore", description="Undo all actions performed by a staff user", guild_only=True)
    async def restore(
        self,
        ctx: discord.ApplicationContext,
        staff: Option(discord.Member, "Staff member to rollback", required=True),  # type: ignore
    ) -> None:
        await self.dispatcher.dispatch("restore", ctx, staff=staff)


def setup(discord_bot_instance, dispatcher: CommandDispatcher):
    """Register the moderation cog with the running bot."""
    discord_bot_instance.add_cog(ModerationActionCog(discord_bot_instance, dispatcher))
