"""Event listener Cog for StaffGuard.

This cog handles the bot lifecycle (on_ready channel warm-up), the security
audit log for member joins, leaves and role changes, channel-deletion
snapshots, and the fallback error handler for application commands.
"""

import discord
from discord.ext import commands

from staffguard.state.app_state import AppState
from staffguard.ui import action_embed
from staffguard.util.logger import get_logger

logger = get_logger("events_listener_cog")


class EventsListenerCog(commands.Cog):
    """Cog containing lifecycle, audit and error handlers."""

    def __init__(self, discord_bot_instance, state: AppState):
        """Initialize the events listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        state:
            Application state whose backup store and notification sink are used.
        """
        self.bot = discord_bot_instance
        self.state = state
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        """Log the connection and snapshot every channel the bot can see."""
        if self.bot.user:
            logger.info(f"Bot connected as {self.bot.user} (ID: {self.bot.user.id})")
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

        logger.info("--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--")

        total = 0
        for guild in self.bot.guilds:
            total += self.state.backups.snapshot_guild(guild)
        logger.info(
            "Channel backups warmed up: %d channel(s) across %d guild(s)",
            total, len(self.bot.guilds),
        )
        logger.info("Whitelisted staff: %d user(s)", len(self.state.settings.staff_whitelist))

    @commands.Cog.listener(name="on_member_join")
    async def on_member_join(self, member: discord.Member):
        await self.state.notifications.security(embed=action_embed.create_member_join_embed(member))

    @commands.Cog.listener(name="on_member_remove")
    async def on_member_remove(self, member: discord.Member):
        await self.state.notifications.security(embed=action_embed.create_member_leave_embed(member))

    @commands.Cog.listener(name="on_member_update")
    async def on_member_update(self, before: discord.Member, after: discord.Member):
        """Log role additions and removals; other member updates are ignored."""
        before_ids = {role.id for role in before.roles}
        after_ids = {role.id for role in after.roles}
        added = [role for role in after.roles if role.id not in before_ids]
        removed = [role for role in before.roles if role.id not in after_ids]
        if not added and not removed:
            return

        await self.state.notifications.security(
            embed=action_embed.create_role_update_embed(after, added, removed)
        )

    @commands.Cog.listener(name="on_guild_channel_delete")
    async def on_guild_channel_delete(self, channel: discord.abc.GuildChannel):
        """Capture the deleted channel's last known state so it can be restored."""
        try:
            self.state.backups.save_snapshot(channel)
        except Exception as exc:
            logger.error("Failed to snapshot deleted channel %s: %s", getattr(channel, "id", "?"), exc)
            return
        logger.info("Channel #%s (%s) deleted; backup updated", channel.name, channel.id)

    @commands.Cog.listener(name="on_application_command_error")
    async def on_application_command_error(self, application_context: discord.ApplicationContext, error: Exception):
        """Handle errors from application commands with logging and user feedback.

        Parameters
        ----------
        application_context:
            The command invocation context.
        error:
            The exception raised during command execution.
        """
        if isinstance(error, commands.CommandNotFound):
            return

        command_name = getattr(application_context.command, "name", "<unknown>")
        logger.error(f"Error in command '{command_name}': {error}", exc_info=error)

        error_message = "❌ Something went wrong while running this command."
        try:
            await application_context.respond(error_message, ephemeral=True)
        except discord.InteractionResponded:
            await application_context.followup.send(error_message, ephemeral=True)


def setup(discord_bot_instance, state: AppState):
    """Register the EventsListenerCog with the bot."""
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance, state))
