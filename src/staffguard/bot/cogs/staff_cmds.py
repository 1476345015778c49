"""
Staff management cog: register and inspect the roles whose holders count as staff.

Only the owner and the configured head staff may run these commands; the
check happens in the dispatcher. Staff roles are kept in memory only.
"""

import discord
from discord import Option
from discord.ext import commands

from staffguard.bot.command_dispatcher import CommandDispatcher
from staffguard.util.logger import get_logger

logger = get_logger("staff_cog")

ADMIN_ONLY = discord.Permissions(administrator=True)


class StaffManagementCog(commands.Cog):
    """Cog containing /addstaff, /removestaff and /liststaff."""

    def __init__(self, discord_bot_instance, dispatcher: CommandDispatcher):
        self.discord_bot_instance = discord_bot_instance
        self.dispatcher = dispatcher
        logger.info("Staff management cog loaded")

    @commands.slash_command(
        name="addstaff",
        description="Add a staff role (Head staff only)",
        guild_only=True,
        default_member_permissions=ADMIN_ONLY,
    )
    async def addstaff(
        self,
        ctx: discord.ApplicationContext,
        role: Option(discord.Role, "Role to add as staff", required=True),  # type: ignore
    ) -> None:
        await self.dispatcher.dispatch("addstaff", ctx, role=role)

    @commands.slash_command(
        name="removestaff",
        description="Remove a staff role (Head staff only)",
        guild_only=True,
        default_member_permissions=ADMIN_ONLY,
    )
    async def removestaff(
        self,
        ctx: discord.ApplicationContext,
        role: Option(discord.Role, "Role to remove from staff", required=True),  # type: ignore
    ) -> None:
        await self.dispatcher.dispatch("removestaff", ctx, role=role)

    @commands.slash_command(
        name="liststaff",
        description="List all staff roles (Head staff only)",
        guild_only=True,
        default_member_permissions=ADMIN_ONLY,
    )
    async def liststaff(self, ctx: discord.ApplicationContext) -> None:
        await self.dispatcher.dispatch("liststaff", ctx)


def setup(discord_bot_instance, dispatcher: CommandDispatcher):
    """Register the staff management cog with the running bot."""
    discord_bot_instance.add_cog(StaffManagementCog(discord_bot_instance, dispatcher))
