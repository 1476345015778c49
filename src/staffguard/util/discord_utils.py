"""
discord_utils.py
================

Stateless Discord helpers shared by the command handlers and the restore engine.
"""

from typing import Optional

import discord

from staffguard.util.logger import get_logger

logger = get_logger("discord_utils")

# Discord caps a member timeout at 28 days
MAX_TIMEOUT_MINUTES = 28 * 24 * 60


def bot_has_permission(guild: discord.Guild, permission_name: str) -> bool:
    """
    Check whether the bot's own member holds a guild-level permission.

    Args:
        guild (discord.Guild): Guild to inspect.
        permission_name (str): ``discord.Permissions`` attribute, e.g. ``"ban_members"``.

    Returns:
        bool: True if the permission is held, or if the bot member is not cached
        yet (the API call itself will then report a missing permission).
    """
    me = getattr(guild, "me", None)
    if me is None:
        return True
    return bool(getattr(me.guild_permissions, permission_name, False))


async def resolve_member(guild: discord.Guild, user_id: int) -> Optional[discord.Member]:
    """
    Return the guild member for ``user_id`` from cache or the API.

    Args:
        guild (discord.Guild): Guild to look in.
        user_id (int): ID of the user.

    Returns:
        discord.Member | None: The member, or None if the user is not in the guild.
    """
    member = guild.get_member(user_id)
    if member is not None:
        return member
    try:
        return await guild.fetch_member(user_id)
    except discord.NotFound:
        return None
    except discord.HTTPException as exc:
        logger.warning("Failed to fetch member %s in guild %s: %s", user_id, guild.id, exc)
        return None


def role_ids_of(member) -> list[int]:
    """Return the role ids of a member; plain users have none."""
    return [role.id for role in getattr(member, "roles", None) or []]


def format_minutes(minutes: int) -> str:
    """
    Convert a duration in minutes to a short human-readable label.

    Args:
        minutes (int): Duration in minutes.

    Returns:
        str: e.g. ``"45 minutes"``, ``"2 hours"``, ``"28 days"``.
    """
    if minutes < 60 or minutes % 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    hours = minutes // 60
    if hours < 24 or hours % 24:
        return f"{hours} hour{'s' if hours != 1 else ''}"
    days = hours // 24
    return f"{days} day{'s' if days != 1 else ''}"
