"""
Embed builders for command replies and log channel notifications.
"""

import datetime
from typing import Iterable, List, Optional, Sequence

import discord

from staffguard.datatypes.moderation_datatypes import ActionType, WarningEntry


ACTION_EMOJIS = {
    ActionType.WARN: "⚠️",
    ActionType.MUTE: "\U0001f507",
    ActionType.KICK: "\U0001f462",
    ActionType.BAN: "\U0001f528",
}

ACTION_TITLES = {
    ActionType.WARN: "Warning Issued",
    ActionType.MUTE: "Member Muted",
    ActionType.KICK: "Member Kicked",
    ActionType.BAN: "Member Banned",
}

ACTION_COLORS = {
    ActionType.WARN: discord.Color.red(),
    ActionType.MUTE: discord.Color.yellow(),
    ActionType.KICK: discord.Color.orange(),
    ActionType.BAN: discord.Color.red(),
}

MAX_FIELD_LENGTH = 1024
MAX_DESCRIPTION_LENGTH = 4096


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _clip(value: str, limit: int = MAX_FIELD_LENGTH) -> str:
    """Truncate to one of Discord's embed length limits."""
    if len(value) <= limit:
        return value
    return value[: limit - 1] + "…"


def _avatar_url(user) -> Optional[str]:
    avatar = getattr(user, "display_avatar", None)
    return getattr(avatar, "url", None)


def _timestamp(value: Optional[datetime.datetime]) -> str:
    if value is None:
        return "Unknown"
    return discord.utils.format_dt(value, style="F")


# -------------------- Command replies --------------------

def create_action_embed(
    action_type: ActionType,
    target,
    moderator,
    reason: Optional[str] = None,
    duration_label: Optional[str] = None,
    footer: Optional[str] = None,
) -> discord.Embed:
    """Build the public reply for a ban, kick, mute or warning.

    Args:
        action_type: Action that was taken.
        target: User or member the action was taken against.
        moderator: Staff member who ran the command.
        reason: Reason, shown for every action except mutes.
        duration_label: Human-readable mute duration.
        footer: Optional footer text (the warning count for warnings).
    """
    verb = {
        ActionType.WARN: "warned",
        ActionType.MUTE: "muted",
        ActionType.KICK: "kicked",
        ActionType.BAN: "banned",
    }[action_type]

    embed = discord.Embed(
        title=f"{ACTION_EMOJIS[action_type]} {ACTION_TITLES[action_type]}",
        description=f"{target.mention} has been {verb}.",
        color=ACTION_COLORS[action_type],
        timestamp=_now(),
    )
    if duration_label is not None:
        embed.add_field(name="Duration", value=duration_label, inline=False)
    if reason is not None:
        embed.add_field(name="Reason", value=_clip(reason), inline=False)
    embed.add_field(name="Moderator", value=moderator.mention, inline=False)
    if footer:
        embed.set_footer(text=footer)
    return embed


def create_unban_embed(user_id: int, moderator, restored_channels: int) -> discord.Embed:
    description = f"<@{user_id}> has been unbanned"
    description += f" and {restored_channels} channel(s) restored." if restored_channels else "."
    embed = discord.Embed(
        title="✅ User Unbanned",
        description=description,
        color=discord.Color.green(),
        timestamp=_now(),
    )
    embed.add_field(name="Moderator", value=moderator.mention, inline=False)
    return embed


def create_rollback_embed(staff, moderator, restored_count: int, failed_count: int, restored_channels: int) -> discord.Embed:
    embed = discord.Embed(
        title="♻️ Actions Restored",
        description=f"Restored {restored_count} actions by {staff.mention}.",
        color=discord.Color.purple(),
        timestamp=_now(),
    )
    if failed_count:
        embed.add_field(name="Could not restore", value=str(failed_count), inline=True)
    embed.add_field(name="Channels recreated", value=str(restored_channels), inline=True)
    embed.add_field(name="Restored by", value=moderator.mention, inline=False)
    return embed


def create_staff_role_embed(role, moderator, added: bool) -> discord.Embed:
    if added:
        embed = discord.Embed(
            title="✅ Staff Role Added",
            description=f"{role.mention} has been added as a staff role.",
            color=discord.Color.green(),
            timestamp=_now(),
        )
        embed.add_field(
            name="Members with this role can now:",
            value="• Use all moderation commands\n• See staff-only commands",
        )
        embed.set_footer(text=f"Added by {moderator}")
    else:
        embed = discord.Embed(
            title="\U0001f5d1️ Staff Role Removed",
            description=f"{role.mention} has been removed from staff roles.",
            color=discord.Color.orange(),
            timestamp=_now(),
        )
        embed.add_field(
            name="Members with this role can no longer:",
            value="• Use moderation commands\n• See staff-only commands",
        )
        embed.set_footer(text=f"Removed by {moderator}")
    return embed


def create_staff_list_embed(owner_line: str, head_staff_lines: Sequence[str], role_lines: Sequence[str]) -> discord.Embed:
    head_staff = "\n".join([f"• {owner_line} (Owner)", *(f"• {line}" for line in head_staff_lines)])
    roles = "\n".join(f"• {line}" for line in role_lines) or "None configured"

    embed = discord.Embed(title="\U0001f4cb Staff Configuration", color=discord.Color.blue(), timestamp=_now())
    embed.add_field(name="\U0001f539 Head Staff (can manage roles)", value=_clip(head_staff), inline=False)
    embed.add_field(name="\U0001f538 Staff Roles", value=_clip(roles), inline=False)
    embed.set_footer(text=f"Total: {len(role_lines)} staff role(s)")
    return embed


def create_warnings_embed(target, warnings: List[WarningEntry]) -> discord.Embed:
    embed = discord.Embed(
        title=f"⚠️ Warnings for {target}",
        color=discord.Color.gold(),
        timestamp=_now(),
    )
    if not warnings:
        embed.description = f"{target.mention} has no warnings."
        return embed

    lines = [
        f"**{index}.** {discord.utils.format_dt(entry.timestamp, style='d')} - {entry.reason}"
        for index, entry in enumerate(warnings, start=1)
    ]
    embed.description = _clip("\n".join(lines), MAX_DESCRIPTION_LENGTH)
    embed.set_footer(text=f"Total warnings: {len(warnings)}")
    return embed


# -------------------- Security log --------------------

def create_member_join_embed(member) -> discord.Embed:
    embed = discord.Embed(
        title="\U0001f4e5 Member Joined",
        description=f"{member.mention} joined the server.",
        color=discord.Color.green(),
        timestamp=_now(),
    )
    embed.add_field(name="User", value=f"{member} ({member.id})", inline=False)
    embed.add_field(name="Account Created", value=_timestamp(getattr(member, "created_at", None)), inline=False)
    embed.add_field(name="Member Count", value=str(getattr(member.guild, "member_count", "Unknown")), inline=False)
    if avatar := _avatar_url(member):
        embed.set_thumbnail(url=avatar)
    return embed


def create_member_leave_embed(member) -> discord.Embed:
    role_names = [role.name for role in getattr(member, "roles", []) if not role.is_default()]
    embed = discord.Embed(
        title="\U0001f4e4 Member Left",
        description=f"{member.mention} left the server.",
        color=discord.Color.red(),
        timestamp=_now(),
    )
    embed.add_field(name="User", value=f"{member} ({member.id})", inline=False)
    embed.add_field(name="Joined Server", value=_timestamp(getattr(member, "joined_at", None)), inline=False)
    embed.add_field(name="Roles", value=_clip(", ".join(role_names)) if role_names else "None", inline=False)
    embed.add_field(name="Member Count", value=str(getattr(member.guild, "member_count", "Unknown")), inline=False)
    if avatar := _avatar_url(member):
        embed.set_thumbnail(url=avatar)
    return embed


def create_role_update_embed(member, added: Iterable, removed: Iterable) -> discord.Embed:
    added = list(added)
    removed = list(removed)
    embed = discord.Embed(
        title="\U0001f3f7️ Role Update",
        description=f"{member.mention}'s roles were updated.",
        color=discord.Color.yellow(),
        timestamp=_now(),
    )
    embed.add_field(name="User", value=f"{member} ({member.id})", inline=False)
    if added:
        embed.add_field(name="➕ Roles Added", value=_clip(", ".join(role.name for role in added)), inline=False)
    if removed:
        embed.add_field(name="➖ Roles Removed", value=_clip(", ".join(role.name for role in removed)), inline=False)
    if avatar := _avatar_url(member):
        embed.set_thumbnail(url=avatar)
    return embed
