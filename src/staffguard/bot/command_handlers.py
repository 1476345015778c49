"""
Handlers for every slash command, plus the routing table binding them to
their authorization level.

A handler receives the application state, the invocation context and the
command options, performs the platform calls and state updates, sends the
log channel notification, and returns the reply for the dispatcher to send.
Platform failures are caught here and turned into a user-facing message;
nothing is recorded for an action the platform rejected.
"""

import datetime
from typing import Any, Optional

import discord

from staffguard.bot.command_dispatcher import AuthorizationLevel, CommandResponse, CommandRoute
from staffguard.datatypes.discord_datatypes import UserID, member_key
from staffguard.datatypes.moderation_datatypes import ActionType
from staffguard.state.app_state import AppState
from staffguard.ui import action_embed
from staffguard.util.discord_utils import (
    MAX_TIMEOUT_MINUTES,
    bot_has_permission,
    format_minutes,
    resolve_member,
)
from staffguard.util.logger import get_logger

logger = get_logger("command_handlers")

DEFAULT_REASON = "No reason"
MUTE_REASON = "Muted by command"
USER_NOT_FOUND = "❌ User not found."


def _reason(reason: Optional[str]) -> str:
    reason = (reason or "").strip()
    return reason or DEFAULT_REASON


# ============================================================
# Staff management
# ============================================================

async def handle_add_staff(state: AppState, ctx: Any, role: discord.Role) -> CommandResponse:
    if not state.staff.add_staff_role(ctx.guild.id, role.id):
        return CommandResponse.error(f"❌ {role.mention} is already a staff role.")

    await state.notifications.security(text=f"✅ {ctx.user} added staff role: {role.name}")
    return CommandResponse(embed=action_embed.create_staff_role_embed(role, ctx.user, added=True))


async def handle_remove_staff(state: AppState, ctx: Any, role: discord.Role) -> CommandResponse:
    if not state.staff.remove_staff_role(ctx.guild.id, role.id):
        return CommandResponse.error(f"❌ {role.mention} is not a staff role.")

    await state.notifications.security(text=f"\U0001f5d1️ {ctx.user} removed staff role: {role.name}")
    return CommandResponse(embed=action_embed.create_staff_role_embed(role, ctx.user, added=False))


async def handle_list_staff(state: AppState, ctx: Any) -> CommandResponse:
    role_ids = state.staff.list_staff_roles(ctx.guild.id)
    if not role_ids:
        return CommandResponse.error("\U0001f4cb No staff roles configured.")

    role_lines = []
    for role_id in role_ids:
        role = ctx.guild.get_role(role_id.to_int())
        if role is not None:
            role_lines.append(f"{role.name} ({len(role.members)} members)")
        else:
            role_lines.append(f"Unknown Role ({role_id})")

    def user_label(user_id: UserID, fallback: str) -> str:
        user = ctx.bot.get_user(user_id.to_int())
        return str(user) if user is not None else f"{fallback} ({user_id})"

    owner_id = state.settings.owner_id
    owner_line = user_label(owner_id, "Unknown Owner") if owner_id is not None else "Not configured"
    head_staff_lines = [
        user_label(user_id, "Unknown User")
        for user_id in sorted(state.settings.head_staff_ids, key=lambda uid: uid.to_int())
    ]

    embed = action_embed.create_staff_list_embed(owner_line, head_staff_lines, role_lines)
    return CommandResponse(embed=embed, ephemeral=True)


# ============================================================
# Moderation
# ============================================================

async def handle_ban(state: AppState, ctx: Any, target: Any, reason: Optional[str] = None) -> CommandResponse:
    reason = _reason(reason)
    member = await resolve_member(ctx.guild, target.id)
    if member is None:
        return CommandResponse.error(USER_NOT_FOUND)
    if not bot_has_permission(ctx.guild, "ban_members"):
        return CommandResponse.error("❌ Bot doesn't have permission to ban members.")

    async with state.locks.lock(member_key(ctx.guild.id, member.id)):
        try:
            await member.ban(reason=reason)
        except discord.HTTPException as exc:
            logger.error("[COMMAND HANDLERS] Failed to ban %s in guild %s: %s", member.id, ctx.guild.id, exc)
            return CommandResponse.error("❌ Failed to ban user. Check permissions or user hierarchy.")
        state.actions.record_action(ctx.user.id, ActionType.BAN, member.id, ctx.guild.id, reason=reason)

    await state.notifications.ban(text=f"\U0001f528 {ctx.user} banned {member} | {reason}")
    return CommandResponse(embed=action_embed.create_action_embed(ActionType.BAN, member, ctx.user, reason=reason))


async def handle_kick(state: AppState, ctx: Any, target: Any, reason: Optional[str] = None) -> CommandResponse:
    reason = _reason(reason)
    member = await resolve_member(ctx.guild, target.id)
    if member is None:
        return CommandResponse.error(USER_NOT_FOUND)
    if not bot_has_permission(ctx.guild, "kick_members"):
        return CommandResponse.error("❌ Bot doesn't have permission to kick members.")

    async with state.locks.lock(member_key(ctx.guild.id, member.id)):
        try:
            await member.kick(reason=reason)
        except discord.HTTPException as exc:
            logger.error("[COMMAND HANDLERS] Failed to kick %s in guild %s: %s", member.id, ctx.guild.id, exc)
            return CommandResponse.error("❌ Failed to kick user. Check permissions or user hierarchy.")
        state.actions.record_action(ctx.user.id, ActionType.KICK, member.id, ctx.guild.id, reason=reason)

    await state.notifications.ban(text=f"\U0001f462 {ctx.user} kicked {member} | {reason}")
    return CommandResponse(embed=action_embed.create_action_embed(ActionType.KICK, member, ctx.user, reason=reason))


async def handle_mute(state: AppState, ctx: Any, target: Any, minutes: int) -> CommandResponse:
    if minutes > MAX_TIMEOUT_MINUTES:
        return CommandResponse.error(f"❌ Maximum mute duration is {MAX_TIMEOUT_MINUTES:,} minutes (28 days).")
    if minutes < 1:
        return CommandResponse.error("❌ Mute duration must be at least 1 minute.")

    member = await resolve_member(ctx.guild, target.id)
    if member is None:
        return CommandResponse.error(USER_NOT_FOUND)
    if not bot_has_permission(ctx.guild, "moderate_members"):
        return CommandResponse.error("❌ Bot doesn't have permission to timeout members.")

    duration = datetime.timedelta(minutes=minutes)
    async with state.locks.lock(member_key(ctx.guild.id, member.id)):
        try:
            await member.timeout_for(duration, reason=MUTE_REASON)
        except discord.HTTPException as exc:
            logger.error("[COMMAND HANDLERS] Failed to mute %s in guild %s: %s", member.id, ctx.guild.id, exc)
            return CommandResponse.error("❌ Failed to mute user. Check permissions or user hierarchy.")
        state.actions.record_action(
            ctx.user.id,
            ActionType.MUTE,
            member.id,
            ctx.guild.id,
            duration_ms=minutes * 60 * 1000,
            reason=MUTE_REASON,
        )

    await state.notifications.security(text=f"\U0001f507 {ctx.user} muted {member} for {minutes} minutes.")
    embed = action_embed.create_action_embed(ActionType.MUTE, member, ctx.user, duration_label=format_minutes(minutes))
    return CommandResponse(embed=embed)


async def handle_unban(state: AppState, ctx: Any, user_id: str) -> CommandResponse:
    try:
        target_id = UserID(user_id)
    except ValueError:
        return CommandResponse.error("❌ That is not a valid user ID.")

    async with state.locks.lock(member_key(ctx.guild.id, target_id)):
        try:
            await ctx.guild.unban(discord.Object(id=target_id.to_int()), reason=f"Unbanned by {ctx.user}")
        except discord.HTTPException as exc:
            logger.warning("[COMMAND HANDLERS] Failed to unban %s in guild %s: %s", target_id, ctx.guild.id, exc)
            return CommandResponse.error("❌ Failed to unban user. They might not be banned.")

    await ctx.defer()
    report = await state.restore_engine.restore_channels(ctx.guild)
    await state.notifications.security(text=f"✅ {ctx.user} unbanned <@{target_id}> and restored channels.")
    return CommandResponse(embed=action_embed.create_unban_embed(target_id.to_int(), ctx.user, report.restored_count))


async def handle_warn(state: AppState, ctx: Any, target: Any, reason: Optional[str] = None) -> CommandResponse:
    reason = _reason(reason)
    state.warnings.add_warning(target.id, ctx.guild.id, reason)
    state.actions.record_action(ctx.user.id, ActionType.WARN, target.id, ctx.guild.id, reason=reason)
    count = state.warnings.get_warning_count(target.id, ctx.guild.id)

    await state.notifications.warn(text=f"⚠️ {ctx.user} warned {target} | {reason}")
    embed = action_embed.create_action_embed(
        ActionType.WARN, target, ctx.user, reason=reason, footer=f"Total warnings: {count}"
    )
    return CommandResponse(embed=embed)


async def handle_warnings(state: AppState, ctx: Any, target: Any) -> CommandResponse:
    warnings = state.warnings.get_warnings(target.id, ctx.guild.id)
    return CommandResponse(embed=action_embed.create_warnings_embed(target, warnings), ephemeral=True)


async def handle_restore(state: AppState, ctx: Any, staff: Any) -> CommandResponse:
    if not state.actions.actions_by_staff(staff.id, guild_id=ctx.guild.id):
        return CommandResponse.error("❌ No actions found for this staff member.")

    await ctx.defer()
    report = await state.restore_engine.rollback_actions(staff.id, ctx.guild)
    await state.notifications.security(
        text=f"♻️ {ctx.user} restored {report.restored_count} actions by {staff}"
    )
    embed = action_embed.create_rollback_embed(
        staff,
        ctx.user,
        restored_count=report.restored_count,
        failed_count=report.failed_count,
        restored_channels=report.channels.restored_count,
    )
    return CommandResponse(embed=embed)


DEFAULT_ROUTES = (
    CommandRoute("addstaff", handle_add_staff, AuthorizationLevel.HEAD_STAFF),
    CommandRoute("removestaff", handle_remove_staff, AuthorizationLevel.HEAD_STAFF),
    CommandRoute("liststaff", handle_list_staff, AuthorizationLevel.HEAD_STAFF),
    CommandRoute("ban", handle_ban, AuthorizationLevel.STAFF),
    CommandRoute("kick", handle_kick, AuthorizationLevel.STAFF),
    CommandRoute("mute", handle_mute, AuthorizationLevel.STAFF),
    CommandRoute("unban", handle_unban, AuthorizationLevel.STAFF),
    CommandRoute("warn", handle_warn, AuthorizationLevel.STAFF),
    CommandRoute("warnings", handle_warnings, AuthorizationLevel.STAFF),
    CommandRoute("restore", handle_restore, AuthorizationLevel.OWNER),
)
