"""
Restore engine: recreate deleted channels and roll back a staff member's actions.

Both entry points are best effort. Every sub-step (creating one channel,
applying one overwrite, reversing one action) is caught and logged on its own,
so a failure only skips that step and the overall operation always completes
with a report of what succeeded.

Channel recreation
    Backups of the guild whose channel id is no longer live are recreated with
    their captured name, type, parent and position, then each stored
    permission overwrite is applied to the new channel. Missing parents are
    created before their children, and children are attached to the parent's
    new channel. After a successful recreation the backup is moved to the new
    channel id, so running the restore again does not duplicate the channel.

Action rollback
    Bans are reversed with an unban, mutes by clearing the member's timeout.
    Kicks and warnings cannot be undone and are skipped. The action log is
    left untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import discord

from staffguard.datatypes.discord_datatypes import ChannelID, GuildID
from staffguard.datatypes.moderation_datatypes import (
    ActionLogEntry,
    ActionType,
    ChannelBackup,
    PermissionOverwriteRecord,
)
from staffguard.state.action_log import ActionLog
from staffguard.state.channel_backup_store import ChannelBackupStore
from staffguard.util.discord_utils import resolve_member
from staffguard.util.logger import get_logger

logger = get_logger("restore_engine")

RESTORE_REASON = "Channel restored from backup"
ROLLBACK_REASON = "Staff action rolled back"

# py-cord ChannelType name -> Guild factory method
CHANNEL_FACTORIES = {
    "category": "create_category",
    "voice": "create_voice_channel",
    "stage_voice": "create_stage_channel",
    "forum": "create_forum_channel",
}
DEFAULT_CHANNEL_FACTORY = "create_text_channel"
TOPIC_CHANNEL_TYPES = {"text", "news", "forum", "stage_voice"}


@dataclass(slots=True)
class RestoreReport:
    """Outcome of a channel restore pass."""

    restored: List[ChannelBackup] = field(default_factory=list)
    failed: List[ChannelBackup] = field(default_factory=list)
    overwrites_applied: int = 0
    overwrites_failed: int = 0

    @property
    def restored_count(self) -> int:
        return len(self.restored)


@dataclass(slots=True)
class RollbackReport:
    """Outcome of rolling back one staff member's actions."""

    restored_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    channels: RestoreReport = field(default_factory=RestoreReport)


def order_by_parent(backups: List[ChannelBackup]) -> List[ChannelBackup]:
    """Order backups so a parent in the list always precedes its children.

    The sort is stable: backups are released in passes, a backup joins a pass
    only when its parent was placed in an earlier pass (or is not in the list
    at all), and each pass keeps the original order. Anything left over by a
    parent cycle is appended in its original order.
    """
    pending_ids = {backup.channel_id for backup in backups}
    placed: set = set()
    ordered: List[ChannelBackup] = []
    pending = list(backups)

    while pending:
        placed_before = set(placed)
        remaining = []
        for backup in pending:
            parent = backup.parent_id
            if parent is None or parent not in pending_ids or parent in placed_before:
                ordered.append(backup)
                placed.add(backup.channel_id)
            else:
                remaining.append(backup)
        if len(remaining) == len(pending):
            ordered.extend(remaining)
            break
        pending = remaining

    return ordered


class RestoreEngine:
    """Replays channel backups and reverses logged staff actions on a guild."""

    def __init__(self, action_log: ActionLog, backup_store: ChannelBackupStore):
        self.action_log = action_log
        self.backup_store = backup_store

    # --------------------------
    # Channel restore
    # --------------------------
    def missing_backups(self, guild) -> List[ChannelBackup]:
        """Return backups of ``guild`` whose channel no longer exists, parents first."""
        live_ids = {ChannelID(channel.id) for channel in guild.channels}
        missing = [
            backup for backup in self.backup_store.backups_for_guild(guild.id)
            if backup.channel_id not in live_ids
        ]
        return order_by_parent(missing)

    async def restore_channels(self, guild) -> RestoreReport:
        report = RestoreReport()
        recreated: Dict[ChannelID, object] = {}

        for backup in self.missing_backups(guild):
            parent = self.resolve_parent(guild, backup, recreated)
            try:
                channel = await self.create_channel(guild, backup, parent)
            except Exception as exc:
                logger.error("[RESTORE ENGINE] Failed to recreate #%s (%s): %s", backup.name, backup.channel_id, exc)
                report.failed.append(backup)
                continue

            recreated[backup.channel_id] = channel
            applied, failed = await self.apply_overwrites(guild, channel, backup.overwrites)
            report.overwrites_applied += applied
            report.overwrites_failed += failed

            moved = self.backup_store.rekey(
                backup.channel_id,
                channel.id,
                parent_id=getattr(parent, "id", None),
            )
            report.restored.append(moved or backup)
            logger.info("[RESTORE ENGINE] Restored channel #%s as %s", backup.name, channel.id)

        if report.restored or report.failed:
            logger.info(
                "[RESTORE ENGINE] Channel restore for guild %s: %d restored, %d failed",
                guild.id, report.restored_count, len(report.failed),
            )
        return report

    def resolve_parent(self, guild, backup: ChannelBackup, recreated: Dict[ChannelID, object]):
        if backup.parent_id is None or backup.channel_type == "category":
            return None
        parent = recreated.get(backup.parent_id) or guild.get_channel(backup.parent_id.to_int())
        if parent is None:
            logger.warning(
                "[RESTORE ENGINE] Parent %s of #%s no longer exists; restoring without a category",
                backup.parent_id, backup.name,
            )
        return parent

    async def create_channel(self, guild, backup: ChannelBackup, parent=None):
        kwargs = {"reason": RESTORE_REASON, "position": backup.position}
        if backup.channel_type != "category" and parent is not None:
            kwargs["category"] = parent
        if backup.channel_type == "stage_voice":
            # create_stage_channel requires a non-empty topic
            kwargs["topic"] = backup.topic or backup.name
        elif backup.channel_type in TOPIC_CHANNEL_TYPES and backup.topic is not None:
            kwargs["topic"] = backup.topic

        factory_name = CHANNEL_FACTORIES.get(backup.channel_type, DEFAULT_CHANNEL_FACTORY)
        factory = getattr(guild, factory_name)
        return await factory(backup.name, **kwargs)

    @staticmethod
    async def resolve_principal(guild, record: PermissionOverwriteRecord):
        if record.principal_type == "role":
            return guild.get_role(record.principal_id)
        return await resolve_member(guild, record.principal_id)

    async def apply_overwrites(
        self,
        guild,
        channel,
        overwrites: List[PermissionOverwriteRecord],
    ) -> Tuple[int, int]:
        """Apply stored overwrites to ``channel``; returns (applied, failed)."""
        applied = failed = 0
        for record in overwrites:
            target = await self.resolve_principal(guild, record)
            if target is None:
                logger.warning(
                    "[RESTORE ENGINE] Skipping overwrite for missing %s %s on %s",
                    record.principal_type, record.principal_id, channel.id,
                )
                failed += 1
                continue

            overwrite = discord.PermissionOverwrite.from_pair(
                discord.Permissions(record.allow_bits),
                discord.Permissions(record.deny_bits),
            )
            try:
                await channel.set_permissions(target, overwrite=overwrite, reason=RESTORE_REASON)
                applied += 1
            except Exception as exc:
                logger.error(
                    "[RESTORE ENGINE] Failed to apply overwrite for %s on %s: %s",
                    record.principal_id, channel.id, exc,
                )
                failed += 1
        return applied, failed

    # --------------------------
    # Action rollback
    # --------------------------
    async def rollback_actions(self, staff_id, guild) -> RollbackReport:
        report = RollbackReport()
        guild_key = GuildID(guild.id)
        entries = self.action_log.actions_by_staff(staff_id, guild_id=guild_key)

        for entry in entries:
            if not entry.action.reversible:
                report.skipped_count += 1
                continue
            try:
                reversed_ok = await self.reverse_action(guild, entry)
            except Exception as exc:
                logger.error(
                    "[RESTORE ENGINE] Failed to reverse %s of %s: %s",
                    entry.action, entry.target_user_id, exc,
                )
                reversed_ok = False

            if reversed_ok:
                report.restored_count += 1
            else:
                report.failed_count += 1

        report.channels = await self.restore_channels(guild)
        logger.info(
            "[RESTORE ENGINE] Rolled back %d of %d action(s) by staff %s in guild %s",
            report.restored_count, len(entries), staff_id, guild.id,
        )
        return report

    async def reverse_action(self, guild, entry: ActionLogEntry) -> bool:
        """Undo one ban or mute; returns False when the target can't be resolved."""
        target_id = entry.target_user_id.to_int()

        if entry.action is ActionType.BAN:
            await guild.unban(discord.Object(id=target_id), reason=ROLLBACK_REASON)
            return True

        if entry.action is ActionType.MUTE:
            member = await resolve_member(guild, target_id)
            if member is None:
                logger.warning("[RESTORE ENGINE] Muted member %s is no longer in guild %s", target_id, guild.id)
                return False
            await member.remove_timeout(reason=ROLLBACK_REASON)
            return True

        return False

