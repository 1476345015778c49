"""
Last known configuration of every channel the bot has seen.

Snapshots are taken once for every channel when the bot becomes ready and
again for a channel at the moment it is deleted. Each snapshot overwrites the
previous one for the same channel id, so only the latest state survives. A
channel that was never snapshotted cannot be restored; that loss is accepted.
"""

from typing import Dict, List, Optional

import discord

from staffguard.datatypes.discord_datatypes import ChannelID, GuildID
from staffguard.datatypes.moderation_datatypes import ChannelBackup, PermissionOverwriteRecord
from staffguard.util.logger import get_logger

logger = get_logger("channel_backup_store")


def principal_type_of(target) -> str:
    """Return ``"role"`` or ``"member"`` for an overwrite target."""
    return "role" if isinstance(target, discord.Role) else "member"


def capture_overwrites(channel) -> List[PermissionOverwriteRecord]:
    """Flatten a channel's permission overwrites into allow/deny bit-field records.

    The raw overwrite list is read when the channel carries one, because
    ``channel.overwrites`` leaves out members missing from the cache.
    """
    raw_overwrites = getattr(channel, "_overwrites", None)
    if raw_overwrites is not None:
        return [
            PermissionOverwriteRecord.from_bits(
                principal_id=raw.id,
                allow=raw.allow,
                deny=raw.deny,
                principal_type="role" if raw.is_role() else "member",
            )
            for raw in raw_overwrites
        ]

    records = []
    for target, overwrite in channel.overwrites.items():
        allow, deny = overwrite.pair()
        records.append(
            PermissionOverwriteRecord.from_bits(
                principal_id=target.id,
                allow=allow.value,
                deny=deny.value,
                principal_type=principal_type_of(target),
            )
        )
    return records


def channel_type_name(channel) -> str:
    channel_type = getattr(channel, "type", None)
    return getattr(channel_type, "name", None) or str(channel_type or "text")


class ChannelBackupStore:
    """Channel snapshots keyed by channel id, in first-seen order."""

    def __init__(self):
        self.backups: Dict[ChannelID, ChannelBackup] = {}

    def save_snapshot(self, channel) -> ChannelBackup:
        """Capture (or overwrite) the backup for ``channel`` from its live attributes."""
        category_id = getattr(channel, "category_id", None)
        backup = ChannelBackup(
            channel_id=ChannelID(channel.id),
            guild_id=GuildID(channel.guild.id),
            name=channel.name,
            channel_type=channel_type_name(channel),
            parent_id=ChannelID(category_id) if category_id is not None else None,
            position=getattr(channel, "position", 0) or 0,
            overwrites=capture_overwrites(channel),
            topic=getattr(channel, "topic", None),
        )
        self.backups[backup.channel_id] = backup
        logger.debug("[CHANNEL BACKUP] Snapshot saved for #%s (%s)", backup.name, backup.channel_id)
        return backup

    def snapshot_guild(self, guild) -> int:
        """Snapshot every channel of ``guild``; returns how many were captured.

        A channel that fails to snapshot is logged and skipped.
        """
        saved = 0
        for channel in list(guild.channels):
            try:
                self.save_snapshot(channel)
                saved += 1
            except Exception as exc:
                logger.error(
                    "[CHANNEL BACKUP] Failed to snapshot channel %s in guild %s: %s",
                    getattr(channel, "id", "?"), guild.id, exc,
                )
        logger.info("[CHANNEL BACKUP] Captured %d channel(s) for guild %s", saved, guild.id)
        return saved

    def get(self, channel_id) -> Optional[ChannelBackup]:
        return self.backups.get(ChannelID(channel_id))

    def backups_for_guild(self, guild_id) -> List[ChannelBackup]:
        guild_key = GuildID(guild_id)
        return [backup for backup in self.backups.values() if backup.guild_id == guild_key]

    def rekey(self, old_channel_id, new_channel_id, parent_id=None) -> Optional[ChannelBackup]:
        """Move a backup under the id of the channel that replaced it.

        The recreated channel keeps the captured configuration; only its id and
        (if its parent was recreated too) its parent id change.
        """
        old_key = ChannelID(old_channel_id)
        backup = self.backups.pop(old_key, None)
        if backup is None:
            return None
        moved = ChannelBackup(
            channel_id=ChannelID(new_channel_id),
            guild_id=backup.guild_id,
            name=backup.name,
            channel_type=backup.channel_type,
            parent_id=ChannelID(parent_id) if parent_id is not None else backup.parent_id,
            position=backup.position,
            overwrites=list(backup.overwrites),
            topic=backup.topic,
        )
        self.backups[moved.channel_id] = moved
        return moved

    def __len__(self) -> int:
        return len(self.backups)

    def __contains__(self, channel_id) -> bool:
        return ChannelID(channel_id) in self.backups
