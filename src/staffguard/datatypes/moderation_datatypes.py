"""
Data structures shared by the moderation stores and the restore engine.

- `ActionType`: moderation actions staff can take through slash commands.
- `ActionLogEntry`: one recorded staff action, replayed in reverse by a rollback.
- `WarningEntry`: one warning issued to a member.
- `ChannelBackup` / `PermissionOverwriteRecord`: last known configuration of a channel.
- `LogCategory`: destination log channel for a notification.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from staffguard.datatypes.discord_datatypes import ChannelID, GuildID, UserID


class ActionType(Enum):
    """Moderation actions recorded in the action log."""

    BAN = "ban"
    KICK = "kick"
    MUTE = "mute"
    WARN = "warn"

    def __str__(self) -> str:
        return self.value

    @property
    def reversible(self) -> bool:
        """Whether a rollback can undo this action."""
        return self in (ActionType.BAN, ActionType.MUTE)


class LogCategory(Enum):
    """Log destinations a notification can be routed to."""

    SECURITY = "security"
    WARN = "warn"
    BAN = "ban"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, frozen=True)
class ActionLogEntry:
    """A moderation action taken by a staff member.

    Attributes:
        staff_id: Staff member who performed the action.
        action: Type of action performed.
        target_user_id: User the action was taken against.
        guild_id: Guild the action happened in.
        duration_ms: Timeout length in milliseconds (mutes only).
        reason: Reason given by the staff member.
    """

    staff_id: UserID
    action: ActionType
    target_user_id: UserID
    guild_id: GuildID
    duration_ms: Optional[int] = None
    reason: str = ""


@dataclass(slots=True, frozen=True)
class WarningEntry:
    """A single warning; the list it lives in is chronological."""

    reason: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(slots=True, frozen=True)
class PermissionOverwriteRecord:
    """Per-principal allow/deny pair captured from a channel.

    ``allow`` and ``deny`` are decimal strings so bit-fields wider than 64 bits
    survive any serialization untouched; ``allow_bits``/``deny_bits`` decode
    them back into Python ints, which have no width limit.
    """

    principal_id: int
    allow: str
    deny: str
    principal_type: str  # "role" or "member"

    @property
    def allow_bits(self) -> int:
        return int(self.allow)

    @property
    def deny_bits(self) -> int:
        return int(self.deny)

    @classmethod
    def from_bits(cls, principal_id: int, allow: int, deny: int, principal_type: str) -> "PermissionOverwriteRecord":
        if allow < 0 or deny < 0:
            raise ValueError("Permission bit-fields are unsigned")
        return cls(
            principal_id=int(principal_id),
            allow=str(allow),
            deny=str(deny),
            principal_type=principal_type,
        )


@dataclass(slots=True, frozen=True)
class ChannelBackup:
    """Snapshot of a channel's identity and configuration.

    Attributes:
        channel_id: ID the channel had when captured.
        guild_id: Guild owning the channel.
        name: Channel name.
        channel_type: py-cord ``ChannelType`` name (``text``, ``voice``, ``category``...).
        parent_id: Category the channel sat under, if any.
        position: Raw sort position.
        overwrites: Permission overwrites in the order the channel reported them.
        topic: Channel topic, for channel types that have one.
    """

    channel_id: ChannelID
    guild_id: GuildID
    name: str
    channel_type: str
    parent_id: Optional[ChannelID] = None
    position: int = 0
    overwrites: List[PermissionOverwriteRecord] = field(default_factory=list)
    topic: Optional[str] = None
