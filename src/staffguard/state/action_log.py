"""Global append-only log of moderation actions taken by staff."""

from typing import Iterator, List, Optional

from staffguard.datatypes.discord_datatypes import GuildID, UserID
from staffguard.datatypes.moderation_datatypes import ActionLogEntry, ActionType
from staffguard.util.logger import get_logger

logger = get_logger("action_log")


class ActionLog:
    """Ordered record of staff actions, read back by rollbacks.

    Entries are never removed, not even after a rollback has reversed them,
    so rolling back the same staff member twice re-attempts every action.
    """

    def __init__(self):
        self.entries: List[ActionLogEntry] = []

    def record_action(
        self,
        staff_id,
        action: ActionType,
        target_user_id,
        guild_id,
        duration_ms: Optional[int] = None,
        reason: str = "",
    ) -> ActionLogEntry:
        entry = ActionLogEntry(
            staff_id=UserID(staff_id),
            action=action,
            target_user_id=UserID(target_user_id),
            guild_id=GuildID(guild_id),
            duration_ms=duration_ms,
            reason=reason,
        )
        self.entries.append(entry)
        logger.debug("[ACTION LOG] Recorded %s by %s against %s", action, entry.staff_id, entry.target_user_id)
        return entry

    def actions_by_staff(self, staff_id, guild_id=None) -> List[ActionLogEntry]:
        """Return the staff member's entries in the order they were recorded.

        With ``guild_id`` only the entries recorded in that guild are returned.
        """
        staff = UserID(staff_id)
        guild = GuildID(guild_id) if guild_id is not None else None
        return [
            entry for entry in self.entries
            if entry.staff_id == staff and (guild is None or entry.guild_id == guild)
        ]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ActionLogEntry]:
        return iter(list(self.entries))
