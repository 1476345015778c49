"""In-memory warning history per guild member."""

from typing import Dict, List

from staffguard.datatypes.discord_datatypes import member_key
from staffguard.datatypes.moderation_datatypes import WarningEntry
from staffguard.util.logger import get_logger

logger = get_logger("warning_store")


class WarningStore:
    """Append-only warning lists keyed by ``guild:user``.

    Warnings are never removed and the lists are not capped.
    """

    def __init__(self):
        self.warnings: Dict[str, List[WarningEntry]] = {}

    def add_warning(self, user_id, guild_id, reason: str) -> WarningEntry:
        entry = WarningEntry(reason=reason)
        self.warnings.setdefault(member_key(guild_id, user_id), []).append(entry)
        logger.debug("[WARNING STORE] Warning added for user %s in guild %s", user_id, guild_id)
        return entry

    def get_warning_count(self, user_id, guild_id) -> int:
        return len(self.warnings.get(member_key(guild_id, user_id), ()))

    def get_warnings(self, user_id, guild_id) -> List[WarningEntry]:
        """Return a copy of the member's warnings, oldest first."""
        return list(self.warnings.get(member_key(guild_id, user_id), ()))
