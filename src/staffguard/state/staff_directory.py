"""
Staff directory: who may run which class of command.

Three tiers are recognized:

- **Owner**: the single configured owner id.
- **Head staff**: the owner plus the configured head-staff ids; may manage
  the staff-role configuration itself.
- **Staff**: whitelisted users in every guild, plus members holding one of a
  guild's registered staff roles.

The per-guild staff-role lists live only in memory and are lost on restart.
"""

from typing import Dict, Iterable, List, Union

from staffguard.configuration.app_configuration import BotSettings
from staffguard.datatypes.discord_datatypes import GuildID, RoleID, UserID
from staffguard.util.logger import get_logger

logger = get_logger("staff_directory")

IdLike = Union[int, str]


class StaffDirectory:
    """Resolves staff tiers and owns the per-guild staff-role lists."""

    def __init__(self, settings: BotSettings):
        self.settings = settings
        # guild_id -> staff role ids, insertion ordered, no duplicates
        self.staff_roles: Dict[GuildID, List[RoleID]] = {}

    def is_owner(self, actor_id: Union[UserID, IdLike]) -> bool:
        owner = self.settings.owner_id
        return owner is not None and UserID(actor_id) == owner

    def is_head_staff(self, actor_id: Union[UserID, IdLike]) -> bool:
        return self.is_owner(actor_id) or UserID(actor_id) in self.settings.head_staff_ids

    def is_whitelisted(self, actor_id: Union[UserID, IdLike]) -> bool:
        return UserID(actor_id) in self.settings.staff_whitelist

    def is_staff(
        self,
        actor_id: Union[UserID, IdLike],
        guild_id: Union[GuildID, IdLike],
        actor_role_ids: Iterable[Union[RoleID, IdLike]],
    ) -> bool:
        """Return True if the actor is whitelisted or holds a staff role of the guild."""
        if self.is_whitelisted(actor_id):
            return True

        guild_roles = self.staff_roles.get(GuildID(guild_id))
        if not guild_roles:
            return False
        return any(RoleID(role_id) in guild_roles for role_id in actor_role_ids)

    def add_staff_role(self, guild_id: Union[GuildID, IdLike], role_id: Union[RoleID, IdLike]) -> bool:
        """Register a staff role; returns False when it was already registered."""
        guild_key = GuildID(guild_id)
        role = RoleID(role_id)
        roles = self.staff_roles.setdefault(guild_key, [])
        if role in roles:
            return False
        roles.append(role)
        logger.info("[STAFF DIRECTORY] Added staff role %s in guild %s", role, guild_key)
        return True

    def remove_staff_role(self, guild_id: Union[GuildID, IdLike], role_id: Union[RoleID, IdLike]) -> bool:
        """Unregister a staff role; returns False when it was not registered."""
        guild_key = GuildID(guild_id)
        role = RoleID(role_id)
        roles = self.staff_roles.get(guild_key)
        if not roles or role not in roles:
            return False
        roles.remove(role)
        logger.info("[STAFF DIRECTORY] Removed staff role %s in guild %s", role, guild_key)
        return True

    def list_staff_roles(self, guild_id: Union[GuildID, IdLike]) -> List[RoleID]:
        """Return a copy of the guild's staff roles in registration order."""
        return list(self.staff_roles.get(GuildID(guild_id), []))
