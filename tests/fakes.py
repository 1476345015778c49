"""Lightweight stand-ins for the py-cord objects the bot touches."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord


def http_error(cls=discord.HTTPException, status=403, message="Missing Permissions"):
    """Build a py-cord HTTP exception without a real aiohttp response."""
    return cls(SimpleNamespace(status=status, reason="Error"), message)


class FakeRole:
    def __init__(self, role_id, name="role", members=()):
        self.id = role_id
        self.name = name
        self.members = list(members)
        self.mention = f"<@&{role_id}>"

    def is_default(self):
        return self.name == "@everyone"

    def __str__(self):
        return self.name


class FakeMember:
    def __init__(self, member_id, name="member", roles=()):
        self.id = member_id
        self.name = name
        self.roles = list(roles)
        self.mention = f"<@{member_id}>"
        self.ban = AsyncMock()
        self.kick = AsyncMock()
        self.timeout_for = AsyncMock()
        self.remove_timeout = AsyncMock()

    def __str__(self):
        return self.name


class FakeChannel:
    def __init__(self, channel_id, guild, name="general", channel_type="text", category_id=None, position=0, overwrites=None, topic=None):
        self.id = channel_id
        self.guild = guild
        self.name = name
        self.type = SimpleNamespace(name=channel_type)
        self.category_id = category_id
        self.position = position
        self.overwrites = overwrites or {}
        self.topic = topic
        self.set_permissions = AsyncMock()
        self.send = AsyncMock()


class FakeGuild:
    """Guild whose channel factories append new channels with fresh ids."""

    def __init__(self, guild_id=100, members=(), roles=(), permissions=None):
        self.id = guild_id
        self.name = "Test Guild"
        self.channels = []
        self.members = {member.id: member for member in members}
        self.roles = {role.id: role for role in roles}
        self.me = SimpleNamespace(
            guild_permissions=SimpleNamespace(**(permissions or {
                "ban_members": True,
                "kick_members": True,
                "moderate_members": True,
            }))
        )
        self.unban = AsyncMock()
        self.created = []
        self._next_id = 9000

        for factory in (
            "create_text_channel",
            "create_voice_channel",
            "create_category",
            "create_stage_channel",
            "create_forum_channel",
        ):
            setattr(self, factory, AsyncMock(side_effect=self._factory(factory)))

    def _factory(self, factory_name):
        async def create(name, **kwargs):
            if factory_name == "create_stage_channel" and not kwargs.get("topic"):
                raise TypeError("create_stage_channel() missing required keyword-only argument: 'topic'")
            self._next_id += 1
            category = kwargs.get("category")
            channel = FakeChannel(
                self._next_id,
                self,
                name=name,
                category_id=getattr(category, "id", None),
                position=kwargs.get("position", 0),
                topic=kwargs.get("topic"),
            )
            channel.factory = factory_name
            channel.kwargs = kwargs
            self.channels.append(channel)
            self.created.append(channel)
            return channel
        return create

    def add_channel(self, channel_id, **kwargs):
        channel = FakeChannel(channel_id, self, **kwargs)
        self.channels.append(channel)
        return channel

    def remove_channel(self, channel):
        self.channels.remove(channel)

    def get_channel(self, channel_id):
        return next((c for c in self.channels if c.id == channel_id), None)

    def get_member(self, member_id):
        return self.members.get(member_id)

    async def fetch_member(self, member_id):
        member = self.members.get(member_id)
        if member is None:
            raise http_error(discord.NotFound, status=404, message="Unknown Member")
        return member

    def get_role(self, role_id):
        return self.roles.get(role_id)


def make_ctx(guild, user, bot=None):
    """Application context carrying only what the dispatcher and handlers read."""
    return SimpleNamespace(
        guild=guild,
        user=user,
        bot=bot or SimpleNamespace(get_user=lambda user_id: None),
        respond=AsyncMock(),
        defer=AsyncMock(),
    )
