"""Tests for discord_utils helpers."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest

from fakes import FakeGuild, FakeMember, FakeRole, http_error
from staffguard.util.discord_utils import (
    MAX_TIMEOUT_MINUTES,
    bot_has_permission,
    format_minutes,
    resolve_member,
    role_ids_of,
)


def test_max_timeout_is_28_days():
    assert MAX_TIMEOUT_MINUTES == 40320


class TestBotHasPermission:
    def test_granted(self):
        assert bot_has_permission(FakeGuild(), "ban_members") is True

    def test_denied(self):
        assert bot_has_permission(FakeGuild(permissions={"ban_members": False}), "ban_members") is False

    def test_unknown_permission(self):
        assert bot_has_permission(FakeGuild(), "not_a_permission") is False

    def test_uncached_bot_member(self):
        assert bot_has_permission(SimpleNamespace(me=None), "ban_members") is True


class TestResolveMember:
    @pytest.mark.asyncio
    async def test_cached(self):
        member = FakeMember(5)
        assert await resolve_member(FakeGuild(members=[member]), 5) is member

    @pytest.mark.asyncio
    async def test_fetches_when_not_cached(self):
        member = FakeMember(5)
        guild = SimpleNamespace(id=1, get_member=lambda _: None, fetch_member=AsyncMock(return_value=member))

        assert await resolve_member(guild, 5) is member
        guild.fetch_member.assert_awaited_once_with(5)

    @pytest.mark.asyncio
    async def test_not_found(self):
        assert await resolve_member(FakeGuild(), 5) is None

    @pytest.mark.asyncio
    async def test_http_error(self):
        guild = SimpleNamespace(
            id=1,
            get_member=lambda _: None,
            fetch_member=AsyncMock(side_effect=http_error(discord.HTTPException, status=500)),
        )
        assert await resolve_member(guild, 5) is None


def test_role_ids_of():
    member = FakeMember(1, roles=[FakeRole(7), FakeRole(8)])
    assert role_ids_of(member) == [7, 8]
    assert role_ids_of(SimpleNamespace(id=1)) == []


@pytest.mark.parametrize(
    "minutes,label",
    [
        (1, "1 minute"),
        (45, "45 minutes"),
        (90, "90 minutes"),
        (60, "1 hour"),
        (120, "2 hours"),
        (1440, "1 day"),
        (40320, "28 days"),
        (1500, "25 hours"),
    ],
)
def test_format_minutes(minutes, label):
    assert format_minutes(minutes) == label
