"""Tests for channel snapshots."""

from types import SimpleNamespace

import pytest
import discord

from fakes import FakeChannel, FakeGuild, FakeMember, FakeRole
from staffguard.datatypes.discord_datatypes import ChannelID, GuildID
from staffguard.state import channel_backup_store
from staffguard.state.channel_backup_store import ChannelBackupStore, capture_overwrites


@pytest.fixture(autouse=True)
def fake_role_type(monkeypatch):
    monkeypatch.setattr(channel_backup_store.discord, "Role", FakeRole)


def make_channel(guild, channel_id=1, **kwargs):
    role = FakeRole(7, "Mods")
    member = FakeMember(50)
    overwrites = {
        role: discord.PermissionOverwrite(view_channel=True, send_messages=False),
        member: discord.PermissionOverwrite(manage_messages=True),
    }
    return guild.add_channel(channel_id, overwrites=overwrites, **kwargs)


def test_capture_overwrites_records_type_and_bits():
    guild = FakeGuild()
    channel = make_channel(guild)

    records = capture_overwrites(channel)

    role_record, member_record = records
    assert role_record.principal_type == "role"
    assert role_record.principal_id == 7
    allow, deny = discord.PermissionOverwrite(view_channel=True, send_messages=False).pair()
    assert role_record.allow_bits == allow.value
    assert role_record.deny_bits == deny.value
    assert member_record.principal_type == "member"
    assert member_record.principal_id == 50


def test_capture_overwrites_keeps_uncached_members():
    guild = FakeGuild()
    channel = guild.add_channel(1)
    # the public mapping has already dropped member 60, the raw list still has it
    channel.overwrites = {}
    channel._overwrites = [
        SimpleNamespace(id=7, allow=1024, deny=2048, is_role=lambda: True),
        SimpleNamespace(id=60, allow=8192, deny=0, is_role=lambda: False),
    ]

    records = capture_overwrites(channel)

    assert [(r.principal_id, r.principal_type) for r in records] == [(7, "role"), (60, "member")]
    assert records[0].allow_bits == 1024
    assert records[0].deny_bits == 2048
    assert records[1].allow_bits == 8192
    assert records[1].deny_bits == 0


def test_save_snapshot_captures_configuration():
    guild = FakeGuild(guild_id=100)
    channel = make_channel(guild, channel_id=5, name="rules", category_id=3, position=4, topic="Read me")
    store = ChannelBackupStore()

    backup = store.save_snapshot(channel)

    assert backup.channel_id == ChannelID(5)
    assert backup.guild_id == GuildID(100)
    assert backup.name == "rules"
    assert backup.channel_type == "text"
    assert backup.parent_id == ChannelID(3)
    assert backup.position == 4
    assert backup.topic == "Read me"
    assert len(backup.overwrites) == 2
    assert 5 in store


def test_snapshot_overwrites_previous_state():
    guild = FakeGuild()
    channel = guild.add_channel(5, name="old")
    store = ChannelBackupStore()
    store.save_snapshot(channel)

    channel.name = "new"
    store.save_snapshot(channel)

    assert len(store) == 1
    assert store.get(5).name == "new"


def test_snapshot_guild_skips_broken_channels():
    guild = FakeGuild()
    guild.add_channel(1)
    broken = FakeChannel(2, guild)
    broken.overwrites = None
    guild.channels.append(broken)
    guild.add_channel(3)

    store = ChannelBackupStore()

    assert store.snapshot_guild(guild) == 2
    assert 2 not in store


def test_backups_for_guild_filters_by_guild():
    first, second = FakeGuild(guild_id=100), FakeGuild(guild_id=200)
    store = ChannelBackupStore()
    store.save_snapshot(first.add_channel(1))
    store.save_snapshot(second.add_channel(2))

    assert [b.channel_id for b in store.backups_for_guild(100)] == [ChannelID(1)]


def test_rekey_moves_backup_to_new_id():
    guild = FakeGuild()
    store = ChannelBackupStore()
    store.save_snapshot(guild.add_channel(1, category_id=3))

    moved = store.rekey(1, 9001, parent_id=9000)

    assert 1 not in store
    assert moved.channel_id == ChannelID(9001)
    assert moved.parent_id == ChannelID(9000)
    assert store.get(9001) is moved


def test_rekey_unknown_returns_none():
    assert ChannelBackupStore().rekey(1, 2) is None
