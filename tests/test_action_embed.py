"""Tests for embed builders."""

import datetime
from types import SimpleNamespace

import discord

from fakes import FakeMember, FakeRole
from staffguard.datatypes.moderation_datatypes import ActionType, WarningEntry
from staffguard.ui import action_embed


def field_map(embed):
    return {field.name: field.value for field in embed.fields}


def test_action_embed_for_ban():
    target = FakeMember(20)
    moderator = FakeMember(3)

    embed = action_embed.create_action_embed(ActionType.BAN, target, moderator, reason="spam")

    assert embed.description == f"{target.mention} has been banned."
    fields = field_map(embed)
    assert fields["Reason"] == "spam"
    assert fields["Moderator"] == moderator.mention
    assert "Duration" not in fields


def test_action_embed_clips_long_reason():
    embed = action_embed.create_action_embed(ActionType.WARN, FakeMember(1), FakeMember(2), reason="x" * 5000)
    assert len(field_map(embed)["Reason"]) == action_embed.MAX_FIELD_LENGTH


def test_action_embed_for_mute_has_duration_and_footer():
    embed = action_embed.create_action_embed(
        ActionType.MUTE, FakeMember(1), FakeMember(2), duration_label="2 hours", footer="note"
    )

    assert field_map(embed)["Duration"] == "2 hours"
    assert embed.footer.text == "note"


def test_unban_embed_without_channels():
    embed = action_embed.create_unban_embed(20, FakeMember(3), restored_channels=0)
    assert embed.description == "<@20> has been unbanned."


def test_rollback_embed_shows_failures():
    embed = action_embed.create_rollback_embed(FakeMember(10), FakeMember(1), 1, 2, 0)

    fields = field_map(embed)
    assert fields["Could not restore"] == "2"
    assert fields["Channels recreated"] == "0"


def test_warnings_embed_empty():
    target = FakeMember(20)
    embed = action_embed.create_warnings_embed(target, [])
    assert embed.description == f"{target.mention} has no warnings."


def test_warnings_embed_numbers_entries():
    stamp = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
    warnings = [WarningEntry("spam", stamp), WarningEntry("rude", stamp)]

    embed = action_embed.create_warnings_embed(FakeMember(20), warnings)

    lines = embed.description.split("\n")
    assert lines[0].startswith("**1.**") and lines[0].endswith("- spam")
    assert lines[1].startswith("**2.**") and lines[1].endswith("- rude")


def test_member_leave_embed_lists_roles_without_everyone():
    member = FakeMember(20, roles=[FakeRole(1, "@everyone"), FakeRole(7, "Mods")])
    member.guild = SimpleNamespace(member_count=10)
    member.joined_at = None

    embed = action_embed.create_member_leave_embed(member)

    fields = field_map(embed)
    assert fields["Roles"] == "Mods"
    assert fields["Joined Server"] == "Unknown"
    assert fields["Member Count"] == "10"


def test_member_join_embed_has_thumbnail():
    member = FakeMember(20)
    member.guild = SimpleNamespace(member_count=11)
    member.created_at = datetime.datetime(2020, 5, 1, tzinfo=datetime.timezone.utc)
    member.display_avatar = SimpleNamespace(url="https://cdn.example/avatar.png")

    embed = action_embed.create_member_join_embed(member)

    assert embed.thumbnail.url == "https://cdn.example/avatar.png"
    assert field_map(embed)["Account Created"] == discord.utils.format_dt(member.created_at, style="F")


def test_role_update_embed():
    embed = action_embed.create_role_update_embed(FakeMember(20), [FakeRole(7, "Mods")], [])

    names = [field.name for field in embed.fields]
    assert any(name.endswith("Roles Added") for name in names)
    assert not any(name.endswith("Roles Removed") for name in names)
