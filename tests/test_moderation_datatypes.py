"""Tests for moderation data structures."""

import pytest
from datetime import timezone

from staffguard.datatypes.discord_datatypes import ChannelID, GuildID
from staffguard.datatypes.moderation_datatypes import (
    ActionType,
    ChannelBackup,
    LogCategory,
    PermissionOverwriteRecord,
    WarningEntry,
)


class TestActionType:
    def test_reversible_actions(self):
        assert ActionType.BAN.reversible
        assert ActionType.MUTE.reversible
        assert not ActionType.KICK.reversible
        assert not ActionType.WARN.reversible

    def test_str(self):
        assert str(ActionType.BAN) == "ban"
        assert str(LogCategory.SECURITY) == "security"


class TestPermissionOverwriteRecord:
    def test_bits_round_trip_beyond_64_bits(self):
        allow = (1 << 70) | 0b1011
        deny = 1 << 65
        record = PermissionOverwriteRecord.from_bits(7, allow, deny, "role")

        assert record.allow == str(allow)
        assert record.allow_bits == allow
        assert record.deny_bits == deny

    def test_rejects_negative_bits(self):
        with pytest.raises(ValueError):
            PermissionOverwriteRecord.from_bits(7, -1, 0, "member")


def test_warning_timestamp_is_utc():
    entry = WarningEntry(reason="spam")
    assert entry.timestamp.tzinfo == timezone.utc


def test_channel_backup_defaults():
    backup = ChannelBackup(ChannelID(1), GuildID(2), "general", "text")
    assert backup.parent_id is None
    assert backup.position == 0
    assert backup.overwrites == []
    assert backup.topic is None
