"""Tests for ActionLog."""

from staffguard.datatypes.discord_datatypes import GuildID, UserID
from staffguard.datatypes.moderation_datatypes import ActionType
from staffguard.state.action_log import ActionLog


def test_record_action_normalizes_ids():
    log = ActionLog()
    entry = log.record_action(10, ActionType.MUTE, "20", 100, duration_ms=60000, reason="Muted by command")

    assert entry.staff_id == UserID(10)
    assert entry.target_user_id == UserID(20)
    assert entry.guild_id == GuildID(100)
    assert entry.duration_ms == 60000
    assert len(log) == 1


def test_actions_by_staff_keeps_order_and_filters():
    log = ActionLog()
    log.record_action(10, ActionType.BAN, 20, 100)
    log.record_action(11, ActionType.KICK, 21, 100)
    log.record_action(10, ActionType.WARN, 22, 100)

    actions = log.actions_by_staff(10)

    assert [entry.action for entry in actions] == [ActionType.BAN, ActionType.WARN]
    assert log.actions_by_staff(99) == []


def test_iteration_is_over_a_snapshot():
    log = ActionLog()
    log.record_action(10, ActionType.BAN, 20, 100)

    for _ in log:
        log.record_action(10, ActionType.BAN, 21, 100)

    assert len(log) == 2


def test_actions_by_staff_can_be_scoped_to_a_guild():
    log = ActionLog()
    log.record_action(10, ActionType.BAN, 20, 100)
    log.record_action(10, ActionType.MUTE, 21, 200)
    log.record_action(10, ActionType.KICK, 22, 100)

    in_first = log.actions_by_staff(10, guild_id=100)

    assert [entry.target_user_id for entry in in_first] == [UserID(20), UserID(22)]
    assert [entry.action for entry in log.actions_by_staff(10, guild_id=GuildID(200))] == [ActionType.MUTE]
    assert log.actions_by_staff(10, guild_id=300) == []
    assert len(log.actions_by_staff(10)) == 3
