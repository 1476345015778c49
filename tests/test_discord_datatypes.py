"""Tests for the snowflake wrappers and member keys."""

import pytest
from types import SimpleNamespace

from staffguard.datatypes.discord_datatypes import ChannelID, GuildID, RoleID, UserID, member_key


class TestSnowflake:
    def test_from_string_and_int_are_equal(self):
        assert UserID("123456789012345678") == UserID(123456789012345678)

    def test_strips_whitespace(self):
        assert str(UserID(" 42 ")) == "42"

    def test_compares_with_plain_values(self):
        uid = UserID(42)
        assert uid == 42
        assert uid == "42"
        assert uid != 43

    def test_different_kinds_never_equal(self):
        assert UserID(5) != GuildID(5)
        assert ChannelID(5) != RoleID(5)

    def test_wraps_existing_snowflake(self):
        assert UserID(UserID(7)).to_int() == 7

    def test_from_object(self):
        assert ChannelID.from_object(SimpleNamespace(id=99)) == ChannelID(99)

    def test_hash_matches_for_equal_ids(self):
        assert len({UserID(1), UserID("1")}) == 1

    def test_preserves_full_64_bit_range(self):
        big = 2**64 - 1
        assert UserID(str(big)).to_int() == big

    @pytest.mark.parametrize("value", [-1, "abc", "", True, 1.5, None])
    def test_rejects_invalid_values(self, value):
        with pytest.raises(ValueError):
            UserID(value)

    def test_repr(self):
        assert repr(GuildID(3)) == "GuildID('3')"


def test_member_key_format():
    assert member_key(GuildID(10), 20) == "10:20"


def test_member_key_is_unambiguous():
    assert member_key(1, 23) != member_key(12, 3)
