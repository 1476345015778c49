"""
Type-safe wrapper classes for Discord identifiers.

Discord snowflakes are 64-bit integers but travel as strings in most payloads.
The wrappers below give every store one canonical form (a normalized decimal
string) while still handing plain ints to py-cord when an API call needs one.
"""

from __future__ import annotations

from typing import Union

KEY_SEPARATOR = ":"


class Snowflake:
    """
    Base wrapper for a Discord snowflake ID.

    Accepts a string, an int, or another wrapper of the same kind. Two wrappers
    only compare equal when they are of the same kind, so a ``GuildID`` never
    matches a ``UserID`` that happens to carry the same number.

    Example:
        >>> uid = UserID("123456789012345678")
        >>> uid.to_int()
        123456789012345678
        >>> uid == 123456789012345678
        True
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "Snowflake"]) -> None:
        """
        Raises:
            ValueError: If the value cannot be converted to a non-negative snowflake.
        """
        if isinstance(value, Snowflake):
            self._value = value._value
            return
        if isinstance(value, bool):
            raise ValueError(f"Cannot create {type(self).__name__} from bool: {value}")
        if isinstance(value, int):
            number = value
        elif isinstance(value, str):
            number = int(value.strip())
        else:
            raise ValueError(f"Cannot create {type(self).__name__} from {type(value).__name__}: {value}")
        if number < 0:
            raise ValueError(f"Snowflake IDs are unsigned, got {number}")
        self._value = str(number)

    @classmethod
    def from_int(cls, value: int):
        return cls(value)

    @classmethod
    def from_object(cls, obj):
        """Create an ID from any Discord model exposing an ``id`` attribute."""
        return cls(obj.id)

    def to_int(self) -> int:
        """Convert to an integer for Discord API calls."""
        return int(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Snowflake):
            return type(self) is type(other) and self._value == other._value
        if isinstance(other, str):
            return self._value == other
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


class UserID(Snowflake):
    """Snowflake of a Discord user or guild member."""

    __slots__ = ()


class GuildID(Snowflake):
    """Snowflake of a Discord guild."""

    __slots__ = ()


class ChannelID(Snowflake):
    """Snowflake of a guild channel (categories included)."""

    __slots__ = ()


class RoleID(Snowflake):
    """Snowflake of a guild role."""

    __slots__ = ()


def member_key(guild_id: Union[GuildID, int, str], user_id: Union[UserID, int, str]) -> str:
    """Return the flat ``guild:user`` key used by the per-member maps.

    The separator is not a digit, so two different (guild, user) pairs can
    never produce the same key.
    """
    return f"{GuildID(guild_id)}{KEY_SEPARATOR}{UserID(user_id)}"
