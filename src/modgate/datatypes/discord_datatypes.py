"""
Type-safe wrappers for Discord snowflake identifiers.

Snowflakes are 64-bit integers but travel through JSON and the persistence
layer as strings. The wrappers store the canonical decimal string and compare
equal to the same snowflake given as ``int``, ``str`` or wrapper, so guild
configs keyed by strings can be matched against ids coming from py-cord.
"""

from __future__ import annotations

from typing import Iterable, List, Union

import discord


class Snowflake:
    """
    Base wrapper for a Discord snowflake id.

    Attributes:
        _value (str): The snowflake stored as a decimal string for JSON parity.

    Example:
        >>> cid = ChannelID(123456789012345678)
        >>> cid.to_int()
        123456789012345678
        >>> cid == "123456789012345678"
        True
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "Snowflake"]) -> None:
        """
        Raises:
            ValueError: If the value cannot be converted to a valid snowflake.
        """
        if isinstance(value, Snowflake):
            self._value = value._value
        elif isinstance(value, bool):
            raise ValueError(f"Cannot create {type(self).__name__} from bool: {value}")
        elif isinstance(value, int):
            if value < 0:
                raise ValueError(f"Snowflake ids are non-negative, got {value}")
            self._value = str(value)
        elif isinstance(value, str):
            self._value = str(int(value.strip()))
            if self._value.startswith("-"):
                raise ValueError(f"Snowflake ids are non-negative, got {value!r}")
        else:
            raise ValueError(f"Cannot create {type(self).__name__} from {type(value).__name__}: {value}")

    @classmethod
    def from_int(cls, value: int):
        return cls(value)

    def to_int(self) -> int:
        """Convert to an integer for Discord API calls."""
        return int(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Snowflake):
            return self._value == other._value
        if isinstance(other, str):
            return self._value == other.strip()
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


class GuildID(Snowflake):
    """Snowflake id of a guild."""

    __slots__ = ()

    @classmethod
    def from_guild(cls, guild: discord.Guild) -> "GuildID":
        return cls(guild.id)


class ChannelID(Snowflake):
    """Snowflake id of a text channel or thread."""

    __slots__ = ()

    @classmethod
    def from_channel(cls, channel: Union[discord.TextChannel, discord.Thread, discord.abc.GuildChannel]) -> "ChannelID":
        return cls(channel.id)


class RoleID(Snowflake):
    """Snowflake id of a guild role."""

    __slots__ = ()

    @classmethod
    def from_role(cls, role: discord.Role) -> "RoleID":
        return cls(role.id)


class UserID(Snowflake):
    """Snowflake id of a user or member."""

    __slots__ = ()

    @classmethod
    def from_user(cls, member: Union[discord.Member, discord.User]) -> "UserID":
        return cls(member.id)


def role_ids_of(member: discord.Member) -> List[RoleID]:
    """Return the role ids held by a guild member, ``@everyone`` included."""
    return [RoleID.from_role(role) for role in member.roles]


def as_role_ids(values: Iterable[Union[str, int, Snowflake]]) -> List[RoleID]:
    """Normalize a mixed iterable of role identifiers into :class:`RoleID` objects."""
    return [RoleID(value) for value in values]
