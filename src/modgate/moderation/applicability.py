"""Decide whether a message is in scope for moderation under a guild config."""

from __future__ import annotations

from typing import Iterable, Set, Union

from modgate.datatypes.discord_datatypes import Snowflake
from modgate.datatypes.enums import RoleFilterMode
from modgate.datatypes.guild_config import GuildModerationConfig
from modgate.util.logger import get_logger

logger = get_logger("applicability")

IdLike = Union[str, int, Snowflake]


def _id_key(value: IdLike) -> str:
    """Canonical string form of an id, so ``123``, ``"123"`` and ``ChannelID(123)`` match."""
    try:
        return str(Snowflake(value))
    except ValueError:
        return str(value).strip()


def _id_keys(values: Iterable[IdLike]) -> Set[str]:
    return {_id_key(value) for value in values}


def channel_gate(config: GuildModerationConfig, channel_id: IdLike) -> bool:
    if config.moderate_all_channels:
        return True
    return _id_key(channel_id) in _id_keys(config.moderated_channels)


def role_gate(config: GuildModerationConfig, author_role_ids: Iterable[IdLike]) -> bool:
    """Apply the role filter.

    Include mode with an empty ``filtered_roles`` lets nobody through, and
    Exclude mode with an empty set lets everybody through. Both are applied
    literally.
    """
    if config.moderate_all_roles:
        return True

    holds_filtered_role = not _id_keys(config.filtered_roles).isdisjoint(_id_keys(author_role_ids))
    if config.role_filter_mode is RoleFilterMode.INCLUDE:
        return holds_filtered_role
    return not holds_filtered_role


def in_scope(config: GuildModerationConfig, channel_id: IdLike, author_role_ids: Iterable[IdLike]) -> bool:
    """Return True when a message in ``channel_id`` by an author holding ``author_role_ids`` must be moderated.

    An inactive guild is never in scope, whatever its other settings. The role
    gate is only consulted once the channel gate passes.
    """
    if not config.is_active:
        logger.debug("[SCOPE] Guild moderation inactive, skipping channel %s", channel_id)
        return False

    if not channel_gate(config, channel_id):
        logger.debug("[SCOPE] Channel %s not moderated", channel_id)
        return False

    if not role_gate(config, author_role_ids):
        logger.debug("[SCOPE] Author roles filtered out by %s mode in channel %s", config.role_filter_mode, channel_id)
        return False

    return True
