"""
Per-guild moderation configuration.

A guild configuration is owned by the persistence layer and handed to the
decision core for every event. Every field has a documented default so a
partially specified payload is always resolvable:

- active, moderating every channel and every role
- exclude-mode role filter with an empty exclusion set
- every label except ``T`` enabled
- a single ``delete`` action
- the ``observer`` model
- context re-evaluation disabled, 5 messages of history when enabled
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Optional

from modgate.datatypes.enums import ModerationAction, ModerationLabel, ModerationModel, RoleFilterMode
from modgate.datatypes.errors import InvalidConfig
from modgate.datatypes.guild_datatypes import AdminData, ChannelInfo, GuildInfo, RoleInfo

DEFAULT_CONTEXT_HISTORY_COUNT = 5

# Wire key -> attribute name where the two differ
_WIRE_RENAMES: Dict[str, str] = {"alerts_channel_id": "alerts_channel"}

_BOOL_FIELDS = ("is_active", "moderate_all_channels", "moderate_all_roles", "enable_context")


def _default_labels() -> FrozenSet[ModerationLabel]:
    return frozenset(ModerationLabel.default_labels())


def _default_actions() -> FrozenSet[ModerationAction]:
    return frozenset({ModerationAction.DELETE})


@dataclass(frozen=True, slots=True)
class GuildModerationConfig:
    """Moderation settings for a single guild.

    Attributes:
        is_active: Master switch; an inactive guild moderates nothing.
        moderate_all_channels: When False only ``moderated_channels`` are in scope.
        moderated_channels: Channel id -> channel description (allow-list).
        moderate_all_roles: When False ``role_filter_mode`` applies to ``filtered_roles``.
        role_filter_mode: Include (allow-list) or Exclude (deny-list).
        filtered_roles: Role id -> role description.
        enabled_labels: Labels that may flag a message.
        actions: Actions applied uniformly to a flagged message.
        model: Configured model, possibly ``AUTO``.
        alerts_channel: Channel id receiving moderation alerts, if any.
        enable_context: Whether ambiguous results trigger a context re-evaluation.
        context_history_count: Prior messages gathered for the re-evaluation.

    Instances are immutable and hashable: the channel and role maps are held
    as read-only views, so a config can be used as a dict key or set member.
    """

    is_active: bool = True
    moderate_all_channels: bool = True
    moderated_channels: Mapping[str, ChannelInfo] = field(default_factory=dict)
    moderate_all_roles: bool = True
    role_filter_mode: RoleFilterMode = RoleFilterMode.EXCLUDE
    filtered_roles: Mapping[str, RoleInfo] = field(default_factory=dict)
    enabled_labels: FrozenSet[ModerationLabel] = field(default_factory=_default_labels)
    actions: FrozenSet[ModerationAction] = field(default_factory=_default_actions)
    model: ModerationModel = ModerationModel.OBSERVER
    alerts_channel: Optional[str] = None
    enable_context: bool = False
    context_history_count: int = DEFAULT_CONTEXT_HISTORY_COUNT

    def __post_init__(self) -> None:
        # Mapping fields are copied into read-only views
        object.__setattr__(self, "moderated_channels", MappingProxyType(dict(self.moderated_channels)))
        object.__setattr__(self, "filtered_roles", MappingProxyType(dict(self.filtered_roles)))
        object.__setattr__(self, "enabled_labels", frozenset(self.enabled_labels))
        object.__setattr__(self, "actions", frozenset(self.actions))

    def __hash__(self) -> int:
        # Descriptions are unhashable; equal configs always share the same id keys
        return hash((
            self.is_active,
            self.moderate_all_channels,
            frozenset(self.moderated_channels),
            self.moderate_all_roles,
            self.role_filter_mode,
            frozenset(self.filtered_roles),
            self.enabled_labels,
            self.actions,
            self.model,
            self.alerts_channel,
            self.enable_context,
            self.context_history_count,
        ))

    @classmethod
    def default(cls) -> "GuildModerationConfig":
        return DEFAULT_GUILD_CONFIG

    def with_overrides(self, **changes: Any) -> "GuildModerationConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "GuildModerationConfig":
        """Build a config from its wire mapping, filling every missing field with its default.

        Raises:
            InvalidConfig: If the payload or one of its fields has the wrong shape.
            UnknownVariant: If an enum string is not recognised.
        """
        if data is None:
            return DEFAULT_GUILD_CONFIG
        if not isinstance(data, Mapping):
            raise InvalidConfig(f"Guild config must be a mapping, got {type(data).__name__}")

        values: Dict[str, Any] = {}
        for key, raw in data.items():
            name = _WIRE_RENAMES.get(key, key)
            if raw is None and name != "alerts_channel":
                continue
            values[name] = raw

        kwargs: Dict[str, Any] = {}
        for name in _BOOL_FIELDS:
            if name in values:
                if not isinstance(values[name], bool):
                    raise InvalidConfig(f"{name} must be a boolean, got {values[name]!r}")
                kwargs[name] = values[name]

        if "moderated_channels" in values:
            kwargs["moderated_channels"] = _parse_id_map(values["moderated_channels"], "moderated_channels", ChannelInfo)
        if "filtered_roles" in values:
            kwargs["filtered_roles"] = _parse_id_map(values["filtered_roles"], "filtered_roles", RoleInfo)
        if "role_filter_mode" in values:
            kwargs["role_filter_mode"] = RoleFilterMode.parse(values["role_filter_mode"])
        if "enabled_labels" in values:
            kwargs["enabled_labels"] = frozenset(
                ModerationLabel.parse(v) for v in _as_list(values["enabled_labels"], "enabled_labels")
            )
        if "actions" in values:
            kwargs["actions"] = frozenset(
                ModerationAction.parse(v) for v in _as_list(values["actions"], "actions")
            )
        if "model" in values:
            kwargs["model"] = ModerationModel.parse(values["model"])
        if "alerts_channel" in values:
            alerts = values["alerts_channel"]
            kwargs["alerts_channel"] = None if alerts in (None, "") else str(alerts)
        if "context_history_count" in values:
            count = values["context_history_count"]
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise InvalidConfig(f"context_history_count must be a non-negative integer, got {count!r}")
            kwargs["context_history_count"] = count

        return replace(DEFAULT_GUILD_CONFIG, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the canonical wire mapping. Sets are emitted in declaration order."""
        payload: Dict[str, Any] = {
            "is_active": self.is_active,
            "moderate_all_channels": self.moderate_all_channels,
            "moderated_channels": {k: v.to_dict() for k, v in self.moderated_channels.items()},
            "moderate_all_roles": self.moderate_all_roles,
            "role_filter_mode": self.role_filter_mode.to_wire_string(),
            "filtered_roles": {k: v.to_dict() for k, v in self.filtered_roles.items()},
            "enabled_labels": [l.to_wire_string() for l in ModerationLabel if l in self.enabled_labels],
            "actions": [a.to_wire_string() for a in ModerationAction if a in self.actions],
            "model": self.model.to_wire_string(),
            "enable_context": self.enable_context,
            "context_history_count": self.context_history_count,
        }
        if self.alerts_channel is not None:
            payload["alerts_channel_id"] = self.alerts_channel
        return payload


def _as_list(raw: Any, name: str) -> Iterable[Any]:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
        raise InvalidConfig(f"{name} must be a list, got {raw!r}")
    return list(raw)


def _parse_id_map(raw: Any, name: str, info_cls):
    """Accept either ``{id: info}`` or a plain list of ids."""
    if isinstance(raw, Mapping):
        parsed = {}
        for key, value in raw.items():
            if not isinstance(value, Mapping):
                raise InvalidConfig(f"{name}[{key!r}] must be a mapping")
            parsed[str(key)] = info_cls.from_dict({"id": key, **value})
        return parsed
    return {str(item): info_cls.from_dict({"id": item}) for item in _as_list(raw, name)}


DEFAULT_GUILD_CONFIG = GuildModerationConfig()


@dataclass(slots=True)
class DiscordData:
    """Everything the bot needs to moderate one guild."""

    guild_info: GuildInfo
    guild_config: GuildModerationConfig = field(default_factory=GuildModerationConfig.default)
    admin_data: Dict[str, AdminData] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DiscordData":
        return cls(
            guild_info=GuildInfo.from_dict(data["guild_info"]),
            guild_config=GuildModerationConfig.from_dict(data.get("guild_config")),
            admin_data={str(k): AdminData.from_dict(v) for k, v in (data.get("admin_data") or {}).items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "guild_info": self.guild_info.to_dict(),
            "guild_config": self.guild_config.to_dict(),
            "admin_data": {k: v.to_dict() for k, v in self.admin_data.items()},
        }


@dataclass(slots=True)
class DiscordModerateRequest:
    """Bot request to moderate a single message of a guild."""

    guild_info: GuildInfo
    text: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DiscordModerateRequest":
        return cls(guild_info=GuildInfo.from_dict(data["guild_info"]), text=str(data.get("text", "")))

    def to_dict(self) -> Dict[str, Any]:
        return {"guild_info": self.guild_info.to_dict(), "text": self.text}
