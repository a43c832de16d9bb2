"""
Guild introspection contracts exchanged with the bot process.

These are the shapes the bot reports about a guild (channels, roles, admins)
and the account lookups it performs before moderating. They carry no logic
beyond conversion to and from their JSON mappings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass(slots=True)
class ChannelInfo:
    id: str
    name: str
    channel_type: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChannelInfo":
        return cls(id=str(data["id"]), name=str(data.get("name", "")), channel_type=str(data.get("channel_type", "")))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "channel_type": self.channel_type}


@dataclass(slots=True)
class RoleInfo:
    id: str
    name: str
    color: int = 0
    position: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RoleInfo":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            color=int(data.get("color", 0)),
            position=int(data.get("position", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "color": self.color, "position": self.position}


@dataclass(slots=True)
class UserInfo:
    discord_id: str
    username: str
    is_owner: bool = False
    avatar: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserInfo":
        return cls(
            discord_id=str(data["discord_id"]),
            username=str(data.get("username", "")),
            is_owner=bool(data.get("is_owner", False)),
            avatar=data.get("avatar"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "discord_id": self.discord_id,
            "username": self.username,
            "is_owner": self.is_owner,
            "avatar": self.avatar,
        }


@dataclass(slots=True)
class GuildInfo:
    """Snapshot of a guild as seen by the bot.

    Attributes:
        channels: Channel id -> channel description.
        roles: Role id -> role description.
        admins: Discord user id -> admin description.
    """

    id: str
    name: str
    owner_id: str
    icon: Optional[str] = None
    channels: Dict[str, ChannelInfo] = field(default_factory=dict)
    roles: Dict[str, RoleInfo] = field(default_factory=dict)
    admins: Dict[str, UserInfo] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GuildInfo":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            owner_id=str(data.get("owner_id", "")),
            icon=data.get("icon"),
            channels={str(k): ChannelInfo.from_dict(v) for k, v in (data.get("channels") or {}).items()},
            roles={str(k): RoleInfo.from_dict(v) for k, v in (data.get("roles") or {}).items()},
            admins={str(k): UserInfo.from_dict(v) for k, v in (data.get("admins") or {}).items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "owner_id": self.owner_id,
            "icon": self.icon,
            "channels": {k: v.to_dict() for k, v in self.channels.items()},
            "roles": {k: v.to_dict() for k, v in self.roles.items()},
            "admins": {k: v.to_dict() for k, v in self.admins.items()},
        }


@dataclass(slots=True)
class AdminInfo:
    user_info: UserInfo
    subscription_tier: str
    has_account: bool

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AdminInfo":
        return cls(
            user_info=UserInfo.from_dict(data["user_info"]),
            subscription_tier=str(data.get("subscription_tier", "")),
            has_account=bool(data.get("has_account", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_info": self.user_info.to_dict(),
            "subscription_tier": self.subscription_tier,
            "has_account": self.has_account,
        }


@dataclass(slots=True)
class AdminConfig:
    is_opted_in: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AdminConfig":
        return cls(is_opted_in=bool(data.get("is_opted_in", False)))

    def to_dict(self) -> Dict[str, Any]:
        return {"is_opted_in": self.is_opted_in}


@dataclass(slots=True)
class AdminData:
    admin_info: AdminInfo
    admin_config: AdminConfig

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AdminData":
        return cls(
            admin_info=AdminInfo.from_dict(data["admin_info"]),
            admin_config=AdminConfig.from_dict(data.get("admin_config") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"admin_info": self.admin_info.to_dict(), "admin_config": self.admin_config.to_dict()}


@dataclass(slots=True)
class GuildsInfoRequest:
    """Bot request for the guilds a Discord user administers."""

    discord_id: str
    admin_guild_ids: List[str] = field(default_factory=list)
    guild_admin_ids: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GuildsInfoRequest":
        return cls(
            discord_id=str(data["discord_id"]),
            admin_guild_ids=[str(g) for g in data.get("admin_guild_ids") or []],
            guild_admin_ids={
                str(k): [str(a) for a in v] for k, v in (data.get("guild_admin_ids") or {}).items()
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "discord_id": self.discord_id,
            "admin_guild_ids": list(self.admin_guild_ids),
            "guild_admin_ids": {k: list(v) for k, v in self.guild_admin_ids.items()},
        }


@dataclass(slots=True)
class CheckAccountRequest:
    guild_id: str
    owner_discord_id: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CheckAccountRequest":
        return cls(guild_id=str(data["guild_id"]), owner_discord_id=str(data["owner_discord_id"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"guild_id": self.guild_id, "owner_discord_id": self.owner_discord_id}


@dataclass(slots=True)
class CheckAccountResponse:
    has_account: bool
    has_subscription: bool = False
    account_tier: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CheckAccountResponse":
        return cls(
            has_account=bool(data.get("has_account", False)),
            has_subscription=bool(data.get("has_subscription", False)),
            account_tier=data.get("account_tier"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_account": self.has_account,
            "has_subscription": self.has_subscription,
            "account_tier": self.account_tier,
        }
