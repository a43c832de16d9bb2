"""
Guild moderation configs backed by SQLite.

Configs are stored in their canonical wire shape, so reading one back goes
through the same defaulting rules as any other payload.
"""

from __future__ import annotations

import json
from typing import Dict

from modgate.database.db_connection import ConnectionManager
from modgate.datatypes.discord_datatypes import GuildID
from modgate.datatypes.guild_config import DEFAULT_GUILD_CONFIG, GuildModerationConfig
from modgate.util.logger import get_logger

logger = get_logger("guild_config_repo")


class GuildConfigRepository:
    """CRUD for the guild_moderation_configs table."""

    def __init__(self, db: ConnectionManager) -> None:
        self._db = db

    async def get(self, guild_id: GuildID) -> GuildModerationConfig:
        """Return the guild's config, or the default config when none is stored."""
        async with self._db.read() as conn:
            async with conn.execute(
                "SELECT config_json FROM guild_moderation_configs WHERE guild_id = ?",
                (GuildID(guild_id).to_int(),),
            ) as cursor:
                row = await cursor.fetchone()

        if row is None:
            return DEFAULT_GUILD_CONFIG
        return GuildModerationConfig.from_dict(json.loads(row[0]))

    async def get_all(self) -> Dict[GuildID, GuildModerationConfig]:
        async with self._db.read() as conn:
            async with conn.execute("SELECT guild_id, config_json FROM guild_moderation_configs") as cursor:
                rows = await cursor.fetchall()

        return {GuildID(row[0]): GuildModerationConfig.from_dict(json.loads(row[1])) for row in rows}

    async def upsert(self, guild_id: GuildID, config: GuildModerationConfig) -> None:
        async with self._db.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO guild_moderation_configs (guild_id, config_json)
                VALUES (?, ?)
                ON CONFLICT(guild_id) DO UPDATE SET config_json = excluded.config_json
                """,
                (GuildID(guild_id).to_int(), json.dumps(config.to_dict())),
            )
        logger.debug("[GUILD CONFIG] Stored config for guild %s", guild_id)

    async def delete(self, guild_id: GuildID) -> bool:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM guild_moderation_configs WHERE guild_id = ?",
                (GuildID(guild_id).to_int(),),
            )
            deleted = cursor.rowcount > 0
            await cursor.close()
        return deleted
