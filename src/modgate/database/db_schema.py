"""
Schema creation for the reference store adapter.

Tables:
- credit_accounts: one balance row per account, CHECK keeps balances non-negative.
- credit_transactions: append-only record of charges and resets.
- guild_moderation_configs: canonical JSON config per guild.
- schema_version
"""

import aiosqlite
from modgate.util.logger import get_logger

logger = get_logger("database_schema")

SCHEMA_VERSION = 1


class SchemaManager:
    """Creates tables, indexes and triggers, and records the schema version."""

    @staticmethod
    async def initialize_schema(db: aiosqlite.Connection) -> None:
        await SchemaManager._create_tables(db)
        await SchemaManager._create_indexes(db)
        await SchemaManager._create_triggers(db)
        await db.execute("INSERT OR IGNORE INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
        await db.commit()
        logger.info("[SCHEMA] Database schema initialized")

    @staticmethod
    async def _create_tables(db: aiosqlite.Connection) -> None:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS credit_accounts (
                account_id TEXT PRIMARY KEY,
                remaining_credits INTEGER NOT NULL CHECK (remaining_credits >= 0),
                max_monthly_credits INTEGER NOT NULL CHECK (max_monthly_credits >= 0),
                reset_date TEXT,
                billing_cycle TEXT NOT NULL DEFAULT 'monthly',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS credit_transactions (
                id TEXT PRIMARY KEY,
                account_id TEXT NOT NULL,
                amount INTEGER NOT NULL,
                transaction_type TEXT NOT NULL,
                model_type TEXT,
                bytes_processed INTEGER,
                description TEXT NOT NULL DEFAULT '',
                created_at TEXT NOT NULL,
                FOREIGN KEY (account_id) REFERENCES credit_accounts(account_id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS guild_moderation_configs (
                guild_id INTEGER PRIMARY KEY,
                config_json TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    @staticmethod
    async def _create_indexes(db: aiosqlite.Connection) -> None:
        await db.execute(
            "CREATE INDEX IF NOT EXISTS idx_credit_transactions_account "
            "ON credit_transactions(account_id, created_at DESC)"
        )

    @staticmethod
    async def _create_triggers(db: aiosqlite.Connection) -> None:
        await db.execute("""
            CREATE TRIGGER IF NOT EXISTS update_credit_accounts_timestamp
            AFTER UPDATE ON credit_accounts
            FOR EACH ROW
            WHEN OLD.updated_at = NEW.updated_at
            BEGIN
                UPDATE credit_accounts SET updated_at = CURRENT_TIMESTAMP
                WHERE account_id = NEW.account_id;
            END
        """)

        await db.execute("""
            CREATE TRIGGER IF NOT EXISTS update_guild_moderation_configs_timestamp
            AFTER UPDATE ON guild_moderation_configs
            FOR EACH ROW
            WHEN OLD.updated_at = NEW.updated_at
            BEGIN
                UPDATE guild_moderation_configs SET updated_at = CURRENT_TIMESTAMP
                WHERE guild_id = NEW.guild_id;
            END
        """)
