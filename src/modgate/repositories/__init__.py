"""
Repositories over the SQLite reference store.

- **credit_repo.py**: Credit balances with atomic conditional charging.
- **guild_config_repo.py**: Stored guild moderation configs.
"""
