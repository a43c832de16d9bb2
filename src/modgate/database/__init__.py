"""
SQLite reference store for modgate.

- **db_connection.py**: Single aiosqlite connection with serialised write transactions.
- **db_schema.py**: Table, index and trigger creation.
"""
