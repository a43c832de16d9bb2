"""
Data contracts for modgate.

- **enums.py**: Labels, models, actions, role filter modes, tiers and billing
  cycles, each round-tripping through a single wire string.
- **errors.py**: Error kinds raised by the core.
- **discord_datatypes.py**: Snowflake id wrappers comparable across int/str.
- **guild_datatypes.py**: Guild, channel, role and admin introspection shapes.
- **guild_config.py**: Per-guild moderation config with documented defaults.
- **moderation_datatypes.py**: Classifier request/response and engine decision.
- **credit_datatypes.py**: Credit snapshot, balance, transaction and subscription shapes.
"""
