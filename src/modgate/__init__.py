"""
modgate - moderation decision core for a Discord moderation service

modgate owns the data contracts exchanged between the bot, the HTTP layer and
the text classifier, and the decisions made around a single moderated message.
It performs no network I/O of its own.

Core Components:

- **Datatypes**: Enums with their wire strings, guild introspection and guild
  config shapes, classifier request/response, credit and subscription shapes
- **Applicability**: Channel and role scope checks per guild configuration
- **Model Resolver**: Picks a concrete model for ``auto`` requests under a
  monthly credit budget, bounded by the account's tier
- **Credit Ledger**: Per-call cost and balance checks
- **Action Resolver**: Maps classifier labels onto enabled labels, actions and
  the context re-evaluation signal
- **Reference store**: aiosqlite-backed credit balances with atomic
  conditional charging, and stored guild configs

Usage:
    from modgate.moderation.moderation_engine import ModerationEngine
    engine = ModerationEngine()
    plan = engine.plan(guild_config, channel_id, role_ids, text, credit_state, tier)
"""
