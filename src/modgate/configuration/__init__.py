"""
Configuration for modgate.

- **app_configuration.py**: YAML-backed application settings (tier credit
  overrides, default tier, database path) with fcntl-locked reads.
- **tier_catalog.py**: Static tier -> allowed models and monthly credit cap.
"""
