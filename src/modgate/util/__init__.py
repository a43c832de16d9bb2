"""
Utilities for modgate.

- **logger.py**: Centralized logging with coloured prompt_toolkit console
  output, a rotating per-session log file and silenced third-party loggers.
"""
