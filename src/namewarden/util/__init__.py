"""
Utility functions and helpers for Namewarden.

This package provides reusable utilities:

- **logger.py**: Centralized logging configuration with colored console output,
  a per-session log file, and suppression of noisy Discord/aiohttp internals.
  Uses prompt_toolkit for console output.

- **discord_utils.py**: Adapters over py-cord objects: the guild membership
  directory (member/role fetches, ban, DM), the reaction prompt channel used by
  the configuration workflow, and permission checks.
"""
