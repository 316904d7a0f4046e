"""
Configuration management for Namewarden.

- **app_configuration.py**: YAML configuration loader guarded by fcntl locks.
  Exposes the database path and the spam filter settings (protected role
  source, fixed/exempt role ids, escalation contacts, workflow timeout).
"""
