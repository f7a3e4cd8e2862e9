"""
hubactions configuration.

Pydantic-based settings read from HUBACTIONS_* environment variables
and .env files, with CLI overrides merged on top.
"""

from hubactions.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
