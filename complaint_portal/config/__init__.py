"""
Configuration package for the complaint portal.

Exposes the cached application settings loaded from the environment
and an optional ``.env`` file.
"""

from complaint_portal.config.settings import Settings, get_settings, settings

__all__ = ["Settings", "get_settings", "settings"]
