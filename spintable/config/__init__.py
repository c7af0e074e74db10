"""Configuration for SPINTABLE.

Settings are read from ``SPINTABLE_*`` environment variables.
"""

from spintable.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
]
