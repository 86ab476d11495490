"""Configuration package for Wayback Trends.

Re-exports the settings symbols so that callers can write::

    from wayback_trends.config import get_settings
"""

from __future__ import annotations

from wayback_trends.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
