"""
==============================================================================
Configuration Package
==============================================================================

Centralized configuration management using Pydantic Settings.

Usage:
------
    from drinkfinder.config import get_settings

    settings = get_settings()
    print(settings.database_url)
    print(settings.far_store_warning_km)

==============================================================================
"""

from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
