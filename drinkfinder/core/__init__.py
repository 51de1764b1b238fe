"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

Modules:
--------
- exceptions: AppException class and error factory functions
- dependencies: FastAPI dependency injection functions

Usage:
------
    from drinkfinder.core import exceptions
    raise exceptions.drink_not_found(barcode="611269991000")

==============================================================================
"""

from .exceptions import AppException, register_exception_handlers
from .dependencies import get_db, get_geocoding_client, get_overpass_client

__all__ = [
    # Exceptions
    "AppException",
    "register_exception_handlers",
    # Dependencies
    "get_db",
    "get_geocoding_client",
    "get_overpass_client",
]
