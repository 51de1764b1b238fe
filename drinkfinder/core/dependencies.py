"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency providers shared by the API routers and WebSocket handlers.

Dependency Graph:
----------------
                    ┌─────────────────┐
                    │   get_db()      │  request-scoped Session
                    └─────────────────┘
    ┌──────────────────────────┐   ┌──────────────────────────┐
    │ get_geocoding_client()   │   │ get_overpass_client()    │
    └──────────────────────────┘   └──────────────────────────┘

Tests replace any of these through `app.dependency_overrides`.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Generator

from drinkfinder.clients import GeocodingClient, OverpassClient
from drinkfinder.config import get_settings
from drinkfinder.db.database import get_db


# Module logger
logger = logging.getLogger(__name__)


def get_geocoding_client() -> Generator[GeocodingClient, None, None]:
    """Yield a geocoding client configured from settings."""
    client = GeocodingClient.from_settings(get_settings())
    try:
        yield client
    finally:
        client.close()


def get_overpass_client() -> Generator[OverpassClient, None, None]:
    """Yield an Overpass client configured from settings."""
    client = OverpassClient.from_settings(get_settings())
    try:
        yield client
    finally:
        client.close()


__all__ = [
    "get_db",
    "get_geocoding_client",
    "get_overpass_client",
]
