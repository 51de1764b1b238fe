"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints
- drinks: Catalog search, barcode lookup and admin CRUD
- stores: Store listing, proximity search, CRUD and discovery
- search: Stores carrying a matching drink
- scan: Barcode scan reporting and image decoding
- geocode: Address geocoding

==============================================================================
"""

from . import health, drinks, stores, search, scan, geocode

__all__ = ["health", "drinks", "stores", "search", "scan", "geocode"]
