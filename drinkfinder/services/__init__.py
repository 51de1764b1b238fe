"""
==============================================================================
Services Package
==============================================================================

Business logic layer between API controllers and the database.

- DrinkService: catalog CRUD, autocomplete, barcode lookup
- StoreService: stores, proximity and inventory search
- ScanService: barcode scan → inventory upsert
- DiscoveryService: OpenStreetMap station discovery/import

==============================================================================
"""

from .drink_service import DrinkService
from .store_service import StoreService
from .scan_service import ScanResult, ScanService
from .discovery_service import DiscoveryService

__all__ = [
    "DrinkService",
    "StoreService",
    "ScanResult",
    "ScanService",
    "DiscoveryService",
]
