"""
==============================================================================
Main API Router
==============================================================================

Mounts the finder's REST routers under /api/v1:

    /health    database and catalog status, readiness/liveness
    /drinks    autocomplete, barcode lookup, stats, catalog CRUD
    /stores    all, nearby, store CRUD, OpenStreetMap discovery
    /search    stores near a point stocking a brand/flavor
    /scan      price/stock reports by barcode, image barcode decoding
    /geocode   address to coordinates

The camera WebSocket (/ws/scan) is mounted separately in main.py.

==============================================================================
"""

from fastapi import APIRouter

from drinkfinder.api.v1 import health, drinks, stores, search, scan, geocode


V1_ROUTERS = (health, drinks, stores, search, scan, geocode)


class MainAPIRouter:
    """Versioned router holding every v1 endpoint module."""

    def __init__(self):
        self._router = APIRouter(prefix="/api/v1")
        for module in V1_ROUTERS:
            self._router.include_router(module.router)

    @property
    def router(self) -> APIRouter:
        return self._router


api_router = MainAPIRouter().router
