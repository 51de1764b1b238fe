"""
==============================================================================
Energy Drink Finder
==============================================================================

Store locator for energy drinks with crowd-sourced, barcode-driven inventory.

Architecture:
------------
├── api/         - REST routers under /api/v1
├── websockets/  - /ws/scan camera scanning sessions
├── services/    - drink, store, scan and discovery business logic
├── clients/     - geocoding and OpenStreetMap Overpass HTTP adapters
├── catalog/     - drinks JSON ingestion and demo seed data
├── scanner/     - pyzbar barcode decoding
├── db/          - SQLAlchemy models, spatial queries, SQL migrations
├── schemas/     - Pydantic request models
└── scripts/     - maintenance command-line tools

==============================================================================
"""

__version__ = "1.0.0"
