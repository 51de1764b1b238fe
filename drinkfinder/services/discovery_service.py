"""
==============================================================================
Store Discovery Service Module
==============================================================================

Finds fuel stations on OpenStreetMap and optionally imports them as stores.

Import rules:
------------
- A station whose address AND city match an existing store
  (case-insensitive) is skipped.
- Every station is inserted inside its own SAVEPOINT; a failing insert
  marks only that station as "error".
- Without auto_import every station is reported as "skipped".

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from drinkfinder.clients.overpass import GasStation, OverpassClient, OverpassError
from drinkfinder.core import exceptions
from drinkfinder.db.models import Store
from drinkfinder.services.store_service import StoreService


# Module logger
logger = logging.getLogger(__name__)

STATUS_ADDED = "added"
STATUS_SKIPPED = "skipped"
STATUS_ERROR = "error"


class DiscoveryService:
    """
    Overpass-backed store discovery.

    Example:
        >>> service = DiscoveryService(db, OverpassClient())
        >>> report = service.discover(40.7128, -74.0060, radius_m=3000, auto_import=True)
        >>> report["added"]
        4
    """

    def __init__(self, db: Session, client: OverpassClient) -> None:
        self._db = db
        self._client = client

    def _import_station(self, station: GasStation, stores: StoreService) -> Dict[str, Any]:
        entry = station.to_dict()

        existing = stores.find_by_address(station.address, station.city)
        if existing is not None:
            logger.info(f"⏭️ Skipping {station.name}: matches store #{existing.id}")
            entry.update(status=STATUS_SKIPPED, store_id=existing.id)
            return entry

        savepoint = self._db.begin_nested()
        try:
            store = Store(
                name=station.name[:255],
                address=station.address[:500],
                city=station.city[:100],
                state=station.state,
                zip_code=station.zip_code,
                latitude=station.latitude,
                longitude=station.longitude,
            )
            self._db.add(store)
            self._db.flush()
            savepoint.commit()
        except Exception as e:
            savepoint.rollback()
            logger.error(f"❌ Failed to import {station.name}: {e}")
            entry.update(status=STATUS_ERROR, error=str(e))
            return entry

        logger.info(f"✅ Imported {station.name} as store #{store.id}")
        entry.update(status=STATUS_ADDED, store_id=store.id)
        return entry

    def discover(
        self,
        latitude: float,
        longitude: float,
        radius_m: int = 5000,
        auto_import: bool = False
    ) -> Dict[str, Any]:
        """
        Query stations and optionally import them.

        Raises:
            AppException: DISCOVERY_FAILED when Overpass is unreachable
        """
        try:
            stations = self._client.find_gas_stations(latitude, longitude, radius_m)
        except OverpassError as e:
            raise exceptions.discovery_failed(str(e))

        results: List[Dict[str, Any]] = []

        if auto_import:
            stores = StoreService(self._db)
            for station in stations:
                results.append(self._import_station(station, stores))
            self._db.commit()
        else:
            results = [dict(station.to_dict(), status=STATUS_SKIPPED) for station in stations]

        added = sum(1 for r in results if r["status"] == STATUS_ADDED)
        skipped = sum(1 for r in results if r["status"] == STATUS_SKIPPED)
        errors = sum(1 for r in results if r["status"] == STATUS_ERROR)

        logger.info(
            f"🗺️ Discovery ({latitude}, {longitude}) r={radius_m}m: "
            f"discovered={len(stations)} added={added} skipped={skipped} errors={errors}"
        )

        return {
            "discovered": len(stations),
            "added": added,
            "skipped": skipped,
            "errors": errors,
            "stations": results,
        }
