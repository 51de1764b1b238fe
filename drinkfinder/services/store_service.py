"""
==============================================================================
Store Service Module
==============================================================================

Store locations, proximity queries and inventory search.

This module implements:
- StoreService: CRUD, nearby/nearest queries, search-with-inventory

Proximity:
---------
All distances come from the database through a SpatialBackend
(PostGIS on PostgreSQL, great_circle_km on SQLite). Results are
ordered nearest first and carry `distance_km`.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from drinkfinder.core import exceptions
from drinkfinder.db.models import EnergyDrink, Store, StoreInventory
from drinkfinder.db.spatial import SpatialBackend, get_spatial_backend
from drinkfinder.schemas.store import StoreCreate, StoreUpdate


# Module logger
logger = logging.getLogger(__name__)

# Columns a partial update may not set to NULL
REQUIRED_STORE_FIELDS = ("name", "address", "city", "state", "zip_code", "latitude", "longitude")


def store_with_distance(store: Store, distance_km: Optional[float]) -> Dict[str, Any]:
    data = store.to_dict()
    data["distance_km"] = round(float(distance_km), 3) if distance_km is not None else None
    return data


class StoreService:
    """
    Store location service.

    Example:
        >>> service = StoreService(db)
        >>> for store, km in service.nearby(40.7506, -73.9936, radius_km=2):
        ...     print(store.name, km)
    """

    def __init__(self, db: Session, spatial: Optional[SpatialBackend] = None) -> None:
        self._db = db
        self._spatial = spatial or get_spatial_backend(db)

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def list_all(self) -> List[Store]:
        return self._db.query(Store).order_by(Store.name, Store.id).all()

    def get_by_id(self, store_id: int) -> Store:
        store = self._db.get(Store, store_id)
        if store is None:
            raise exceptions.store_not_found(store_id)
        return store

    def nearby(
        self,
        latitude: float,
        longitude: float,
        radius_km: float = 10,
        limit: int = 10
    ) -> List[Tuple[Store, float]]:
        """Stores within radius_km, nearest first, at most `limit`."""
        distance = self._spatial.distance_km(latitude, longitude).label("distance_km")

        rows = self._db.query(Store, distance).filter(
            self._spatial.within_km(latitude, longitude, radius_km)
        ).order_by(
            self._spatial.nearest(latitude, longitude), Store.id
        ).limit(limit).all()

        logger.debug(f"Nearby ({latitude}, {longitude}) r={radius_km}km: {len(rows)} stores")
        return [(store, km) for store, km in rows]

    def nearest(self, latitude: float, longitude: float) -> Optional[Tuple[Store, float]]:
        """The single closest store regardless of distance, or None if there are no stores."""
        distance = self._spatial.distance_km(latitude, longitude).label("distance_km")

        row = self._db.query(Store, distance).order_by(
            self._spatial.nearest(latitude, longitude), Store.id
        ).first()

        if row is None:
            return None
        store, km = row
        return store, float(km)

    def get_inventory(self, store_id: int) -> List[Dict[str, Any]]:
        """Inventory of one store with drink details."""
        rows = self._db.query(StoreInventory, EnergyDrink).join(
            EnergyDrink, EnergyDrink.id == StoreInventory.drink_id
        ).filter(
            StoreInventory.store_id == store_id
        ).order_by(EnergyDrink.brand, EnergyDrink.flavor).all()

        return [
            {
                **drink.to_dict(),
                "inventory_id": item.id,
                "price": float(item.price),
                "in_stock": item.in_stock,
                "last_updated": item.last_updated.isoformat() if item.last_updated else None,
            }
            for item, drink in rows
        ]

    def get_with_inventory(self, store_id: int) -> Dict[str, Any]:
        store = self.get_by_id(store_id)
        data = store.to_dict()
        data["inventory"] = self.get_inventory(store.id)
        return data

    def search_inventory(
        self,
        latitude: float,
        longitude: float,
        radius_km: float = 10,
        brand: Optional[str] = None,
        flavor: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Stores within the radius stocking at least one matching drink.

        Each result lists its in-stock matches under `available_drinks`.
        """
        distance = self._spatial.distance_km(latitude, longitude).label("distance_km")

        query = self._db.query(Store, StoreInventory, EnergyDrink, distance).join(
            StoreInventory, StoreInventory.store_id == Store.id
        ).join(
            EnergyDrink, EnergyDrink.id == StoreInventory.drink_id
        ).filter(
            self._spatial.within_km(latitude, longitude, radius_km),
            StoreInventory.in_stock.is_(True)
        )

        if brand and brand.strip():
            query = query.filter(EnergyDrink.brand.icontains(brand.strip(), autoescape=True))
        if flavor and flavor.strip():
            query = query.filter(EnergyDrink.flavor.icontains(flavor.strip(), autoescape=True))

        rows = query.order_by(
            distance, Store.id, EnergyDrink.brand, EnergyDrink.flavor
        ).all()

        results: Dict[int, Dict[str, Any]] = {}
        for store, item, drink, km in rows:
            entry = results.get(store.id)
            if entry is None:
                entry = store_with_distance(store, km)
                entry["available_drinks"] = []
                results[store.id] = entry
            entry["available_drinks"].append({
                **drink.to_dict(),
                "price": float(item.price),
                "in_stock": item.in_stock,
                "last_updated": item.last_updated.isoformat() if item.last_updated else None,
            })

        logger.info(
            f"🔍 Search brand={brand!r} flavor={flavor!r} r={radius_km}km: "
            f"{len(results)} stores"
        )
        return list(results.values())

    def find_by_address(self, address: str, city: str) -> Optional[Store]:
        """Case-insensitive match on address AND city."""
        return self._db.query(Store).filter(
            func.lower(Store.address) == address.lower(),
            func.lower(Store.city) == city.lower()
        ).first()

    def count(self) -> int:
        return self._db.query(func.count(Store.id)).scalar()

    # =========================================================================
    # WRITE OPERATIONS
    # =========================================================================

    def create(self, data: StoreCreate) -> Store:
        store = Store(**data.model_dump())
        self._db.add(store)
        self._db.commit()
        self._db.refresh(store)

        logger.info(f"✅ Store created: #{store.id} {store.name} ({store.city})")
        return store

    def update(self, store_id: int, data: StoreUpdate) -> Store:
        store = self.get_by_id(store_id)
        changes = data.model_dump(exclude_unset=True)

        for key in REQUIRED_STORE_FIELDS:
            if key in changes and changes[key] is None:
                changes.pop(key)

        for key, value in changes.items():
            setattr(store, key, value)

        if changes:
            self._db.commit()
            self._db.refresh(store)
            logger.info(f"✏️ Store updated: #{store.id} {sorted(changes)}")

        return store

    def delete(self, store_id: int) -> Dict[str, Any]:
        """Delete a store; its inventory rows cascade."""
        store = self.get_by_id(store_id)
        snapshot = store.to_dict()

        self._db.delete(store)
        self._db.commit()

        logger.info(f"🗑️ Store deleted: #{store_id} {snapshot['name']}")
        return snapshot
