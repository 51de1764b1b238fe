"""
==============================================================================
Store Endpoints
==============================================================================

Store listing, proximity search, admin CRUD and OpenStreetMap discovery.

==============================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from drinkfinder.clients.overpass import OverpassClient
from drinkfinder.config import get_settings
from drinkfinder.core.dependencies import get_db, get_overpass_client
from drinkfinder.schemas.common import MessageResponse
from drinkfinder.schemas.store import DiscoverRequest, StoreCreate, StoreUpdate
from drinkfinder.services.discovery_service import DiscoveryService
from drinkfinder.services.store_service import StoreService, store_with_distance


router = APIRouter(prefix="/stores", tags=["Stores"])


class StoreController:
    """Controller for store operations."""

    def __init__(self, db: Session):
        self._db = db
        self._service = StoreService(db)

    def list_all(self) -> dict:
        stores = self._service.list_all()
        return {
            "success": True,
            "message": f"Found {len(stores)} stores",
            "data": {"stores": [s.to_dict() for s in stores]}
        }

    def nearby(
        self,
        latitude: float,
        longitude: float,
        radius: Optional[float],
        limit: Optional[int]
    ) -> dict:
        settings = get_settings()
        rows = self._service.nearby(
            latitude,
            longitude,
            radius_km=radius if radius is not None else settings.default_search_radius_km,
            limit=limit if limit is not None else settings.default_nearby_limit,
        )
        return {
            "success": True,
            "message": f"Found {len(rows)} nearby stores",
            "data": {"stores": [store_with_distance(store, km) for store, km in rows]}
        }

    def get_store(self, store_id: int) -> dict:
        return {
            "success": True,
            "data": {"store": self._service.get_with_inventory(store_id)}
        }

    def create(self, data: StoreCreate) -> dict:
        store = self._service.create(data)
        return {
            "success": True,
            "message": f"Added store {store.name}",
            "data": {"store": store.to_dict()}
        }

    def update(self, store_id: int, data: StoreUpdate) -> dict:
        store = self._service.update(store_id, data)
        return {
            "success": True,
            "message": f"Updated store {store.name}",
            "data": {"store": store.to_dict()}
        }

    def delete(self, store_id: int) -> MessageResponse:
        self._service.delete(store_id)
        return MessageResponse(message="Store deleted successfully")

    def discover(self, data: DiscoverRequest, client: OverpassClient) -> dict:
        report = DiscoveryService(self._db, client).discover(
            data.latitude,
            data.longitude,
            radius_m=data.radius,
            auto_import=data.auto_import,
        )

        if data.auto_import:
            message = (
                f"Discovered {report['discovered']} stations, "
                f"added {report['added']}, skipped {report['skipped']}"
            )
        else:
            message = f"Discovered {report['discovered']} gas stations"

        return {
            "success": True,
            "message": message,
            "data": report
        }


@router.get("/all")
async def list_all_stores(db: Session = Depends(get_db)):
    """All stores, ordered by name."""
    controller = StoreController(db)
    return controller.list_all()


@router.get("/nearby")
async def nearby_stores(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius: Optional[float] = Query(None, gt=0, le=500, description="Radius in km"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Stores within `radius` km, nearest first."""
    controller = StoreController(db)
    return controller.nearby(latitude, longitude, radius, limit)


@router.post("/discover")
def discover_stores(
    data: DiscoverRequest,
    db: Session = Depends(get_db),
    client: OverpassClient = Depends(get_overpass_client)
):
    """Find fuel stations on OpenStreetMap, optionally importing them."""
    controller = StoreController(db)
    return controller.discover(data, client)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_store(data: StoreCreate, db: Session = Depends(get_db)):
    """Add a store."""
    controller = StoreController(db)
    return controller.create(data)


@router.get("/{store_id}")
async def get_store(store_id: int, db: Session = Depends(get_db)):
    """Get a store with its inventory."""
    controller = StoreController(db)
    return controller.get_store(store_id)


@router.put("/{store_id}")
async def update_store(store_id: int, data: StoreUpdate, db: Session = Depends(get_db)):
    """Update the provided fields of a store."""
    controller = StoreController(db)
    return controller.update(store_id, data)


@router.delete("/{store_id}", response_model=MessageResponse)
async def delete_store(store_id: int, db: Session = Depends(get_db)):
    """Delete a store and its inventory rows."""
    controller = StoreController(db)
    return controller.delete(store_id)
