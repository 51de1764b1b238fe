"""
==============================================================================
Search Endpoint
==============================================================================

Nearby stores that have a matching drink in stock.

==============================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from drinkfinder.config import get_settings
from drinkfinder.core.dependencies import get_db
from drinkfinder.services.store_service import StoreService


router = APIRouter(prefix="/search", tags=["Search"])


@router.get("")
async def search_stores(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius: Optional[float] = Query(None, gt=0, le=500, description="Radius in km"),
    brand: Optional[str] = Query(None, max_length=100),
    flavor: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db)
):
    """
    Stores within the radius carrying at least one in-stock drink that
    matches the brand/flavor filters, nearest first.
    """
    if radius is None:
        radius = get_settings().default_search_radius_km

    stores = StoreService(db).search_inventory(latitude, longitude, radius, brand, flavor)

    return {
        "success": True,
        "message": f"Found {len(stores)} stores",
        "data": {"stores": stores}
    }
