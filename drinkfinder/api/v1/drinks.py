"""
==============================================================================
Energy Drink Endpoints
==============================================================================

Catalog search (autocomplete), barcode lookup, statistics and admin CRUD.

==============================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from drinkfinder.core.dependencies import get_db
from drinkfinder.schemas.common import MessageResponse
from drinkfinder.schemas.drink import DrinkCreate, DrinkUpdate
from drinkfinder.services.drink_service import DrinkService


router = APIRouter(prefix="/drinks", tags=["Drinks"])


class DrinkController:
    """Controller for catalog operations."""

    def __init__(self, db: Session):
        self._service = DrinkService(db)

    def autocomplete(self, q: Optional[str]) -> dict:
        drinks = self._service.autocomplete(q)
        return {
            "success": True,
            "drinks": [d.to_dict() for d in drinks]
        }

    def list_drinks(self, brand: Optional[str], sort_by: str, sort_order: str) -> dict:
        drinks = self._service.list_drinks(brand, sort_by, sort_order)
        return {
            "success": True,
            "count": len(drinks),
            "data": {"drinks": [d.to_dict() for d in drinks]}
        }

    def get_drink(self, drink_id: int) -> dict:
        return {
            "success": True,
            "data": {"drink": self._service.get_by_id(drink_id).to_dict()}
        }

    def get_by_barcode(self, barcode: str) -> dict:
        drink = self._service.get_by_barcode(barcode)
        return {
            "success": True,
            "data": {"drink": drink.to_dict()}
        }

    def create(self, data: DrinkCreate) -> dict:
        drink = self._service.create(data)
        return {
            "success": True,
            "message": f"Added {drink.brand} {drink.flavor} ({drink.size_ml}ml)",
            "data": {"drink": drink.to_dict()}
        }

    def update(self, drink_id: int, data: DrinkUpdate) -> dict:
        drink = self._service.update(drink_id, data)
        return {
            "success": True,
            "message": f"Updated {drink.brand} {drink.flavor}",
            "data": {"drink": drink.to_dict()}
        }

    def delete(self, drink_id: int) -> MessageResponse:
        self._service.delete(drink_id)
        return MessageResponse(message="Drink deleted successfully")

    def get_stats(self) -> dict:
        return {
            "success": True,
            "stats": self._service.get_stats()
        }


@router.get("/autocomplete")
async def autocomplete_drinks(
    q: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db)
):
    """Suggest drinks whose brand or flavor contains `q`."""
    controller = DrinkController(db)
    return controller.autocomplete(q)


@router.get("/stats")
async def drink_stats(db: Session = Depends(get_db)):
    """Per-brand counts and barcode coverage."""
    controller = DrinkController(db)
    return controller.get_stats()


@router.get("/barcode/{barcode}")
async def get_drink_by_barcode(barcode: str, db: Session = Depends(get_db)):
    """Look up a drink by UPC/EAN, tolerating leading-zero differences."""
    controller = DrinkController(db)
    return controller.get_by_barcode(barcode)


@router.get("")
async def list_drinks(
    brand: Optional[str] = Query(None, max_length=100),
    sort_by: str = Query("brand"),
    sort_order: str = Query("asc"),
    db: Session = Depends(get_db)
):
    """List all drinks with optional brand filter and sorting."""
    controller = DrinkController(db)
    return controller.list_drinks(brand, sort_by, sort_order)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_drink(data: DrinkCreate, db: Session = Depends(get_db)):
    """Add a drink to the catalog."""
    controller = DrinkController(db)
    return controller.create(data)


@router.get("/{drink_id}")
async def get_drink(drink_id: int, db: Session = Depends(get_db)):
    """Get a drink by ID."""
    controller = DrinkController(db)
    return controller.get_drink(drink_id)


@router.put("/{drink_id}")
async def update_drink(drink_id: int, data: DrinkUpdate, db: Session = Depends(get_db)):
    """Update the provided fields of a drink."""
    controller = DrinkController(db)
    return controller.update(drink_id, data)


@router.delete("/{drink_id}", response_model=MessageResponse)
async def delete_drink(drink_id: int, db: Session = Depends(get_db)):
    """Delete a drink and its inventory rows."""
    controller = DrinkController(db)
    return controller.delete(drink_id)
