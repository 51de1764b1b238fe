"""
==============================================================================
Scan Endpoints
==============================================================================

Barcode scan reporting and server-side barcode decoding of images.

==============================================================================
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from drinkfinder.core import exceptions
from drinkfinder.core.dependencies import get_db
from drinkfinder.scanner import BarcodeDecoder, ImageDecodeError
from drinkfinder.schemas.scan import DecodeRequest, ScanRequest
from drinkfinder.services.drink_service import DrinkService
from drinkfinder.services.scan_service import ScanService


router = APIRouter(prefix="/scan", tags=["Scan"])


class ScanController:
    """Controller for scan operations."""

    def __init__(self, db: Session):
        self._db = db

    def record(self, data: ScanRequest) -> dict:
        result = ScanService(self._db).record_scan(data)
        return {
            "success": True,
            "message": result.message,
            "data": result.to_dict()
        }

    def decode(self, data: DecodeRequest) -> dict:
        drinks = DrinkService(self._db)

        def lookup(barcode: str):
            drink = drinks.find_by_barcode(barcode)
            return drink.to_dict() if drink else None

        try:
            detections = BarcodeDecoder(lookup=lookup).decode_base64(data.image)
        except ImageDecodeError as e:
            raise exceptions.validation_error(str(e), {"field": "image"})

        return {
            "success": True,
            "message": f"Found {len(detections)} barcodes",
            "data": {"detections": [d.to_dict() for d in detections]}
        }


@router.post("")
async def scan_barcode(data: ScanRequest, db: Session = Depends(get_db)):
    """
    Report a scanned drink at a store.

    The store is `store_id`, or the nearest store to latitude/longitude.
    """
    controller = ScanController(db)
    return controller.record(data)


@router.post("/decode")
async def decode_image(data: DecodeRequest, db: Session = Depends(get_db)):
    """Decode barcodes in a base64 image and match them to the catalog."""
    controller = ScanController(db)
    return controller.decode(data)
