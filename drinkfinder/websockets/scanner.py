"""
==============================================================================
Scanner WebSocket Module
==============================================================================

Real-time barcode scanning for the camera view.

Protocol:
---------
1. Client connects to /ws/scan
2. Client sends init:
       {"type": "init", "report": true,
        "store_id": 3 | "latitude": .., "longitude": ..,
        "price": 2.99, "in_stock": true}
   Server answers {"type": "init", "report": .., "store": {...} | null}
3. Client streams {"type": "frame", "frame": "<base64 jpeg>"}
   Server answers {"type": "detection", "frame_id": n, "detections": [...]}
   and, in report mode, one {"type": "scan_result", ...} per distinct
   catalog barcode per session
4. Client sends {"type": "stop"}

Errors are reported as {"type": "error", "code": .., "message": ..}.
Text that is not a JSON object gets INVALID_MESSAGE and is otherwise ignored.

==============================================================================
"""

import json
import logging
from typing import Optional, Set

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from sqlalchemy.orm import Session

from drinkfinder.core.dependencies import get_db
from drinkfinder.core.exceptions import AppException
from drinkfinder.db.models import Store
from drinkfinder.scanner import BarcodeDecoder, ImageDecodeError, image_from_base64
from drinkfinder.schemas.scan import ScanRequest
from drinkfinder.services.drink_service import DrinkService
from drinkfinder.services.scan_service import ScanService


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter()


class ScannerWebSocketHandler:
    """
    Handler for one camera scanning session.

    Manages:
    - Session options (report mode, store, price, stock state)
    - Frame decoding and catalog matching
    - Inventory reports, once per distinct barcode
    """

    def __init__(self, websocket: WebSocket, db: Session):
        self._websocket = websocket
        self._db = db
        self._drinks = DrinkService(db)
        self._scans = ScanService(db)
        self._decoder = BarcodeDecoder(lookup=self._lookup)
        self._report = False
        self._store: Optional[Store] = None
        self._price: Optional[float] = None
        self._in_stock: Optional[bool] = None
        self._reported: Set[str] = set()

    def _lookup(self, barcode: str) -> Optional[dict]:
        drink = self._drinks.find_by_barcode(barcode)
        return drink.to_dict() if drink else None

    async def send_error(self, message: str, code: str = "ERROR") -> None:
        """Send error message to client."""
        await self._websocket.send_json({
            "type": "error",
            "code": code,
            "message": message
        })

    async def handle_init(self, data: dict) -> bool:
        """Apply session options; resolve the store when reporting."""
        if data.get("type") != "init":
            await self.send_error("First message must be init", "INIT_REQUIRED")
            return False

        try:
            options = ScanRequest(
                barcode=None,
                store_id=data.get("store_id"),
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                price=data.get("price"),
                in_stock=data.get("in_stock"),
            )
        except ValidationError as e:
            await self.send_error(f"Invalid init options: {e.errors()[0]['msg']}", "VALIDATION_ERROR")
            return False

        self._report = bool(data.get("report", False))
        self._price = options.price
        self._in_stock = options.in_stock

        warning = None
        if self._report:
            try:
                self._store, distance_km = self._scans.resolve_store(
                    options.store_id, options.latitude, options.longitude
                )
            except AppException as e:
                await self.send_error(e.message, e.code)
                return False

            if distance_km is not None and distance_km > self._scans.far_store_warning_km:
                warning = f"Nearest store '{self._store.name}' is {distance_km:.2f} km away"
                logger.warning(f"⚠️ Scanner session bound to far store #{self._store.id} ({distance_km:.2f} km)")

        logger.info(f"Init: report={self._report}, store={self._store.id if self._store else None}")

        message = {
            "type": "init",
            "report": self._report,
            "store": self._store.to_dict() if self._store else None,
        }
        if warning:
            message["warning"] = warning
        await self._websocket.send_json(message)
        return True

    async def report_scan(self, barcode: str) -> None:
        """Record one inventory report and send its result."""
        self._reported.add(barcode)
        try:
            result = self._scans.record_scan(ScanRequest(
                barcode=barcode,
                store_id=self._store.id,
                price=self._price,
                in_stock=self._in_stock,
            ))
        except AppException as e:
            await self.send_error(e.message, e.code)
            return

        await self._websocket.send_json({
            "type": "scan_result",
            "success": True,
            "message": result.message,
            "data": result.to_dict(),
        })

    async def handle_frame(self, data: dict, frame_count: int) -> None:
        """Decode one frame, send detections, report new catalog hits."""
        try:
            frame = image_from_base64(data.get("frame") or "")
        except ImageDecodeError as e:
            logger.debug(f"Frame {frame_count} rejected: {e}")
            await self.send_error(str(e), "INVALID_FRAME")
            return

        detections = self._decoder.detect(frame)
        if not detections:
            return

        await self._websocket.send_json({
            "type": "detection",
            "frame_id": frame_count,
            "detections": [d.to_dict() for d in detections],
        })

        if self._report and self._store is not None:
            for detection in detections:
                if detection.matched and detection.barcode not in self._reported:
                    await self.report_scan(detection.barcode)

    async def receive_message(self) -> Optional[dict]:
        """Next JSON object from the client; None after reporting a bad one."""
        raw = await self._websocket.receive_text()
        try:
            data = json.loads(raw)
        except ValueError:
            await self.send_error("Message is not valid JSON", "INVALID_MESSAGE")
            return None

        if not isinstance(data, dict):
            await self.send_error("Message must be a JSON object", "INVALID_MESSAGE")
            return None

        return data

    async def run(self) -> None:
        """Main handler loop."""
        await self._websocket.accept()
        logger.info("📱 Scanner WebSocket connected")

        try:
            init_data = await self.receive_message()
            if init_data is None or not await self.handle_init(init_data):
                await self._websocket.close()
                return

            frame_count = 0

            while True:
                data = await self.receive_message()
                if data is None:
                    continue

                if data.get("type") == "frame":
                    frame_count += 1
                    await self.handle_frame(data, frame_count)

                elif data.get("type") == "stop":
                    logger.info("🛑 Client requested stop")
                    break

            await self._websocket.close()

        except WebSocketDisconnect:
            logger.info("📱 Client disconnected")
        except Exception as e:
            logger.exception(f"❌ Scanner WebSocket error: {e}")
            try:
                await self.send_error(str(e), "INTERNAL_ERROR")
            except Exception as send_exc:
                logger.debug(f"Could not report error to client: {send_exc}")
        finally:
            logger.info(f"✅ Scanner WebSocket closed ({len(self._reported)} reports)")


@router.websocket("/ws/scan")
async def websocket_scan(
    websocket: WebSocket,
    db: Session = Depends(get_db)
):
    """Real-time barcode scanning via WebSocket."""
    handler = ScannerWebSocketHandler(websocket, db)
    await handler.run()
