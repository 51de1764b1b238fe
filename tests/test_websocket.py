"""
==============================================================================
Scanner WebSocket Tests
==============================================================================
"""

import base64
from types import SimpleNamespace

import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from starlette.websockets import WebSocketDisconnect

from drinkfinder.db.models import StoreInventory
from drinkfinder.scanner import core


def frame_b64() -> str:
    ok, buffer = cv2.imencode(".png", np.zeros((10, 10, 3), np.uint8))
    assert ok
    return base64.b64encode(buffer.tobytes()).decode("ascii")


@pytest.fixture
def camera(monkeypatch):
    """Barcodes the fake pyzbar reports for every frame."""
    visible = []

    def decode(frame):
        return [
            SimpleNamespace(
                data=code.encode("utf-8"),
                type="EAN13",
                rect=SimpleNamespace(left=0, top=0, width=10, height=10),
            )
            for code in visible
        ]

    monkeypatch.setattr(core, "decode", decode)
    return visible


class TestScannerHandshake:
    """Tests for the init message."""

    def test_first_message_must_be_init(self, client: TestClient):
        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({"type": "frame", "frame": frame_b64()})
            message = ws.receive_json()

        assert message["type"] == "error"
        assert message["code"] == "INIT_REQUIRED"

    def test_init_without_report(self, client: TestClient):
        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({"type": "init"})
            assert ws.receive_json() == {"type": "init", "report": False, "store": None}
            ws.send_json({"type": "stop"})

    def test_report_with_store(self, client: TestClient, stores):
        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({"type": "init", "report": True, "store_id": stores["penn"].id})
            message = ws.receive_json()
            ws.send_json({"type": "stop"})

        assert message["report"] is True
        assert message["store"]["name"] == "Penn Station Deli"
        assert "warning" not in message

    def test_report_unknown_store(self, client: TestClient, stores):
        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({"type": "init", "report": True, "store_id": 9999})
            message = ws.receive_json()

        assert message["code"] == "STORE_NOT_FOUND"

    def test_report_without_location(self, client: TestClient, stores):
        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({"type": "init", "report": True})
            message = ws.receive_json()

        assert message["code"] == "MISSING_LOCATION"

    def test_invalid_options(self, client: TestClient):
        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({"type": "init", "report": True, "price": -1})
            message = ws.receive_json()

        assert message["code"] == "VALIDATION_ERROR"

    def test_far_store_warning(self, client: TestClient, stores):
        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({"type": "init", "report": True, "latitude": 40.80, "longitude": -73.95})
            message = ws.receive_json()
            ws.send_json({"type": "stop"})

        assert message["store"]["name"] == "Bryant Park Mart"
        assert "km away" in message["warning"]


class TestScannerFrames:
    """Tests for frame streaming and inventory reports."""

    def test_detection_only_without_report(self, client: TestClient, drinks, camera):
        camera.append("611269991000")

        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({"type": "init"})
            ws.receive_json()
            ws.send_json({"type": "frame", "frame": frame_b64()})
            detection = ws.receive_json()
            ws.send_json({"type": "frame", "frame": "not base64!!"})
            error = ws.receive_json()
            ws.send_json({"type": "stop"})

        assert detection["type"] == "detection"
        assert detection["frame_id"] == 1
        assert detection["detections"][0]["matched"] is True
        assert error["code"] == "INVALID_FRAME"

    def test_report_once_per_barcode(self, client: TestClient, db: Session, stores, drinks, camera):
        camera.append("70847811169")

        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({
                "type": "init", "report": True, "store_id": stores["union"].id,
                "price": 3.59, "in_stock": True,
            })
            ws.receive_json()

            ws.send_json({"type": "frame", "frame": frame_b64()})
            first = ws.receive_json()
            result = ws.receive_json()

            ws.send_json({"type": "frame", "frame": frame_b64()})
            second = ws.receive_json()

            # Next message is the frame error, so no second scan_result was sent
            ws.send_json({"type": "frame", "frame": ""})
            after = ws.receive_json()
            ws.send_json({"type": "stop"})

        assert first["type"] == "detection"
        assert result["type"] == "scan_result"
        assert result["data"]["was_created"] is True
        assert result["data"]["inventory"]["price"] == 3.59
        assert result["data"]["store"]["id"] == stores["union"].id
        assert second["type"] == "detection"
        assert second["frame_id"] == 2
        assert after["code"] == "INVALID_FRAME"

        rows = db.query(StoreInventory).filter(
            StoreInventory.store_id == stores["union"].id
        ).all()
        assert len(rows) == 1
        assert rows[0].drink_id == drinks["monster"].id

    def test_unknown_barcode_not_reported(self, client: TestClient, db: Session, stores, drinks, camera):
        camera.append("123456789012")

        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({"type": "init", "report": True, "store_id": stores["penn"].id})
            ws.receive_json()
            ws.send_json({"type": "frame", "frame": frame_b64()})
            detection = ws.receive_json()
            ws.send_json({"type": "frame", "frame": ""})
            after = ws.receive_json()
            ws.send_json({"type": "stop"})

        assert detection["detections"][0]["color"] == "red"
        assert after["type"] == "error"
        assert db.query(StoreInventory).count() == 0

    def test_malformed_text_reported_and_session_continues(self, client: TestClient):
        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({"type": "init"})
            ws.receive_json()
            ws.send_text("not json")
            error = ws.receive_json()
            ws.send_json(["frame"])
            second = ws.receive_json()
            ws.send_json({"type": "frame", "frame": ""})
            after = ws.receive_json()
            ws.send_json({"type": "stop"})

        assert error["code"] == "INVALID_MESSAGE"
        assert second["code"] == "INVALID_MESSAGE"
        assert after["code"] == "INVALID_FRAME"

    def test_non_object_init_rejected(self, client: TestClient):
        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json(["init"])
            message = ws.receive_json()

        assert message["type"] == "error"
        assert message["code"] == "INVALID_MESSAGE"

    def test_stop_closes_socket(self, client: TestClient):
        with client.websocket_connect("/ws/scan") as ws:
            ws.send_json({"type": "init"})
            ws.receive_json()
            ws.send_json({"type": "stop"})
            with pytest.raises(WebSocketDisconnect):
                ws.receive_json()
