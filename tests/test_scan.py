"""
==============================================================================
Scan Endpoint Tests
==============================================================================

Barcode scan → inventory upsert, store resolution and error codes.

==============================================================================
"""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from drinkfinder.db.models import StoreInventory


SCAN_URL = "/api/v1/scan"


def inventory_rows(db: Session, store_id: int, drink_id: int):
    db.expire_all()
    return db.query(StoreInventory).filter(
        StoreInventory.store_id == store_id,
        StoreInventory.drink_id == drink_id
    ).all()


class TestScanUpsert:
    """Tests for recording scans."""

    def test_scan_creates_inventory(self, client: TestClient, db: Session, stores, drinks):
        store = stores["bryant"]
        response = client.post(SCAN_URL, json={
            "barcode": "611269991000", "store_id": store.id, "price": 3.09
        })
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Successfully added Red Bull Original to Bryant Park Mart"

        data = body["data"]
        assert data["was_created"] is True
        assert data["drink"]["barcode"] == "611269991000"
        assert data["store"]["id"] == store.id
        assert data["inventory"]["price"] == 3.09
        assert data["inventory"]["in_stock"] is True
        assert data["inventory"]["last_updated"]
        assert "warning" not in data

    def test_repeated_scan_is_idempotent(self, client: TestClient, db: Session, stores, drinks):
        payload = {"barcode": "611269991000", "store_id": stores["bryant"].id, "price": 3.09}

        first = client.post(SCAN_URL, json=payload).json()
        second = client.post(SCAN_URL, json=payload).json()

        assert first["data"]["was_created"] is True
        assert second["data"]["was_created"] is False
        assert second["message"] == "Updated Red Bull Original at Bryant Park Mart"
        assert second["data"]["inventory"]["id"] == first["data"]["inventory"]["id"]

        rows = inventory_rows(db, stores["bryant"].id, drinks["red_bull"].id)
        assert len(rows) == 1
        assert float(rows[0].price) == 3.09
        assert rows[0].in_stock is True

    def test_scan_overwrites_existing_row(self, client: TestClient, db: Session, stores, drinks, inventory):
        response = client.post(SCAN_URL, json={
            "barcode": "611269991000",
            "store_id": stores["penn"].id,
            "price": 3.25,
            "in_stock": False,
        })
        data = response.json()["data"]
        assert data["was_created"] is False
        assert data["inventory"]["price"] == 3.25
        assert data["inventory"]["in_stock"] is False

        rows = inventory_rows(db, stores["penn"].id, drinks["red_bull"].id)
        assert len(rows) == 1
        assert float(rows[0].price) == 3.25

    def test_defaults(self, client: TestClient, stores, drinks):
        data = client.post(SCAN_URL, json={
            "barcode": "070847811169", "store_id": stores["union"].id
        }).json()["data"]
        assert data["inventory"]["price"] == 0.0
        assert data["inventory"]["in_stock"] is True

    def test_zero_stripped_barcode(self, client: TestClient, stores, drinks):
        data = client.post(SCAN_URL, json={
            "barcode": "70847811169", "store_id": stores["union"].id
        }).json()["data"]
        assert data["drink"]["id"] == drinks["monster"].id


class TestScanStoreResolution:
    """Tests for resolving the store from coordinates."""

    def test_nearest_store_without_warning(self, client: TestClient, stores, drinks):
        data = client.post(SCAN_URL, json={
            "barcode": "611269991000", "latitude": 40.7360, "longitude": -73.9912
        }).json()["data"]
        assert data["store"]["name"] == "Union Square Market"
        assert "warning" not in data

    def test_far_store_warning(self, client: TestClient, stores, drinks):
        response = client.post(SCAN_URL, json={
            "barcode": "611269991000", "latitude": 40.80, "longitude": -73.95
        })
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["store"]["name"] == "Bryant Park Mart"
        assert "Bryant Park Mart" in data["warning"]
        assert data["distance_km"] > 1

    def test_zero_coordinates_are_valid(self, client: TestClient, stores, drinks):
        response = client.post(SCAN_URL, json={
            "barcode": "611269991000", "latitude": 0, "longitude": 0
        })
        assert response.status_code == 200
        assert "warning" in response.json()["data"]

    def test_store_id_takes_precedence(self, client: TestClient, stores, drinks):
        data = client.post(SCAN_URL, json={
            "barcode": "611269991000",
            "store_id": stores["newark"].id,
            "latitude": 40.7506,
            "longitude": -73.9936,
        }).json()["data"]
        assert data["store"]["name"] == "Newark Fuel Stop"
        assert "warning" not in data


class TestScanErrors:
    """Tests for scan error codes."""

    def test_missing_barcode(self, client: TestClient, stores, drinks):
        response = client.post(SCAN_URL, json={"store_id": stores["penn"].id})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_BARCODE"

    def test_blank_barcode(self, client: TestClient, stores, drinks):
        response = client.post(SCAN_URL, json={"barcode": "   ", "store_id": stores["penn"].id})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_BARCODE"

    def test_barcode_checked_before_location(self, client: TestClient):
        response = client.post(SCAN_URL, json={})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_BARCODE"

    def test_missing_location(self, client: TestClient, drinks):
        response = client.post(SCAN_URL, json={"barcode": "611269991000"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_LOCATION"

    def test_partial_coordinates(self, client: TestClient, drinks):
        response = client.post(SCAN_URL, json={"barcode": "611269991000", "latitude": 40.75})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_LOCATION"

    def test_location_checked_before_catalog(self, client: TestClient, drinks):
        response = client.post(SCAN_URL, json={"barcode": "123456789012"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_LOCATION"

    def test_unknown_barcode(self, client: TestClient, stores, drinks):
        response = client.post(SCAN_URL, json={"barcode": "123456789012", "store_id": stores["penn"].id})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "DRINK_NOT_FOUND"

    def test_unknown_store(self, client: TestClient, drinks):
        response = client.post(SCAN_URL, json={"barcode": "611269991000", "store_id": 999})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "STORE_NOT_FOUND"

    def test_no_stores(self, client: TestClient, drinks):
        response = client.post(SCAN_URL, json={
            "barcode": "611269991000", "latitude": 40.75, "longitude": -73.99
        })
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NO_STORES"

    def test_negative_price(self, client: TestClient, stores, drinks):
        response = client.post(SCAN_URL, json={
            "barcode": "611269991000", "store_id": stores["penn"].id, "price": -1
        })
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
