"""
==============================================================================
Store Discovery Tests
==============================================================================

POST /stores/discover with the Overpass client replaced by a fake.

==============================================================================
"""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from drinkfinder.clients.overpass import GasStation, OverpassError
from drinkfinder.core.dependencies import get_overpass_client
from drinkfinder.db.models import Store
from drinkfinder.main import app

from conftest import FakeOverpassClient


DISCOVER_URL = "/api/v1/stores/discover"
CENTER = {"latitude": 40.7306, "longitude": -74.0020}


class TestDiscoverPreview:
    """Discovery without auto import."""

    def test_stations_listed_not_imported(self, client: TestClient, db: Session, fake_overpass):
        response = client.post(DISCOVER_URL, json=CENTER)
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Discovered 2 gas stations"

        data = body["data"]
        assert data["discovered"] == 2
        assert data["added"] == 0
        assert data["skipped"] == 2
        assert {s["status"] for s in data["stations"]} == {"skipped"}
        assert db.query(Store).count() == 0

    def test_default_radius(self, client: TestClient, fake_overpass):
        client.post(DISCOVER_URL, json=CENTER)
        assert fake_overpass.calls == [(40.7306, -74.0020, 5000)]

    def test_runs_off_the_event_loop(self, client: TestClient, fake_overpass):
        client.post(DISCOVER_URL, json=CENTER)
        assert fake_overpass.on_event_loop == [False]

    def test_radius_limit(self, client: TestClient, fake_overpass):
        response = client.post(DISCOVER_URL, json={**CENTER, "radius": 60000})
        assert response.status_code == 400
        assert fake_overpass.calls == []


class TestDiscoverImport:
    """Discovery with auto import."""

    def test_import_new_stations(self, client: TestClient, db: Session, fake_overpass):
        response = client.post(DISCOVER_URL, json={**CENTER, "autoImport": True})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Discovered 2 stations, added 2, skipped 0"
        assert {s["status"] for s in body["data"]["stations"]} == {"added"}

        names = sorted(store.name for store in db.query(Store).all())
        assert names == ["BP", "Shell"]

    def test_snake_case_flag_accepted(self, client: TestClient, db: Session, fake_overpass):
        body = client.post(DISCOVER_URL, json={**CENTER, "auto_import": True}).json()
        assert body["data"]["added"] == 2

    def test_existing_address_skipped(self, client: TestClient, db: Session, fake_overpass):
        db.add(Store(name="Shell Hudson", address="10 HUDSON ST", city="new york", state="NY",
                     zip_code="10013", latitude=40.7181, longitude=-74.0086))
        db.commit()

        data = client.post(DISCOVER_URL, json={**CENTER, "autoImport": True}).json()["data"]
        assert data["added"] == 1
        assert data["skipped"] == 1
        assert db.query(Store).count() == 2

    def test_second_import_adds_nothing(self, client: TestClient, db: Session, fake_overpass):
        client.post(DISCOVER_URL, json={**CENTER, "autoImport": True})
        data = client.post(DISCOVER_URL, json={**CENTER, "autoImport": True}).json()["data"]
        assert data["added"] == 0
        assert data["skipped"] == 2
        assert db.query(Store).count() == 2

    def test_failed_station_does_not_abort_batch(self, client: TestClient, db: Session):
        overpass = FakeOverpassClient([
            GasStation(name="Sunoco", address="1 Canal St", city="New York", state="NY",
                       zip_code="10002", latitude=40.714, longitude=-73.990),
            GasStation(name="Broken", address="2 Nowhere Rd", city="New York", state="NY",
                       zip_code="10002", latitude=None, longitude=None),
            GasStation(name="Mobil", address="3 Bowery", city="New York", state="NY",
                       zip_code="10002", latitude=40.716, longitude=-73.996),
        ])
        app.dependency_overrides[get_overpass_client] = lambda: overpass

        data = client.post(DISCOVER_URL, json={**CENTER, "autoImport": True}).json()["data"]
        assert data["added"] == 2
        assert data["errors"] == 1
        assert [s["status"] for s in data["stations"]] == ["added", "error", "added"]
        assert sorted(s.name for s in db.query(Store).all()) == ["Mobil", "Sunoco"]


class TestDiscoverFailure:
    """Overpass failures map to 502."""

    def test_overpass_unreachable(self, client: TestClient):
        overpass = FakeOverpassClient(error=OverpassError("Overpass API error: 504 Gateway Timeout"))
        app.dependency_overrides[get_overpass_client] = lambda: overpass

        response = client.post(DISCOVER_URL, json=CENTER)
        assert response.status_code == 502
        assert response.json()["error"]["code"] == "DISCOVERY_FAILED"
