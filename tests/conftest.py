"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides test database, client, sample catalog and external client fixtures.

==============================================================================
"""

import asyncio
import os

# Settings are cached on first import; configure before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ["DRINKS_FILE"] = "tests/does-not-exist.json"
os.environ["GEOCODING_API_KEY"] = "test-key"
os.environ["DEBUG"] = "false"

import pytest
from typing import Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from drinkfinder.main import app
from drinkfinder.db.database import Base, configure_sqlite_engine
from drinkfinder.db.models import EnergyDrink, Store, StoreInventory
from drinkfinder.clients.geocoding import AddressNotFoundError, GeocodeResult, build_query
from drinkfinder.clients.overpass import GasStation
# Import dependencies from the location the routers use
from drinkfinder.core.dependencies import get_db, get_geocoding_client, get_overpass_client


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

# In-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
configure_sqlite_engine(engine)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    # Create all tables
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# CATALOG FIXTURES
# ============================================================================

@pytest.fixture
def stores(db: Session) -> Dict[str, Store]:
    """Three Manhattan stores at increasing distance plus one in Newark."""
    data = {
        "penn": Store(name="Penn Station Deli", address="1 Penn Plaza", city="New York",
                      state="NY", zip_code="10119", latitude=40.7506, longitude=-73.9936),
        "bryant": Store(name="Bryant Park Mart", address="42 W 42nd St", city="New York",
                        state="NY", zip_code="10036", latitude=40.7536, longitude=-73.9832),
        "union": Store(name="Union Square Market", address="33 Union Sq W", city="New York",
                       state="NY", zip_code="10003", latitude=40.7359, longitude=-73.9911),
        "newark": Store(name="Newark Fuel Stop", address="200 Market St", city="Newark",
                        state="NJ", zip_code="07102", latitude=40.7357, longitude=-74.1724),
    }
    db.add_all(data.values())
    db.commit()
    return data


@pytest.fixture
def drinks(db: Session) -> Dict[str, EnergyDrink]:
    """Red Bull and Monster with barcodes, one Monster without."""
    data = {
        "red_bull": EnergyDrink(brand="Red Bull", flavor="Original", size_ml=250,
                                caffeine_mg=80, barcode="611269991000"),
        "monster": EnergyDrink(brand="Monster", flavor="Original", size_ml=473,
                               caffeine_mg=160, barcode="070847811169"),
        "ultra": EnergyDrink(brand="Monster", flavor="Ultra White", size_ml=473,
                             caffeine_mg=150, barcode=None),
    }
    db.add_all(data.values())
    db.commit()
    return data


@pytest.fixture
def inventory(db: Session, stores, drinks) -> List[StoreInventory]:
    """Red Bull at Penn and Union, Monster at Penn (in stock) and Bryant (out)."""
    rows = [
        StoreInventory(store_id=stores["penn"].id, drink_id=drinks["red_bull"].id,
                       price=2.99, in_stock=True),
        StoreInventory(store_id=stores["penn"].id, drink_id=drinks["monster"].id,
                       price=3.49, in_stock=True),
        StoreInventory(store_id=stores["bryant"].id, drink_id=drinks["monster"].id,
                       price=3.29, in_stock=False),
        StoreInventory(store_id=stores["union"].id, drink_id=drinks["red_bull"].id,
                       price=3.19, in_stock=True),
        StoreInventory(store_id=stores["newark"].id, drink_id=drinks["monster"].id,
                       price=2.79, in_stock=True),
    ]
    db.add_all(rows)
    db.commit()
    return rows


# ============================================================================
# EXTERNAL CLIENT FIXTURES
# ============================================================================

def running_on_event_loop() -> bool:
    """True when called from the thread running the asyncio loop."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class FakeGeocodingClient:
    """In-memory geocoder keyed by the exact query string."""

    def __init__(self, known: Optional[Dict[str, GeocodeResult]] = None):
        self.known = known or {}
        self.queries: List[str] = []
        self.on_event_loop: List[bool] = []

    def geocode(self, address):
        query = build_query(address)
        self.queries.append(query)
        self.on_event_loop.append(running_on_event_loop())
        if query not in self.known:
            raise AddressNotFoundError(query)
        return self.known[query]

    def close(self):
        pass


class FakeOverpassClient:
    """Returns a fixed list of stations, or raises a preset error."""

    def __init__(self, stations: Optional[List[GasStation]] = None, error: Optional[Exception] = None):
        self.stations = stations or []
        self.error = error
        self.calls = []
        self.on_event_loop: List[bool] = []

    def find_gas_stations(self, latitude, longitude, radius_m=5000):
        self.calls.append((latitude, longitude, radius_m))
        self.on_event_loop.append(running_on_event_loop())
        if self.error is not None:
            raise self.error
        return list(self.stations)

    def close(self):
        pass


@pytest.fixture
def fake_geocoder() -> Generator[FakeGeocodingClient, None, None]:
    geocoder = FakeGeocodingClient({
        "350 5th Ave New York NY 10118": GeocodeResult(
            latitude=40.748817,
            longitude=-73.985428,
            display_name="Empire State Building, 350, 5th Avenue, New York",
            boundingbox=["40.7483", "40.7493", "-73.9860", "-73.9849"],
        ),
        "New York NY 10001 US": GeocodeResult(
            latitude=40.750742,
            longitude=-73.99653,
            display_name="New York, NY 10001, United States",
        ),
    })
    app.dependency_overrides[get_geocoding_client] = lambda: geocoder
    yield geocoder
    app.dependency_overrides.pop(get_geocoding_client, None)


@pytest.fixture
def fake_overpass() -> Generator[FakeOverpassClient, None, None]:
    overpass = FakeOverpassClient([
        GasStation(name="Shell", address="10 Hudson St", city="New York", state="NY",
                   zip_code="10013", latitude=40.7181, longitude=-74.0086,
                   brand="Shell", osm_id=101),
        GasStation(name="BP", address="250 W 14th St", city="New York", state="NY",
                   zip_code="10011", latitude=40.7391, longitude=-74.0021,
                   brand="BP", osm_id=102),
    ])
    app.dependency_overrides[get_overpass_client] = lambda: overpass
    yield overpass
    app.dependency_overrides.pop(get_overpass_client, None)
