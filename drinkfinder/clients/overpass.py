"""
==============================================================================
Overpass Client Module
==============================================================================

Finds fuel stations near a point using the OpenStreetMap Overpass API.
No API key is required; a fixed delay precedes every query to stay polite
towards the public endpoint.

Element → station mapping:
-------------------------
    name      tags.brand or tags.name
    address   "<addr:housenumber> <addr:street>" or "Address not available"
    city      addr:city or "Unknown"
    state     addr:state when it is a 2-letter code, else ""
    zip_code  addr:postcode or "00000"
    lat/lon   element lat/lon, or way center

Elements without coordinates or a name are dropped.

==============================================================================
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from drinkfinder.config import Settings, get_settings


# Module logger
logger = logging.getLogger(__name__)

ADDRESS_UNAVAILABLE = "Address not available"
UNKNOWN_CITY = "Unknown"
UNKNOWN_ZIP = "00000"


class OverpassError(Exception):
    """Overpass request or payload failure."""


@dataclass
class GasStation:
    name: str
    address: str
    city: str
    state: str
    zip_code: str
    latitude: float
    longitude: float
    brand: Optional[str] = None
    osm_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_fuel_query(latitude: float, longitude: float, radius_m: int) -> str:
    """Overpass QL for amenity=fuel nodes and ways around a point."""
    around = f"(around:{radius_m},{latitude},{longitude})"
    return (
        "[out:json];\n"
        "(\n"
        f'  node["amenity"="fuel"]{around};\n'
        f'  way["amenity"="fuel"]{around};\n'
        ");\n"
        "out center;"
    )


def _normalize_state(value: Optional[str]) -> str:
    value = (value or "").strip()
    if len(value) == 2 and value.isalpha():
        return value.upper()
    return ""


def element_to_station(element: Dict[str, Any]) -> Optional[GasStation]:
    """Map one Overpass element to a GasStation, or None if unusable."""
    center = element.get("center") or {}
    lat = element.get("lat", center.get("lat"))
    lon = element.get("lon", center.get("lon"))
    tags = element.get("tags") or {}

    if lat is None or lon is None or not tags.get("name"):
        return None

    street_number = tags.get("addr:housenumber", "")
    street = tags.get("addr:street", "")
    address = f"{street_number} {street}".strip() or ADDRESS_UNAVAILABLE

    return GasStation(
        name=tags.get("brand") or tags["name"],
        address=address,
        city=tags.get("addr:city") or UNKNOWN_CITY,
        state=_normalize_state(tags.get("addr:state")),
        zip_code=(tags.get("addr:postcode") or UNKNOWN_ZIP)[:10],
        latitude=float(lat),
        longitude=float(lon),
        brand=tags.get("brand"),
        osm_id=element.get("id"),
    )


class OverpassClient:
    """
    Overpass interpreter client.

    Example:
        >>> client = OverpassClient()
        >>> stations = client.find_gas_stations(40.7128, -74.0060, 3000)
    """

    def __init__(
        self,
        *,
        url: str = "https://overpass-api.de/api/interpreter",
        timeout: float = 30,
        delay: float = 1.0,
        user_agent: str = "EnergyDrinkFinder/1.0",
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.delay = delay
        self._sleep = sleep
        self.s = session or requests.Session()
        self.s.headers.update({
            "User-Agent": user_agent,
            "Accept": "application/json",
        })

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "OverpassClient":
        settings = settings or get_settings()
        return cls(
            url=settings.overpass_url,
            timeout=settings.http_timeout_seconds,
            delay=settings.overpass_delay_seconds,
            user_agent=settings.http_user_agent,
        )

    def _json(self, r: requests.Response) -> Any:
        if not r.ok:
            raise OverpassError(f"Overpass API error: {r.status_code} {r.reason}")
        try:
            return r.json()
        except ValueError as e:
            raise OverpassError(f"Invalid JSON from Overpass API: {e}") from e

    def find_gas_stations(
        self,
        latitude: float,
        longitude: float,
        radius_m: int = 5000
    ) -> List[GasStation]:
        """
        Query fuel stations within radius_m metres.

        Raises:
            OverpassError: Transport, HTTP or payload failure
        """
        if self.delay > 0:
            self._sleep(self.delay)

        query = build_fuel_query(latitude, longitude, radius_m)
        logger.info(f"🗺️ Overpass query: fuel within {radius_m}m of ({latitude}, {longitude})")

        try:
            r = self.s.post(self.url, data={"data": query}, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Overpass request failed: {e}")
            raise OverpassError(f"Overpass request failed: {e}") from e

        data = self._json(r)
        elements = data.get("elements") if isinstance(data, dict) else None
        if not isinstance(elements, list):
            raise OverpassError("Unexpected Overpass response format")

        stations = [
            station for station in (element_to_station(el) for el in elements)
            if station is not None
        ]

        logger.info(f"Found {len(stations)} named stations ({len(elements)} elements)")
        return stations

    def close(self) -> None:
        self.s.close()
