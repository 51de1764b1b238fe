"""
==============================================================================
Geocoding Client Module
==============================================================================

Thin client for the geocode.maps.co search API (address → coordinates).

Query building:
--------------
    "123 Main St, New York"           → sent verbatim
    {city: "Austin", state: "TX"}     → "Austin TX US"

Errors:
------
    GeocodingConfigurationError  no API key configured
    AddressNotFoundError         provider returned zero results
    GeocodingError               HTTP error / transport failure / bad payload

==============================================================================
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import requests

from drinkfinder.config import Settings, get_settings


# Module logger
logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Geocoding provider failure."""


class GeocodingConfigurationError(GeocodingError):
    """Raised when no API key is configured."""


class AddressNotFoundError(GeocodingError):
    """Raised when the provider has no match for the query."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"No results found for address: {query}")


@dataclass
class AddressComponents:
    """Structured address; any field may be missing."""

    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None

    def has_data(self) -> bool:
        return any(
            (value or "").strip()
            for value in (self.address, self.city, self.state, self.zip_code)
        )

    def to_query(self) -> str:
        parts = [self.address, self.city, self.state, self.zip_code, self.country or "US"]
        return " ".join(part.strip() for part in parts if part and part.strip())


@dataclass
class GeocodeResult:
    latitude: float
    longitude: float
    display_name: Optional[str] = None
    boundingbox: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "display_name": self.display_name,
            "boundingbox": self.boundingbox,
        }


def build_query(address: Union[str, AddressComponents]) -> str:
    """Turn a full address or its components into the provider query string."""
    if isinstance(address, AddressComponents):
        return address.to_query()
    return (address or "").strip()


class GeocodingClient:
    """
    geocode.maps.co client with a shared requests.Session.

    Example:
        >>> client = GeocodingClient(api_key="...")
        >>> client.geocode("350 5th Ave New York NY")
        GeocodeResult(latitude=40.748..., longitude=-73.985..., ...)
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = "https://geocode.maps.co/search",
        timeout: float = 30,
        user_agent: str = "EnergyDrinkFinder/1.0",
        batch_delay: float = 0.6,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.batch_delay = batch_delay
        self.s = session or requests.Session()
        self.s.headers.update({
            "User-Agent": user_agent,
            "Accept": "application/json",
        })

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "GeocodingClient":
        settings = settings or get_settings()
        return cls(
            settings.geocoding_api_key,
            base_url=settings.geocoding_base_url,
            timeout=settings.http_timeout_seconds,
            user_agent=settings.http_user_agent,
            batch_delay=settings.geocode_batch_delay_seconds,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _json(self, r: requests.Response) -> Any:
        if not r.ok:
            preview = (r.text or "")[:200]
            raise GeocodingError(f"Geocoding API error: {r.status_code} {r.reason} - {preview}")
        try:
            return r.json()
        except ValueError as e:
            raise GeocodingError(f"Invalid JSON from geocoding API: {e}") from e

    def geocode(self, address: Union[str, AddressComponents]) -> GeocodeResult:
        """
        Resolve an address to the provider's most relevant candidate.

        Raises:
            GeocodingConfigurationError: No API key
            ValueError: Empty query
            AddressNotFoundError: Zero results
            GeocodingError: Any other provider failure
        """
        if not self.is_configured:
            raise GeocodingConfigurationError("GEOCODING_API_KEY is not configured")

        query = build_query(address)
        if not query:
            raise ValueError("Address cannot be empty")

        try:
            r = self.s.get(
                self.base_url,
                params={"q": query, "api_key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Geocoding request failed for {query!r}: {e}")
            raise GeocodingError(f"Geocoding request failed: {e}") from e

        data = self._json(r)
        if not data:
            raise AddressNotFoundError(query)
        if not isinstance(data, list):
            raise GeocodingError("Unexpected geocoding response format")

        first = data[0]
        try:
            result = GeocodeResult(
                latitude=float(first["lat"]),
                longitude=float(first["lon"]),
                display_name=first.get("display_name"),
                boundingbox=list(first.get("boundingbox") or []),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Malformed geocoding result: {e}") from e

        logger.debug(f"Geocoded {query!r} -> ({result.latitude}, {result.longitude})")
        return result

    def batch_geocode(
        self,
        addresses: Sequence[Union[str, AddressComponents]],
        delay: Optional[float] = None,
    ) -> List[Optional[GeocodeResult]]:
        """
        Geocode sequentially with a fixed delay between requests.

        Failed items yield None; the batch always runs to completion.
        """
        delay = self.batch_delay if delay is None else delay
        results: List[Optional[GeocodeResult]] = []

        for index, address in enumerate(addresses):
            if index > 0 and delay > 0:
                time.sleep(delay)
            try:
                results.append(self.geocode(address))
            except (GeocodingError, ValueError) as e:
                logger.warning(f"Failed to geocode address #{index}: {e}")
                results.append(None)

        return results

    def close(self) -> None:
        self.s.close()
