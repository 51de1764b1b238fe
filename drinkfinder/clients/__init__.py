"""
==============================================================================
External API Clients
==============================================================================

- geocoding: geocode.maps.co address search
- overpass: OpenStreetMap Overpass fuel station search

==============================================================================
"""

from .geocoding import (
    AddressComponents,
    AddressNotFoundError,
    GeocodeResult,
    GeocodingClient,
    GeocodingConfigurationError,
    GeocodingError,
)
from .overpass import GasStation, OverpassClient, OverpassError

__all__ = [
    "AddressComponents",
    "AddressNotFoundError",
    "GeocodeResult",
    "GeocodingClient",
    "GeocodingConfigurationError",
    "GeocodingError",
    "GasStation",
    "OverpassClient",
    "OverpassError",
]
