"""
==============================================================================
Geocoding Endpoints
==============================================================================

Address → coordinates through the configured geocoding provider.

Query Building:
--------------
    address only              ──▶ sent verbatim
    any city/state/zip given  ──▶ "address city state zip country"
    nothing                   ──▶ 400 MISSING_ADDRESS

==============================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from drinkfinder.clients.geocoding import (
    AddressComponents,
    AddressNotFoundError,
    GeocodingClient,
    GeocodingConfigurationError,
    GeocodingError,
)
from drinkfinder.core import exceptions
from drinkfinder.core.dependencies import get_geocoding_client
from drinkfinder.schemas.geocode import GeocodeRequest


router = APIRouter(prefix="/geocode", tags=["Geocoding"])


class GeocodeController:
    """Controller for geocoding operations."""

    def __init__(self, client: GeocodingClient):
        self._client = client

    @staticmethod
    def build_address(components: AddressComponents):
        """Full address alone is passed through; otherwise use components."""
        if not components.has_data():
            raise exceptions.missing_address()

        has_parts = any(
            (value or "").strip()
            for value in (components.city, components.state, components.zip_code)
        )
        if components.address and not has_parts:
            return components.address.strip()
        return components

    def geocode(self, components: AddressComponents) -> dict:
        address = self.build_address(components)

        try:
            result = self._client.geocode(address)
        except GeocodingConfigurationError as e:
            raise exceptions.geocoding_failed(str(e))
        except AddressNotFoundError as e:
            raise exceptions.address_not_found(e.query)
        except GeocodingError as e:
            raise exceptions.geocoding_failed(str(e))
        except ValueError:
            raise exceptions.missing_address()

        return {
            "success": True,
            "message": "Address successfully geocoded",
            "data": result.to_dict()
        }


@router.get("")
def geocode_address(
    q: Optional[str] = Query(None, max_length=500),
    address: Optional[str] = Query(None, max_length=500),
    city: Optional[str] = Query(None, max_length=100),
    state: Optional[str] = Query(None, max_length=100),
    zip: Optional[str] = Query(None, max_length=20),
    zip_code: Optional[str] = Query(None, max_length=20),
    country: Optional[str] = Query(None, max_length=100),
    client: GeocodingClient = Depends(get_geocoding_client)
):
    """Geocode an address given as `q`/`address` or as components."""
    components = AddressComponents(
        address=q or address,
        city=city,
        state=state,
        zip_code=zip or zip_code,
        country=country,
    )
    controller = GeocodeController(client)
    return controller.geocode(components)


@router.post("")
def geocode_address_body(
    data: GeocodeRequest,
    client: GeocodingClient = Depends(get_geocoding_client)
):
    """Geocode an address from a JSON body."""
    components = AddressComponents(**data.model_dump())
    controller = GeocodeController(client)
    return controller.geocode(components)
