"""
==============================================================================
Schemas Package
==============================================================================

Pydantic request/response schemas for the API.

==============================================================================
"""

from .common import MessageResponse
from .drink import DrinkCreate, DrinkUpdate
from .store import DiscoverRequest, StoreCreate, StoreUpdate
from .scan import DecodeRequest, ScanRequest
from .geocode import GeocodeRequest

__all__ = [
    "MessageResponse",
    "DrinkCreate",
    "DrinkUpdate",
    "DiscoverRequest",
    "StoreCreate",
    "StoreUpdate",
    "DecodeRequest",
    "ScanRequest",
    "GeocodeRequest",
]
