"""
==============================================================================
Geocode Schemas Module
==============================================================================

Address payload for POST /geocode.

==============================================================================
"""

from typing import Optional

from pydantic import BaseModel, Field


class GeocodeRequest(BaseModel):
    """Full address, components, or both."""
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    zip_code: Optional[str] = Field(default=None, max_length=20)
    country: Optional[str] = Field(default=None, max_length=100)
