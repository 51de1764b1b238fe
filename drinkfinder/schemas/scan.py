"""
==============================================================================
Scan Schemas Module
==============================================================================

Request schemas for barcode scans and image decoding.

A scan identifies its store either directly (store_id) or by the
scanner's position (latitude + longitude → nearest store). Presence
checks are done by ScanService so they map to MISSING_BARCODE /
MISSING_LOCATION rather than generic validation errors.

==============================================================================
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ScanRequest(BaseModel):
    """Inventory report for one scanned barcode."""
    barcode: Optional[str] = Field(default=None, max_length=32)
    store_id: Optional[int] = Field(default=None, gt=0)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    price: Optional[float] = Field(default=None, ge=0, lt=10000)
    in_stock: Optional[bool] = Field(default=None)

    @field_validator("barcode")
    @classmethod
    def strip_barcode(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class DecodeRequest(BaseModel):
    """Base64-encoded image, optionally a data: URL."""
    image: str = Field(..., min_length=1)
