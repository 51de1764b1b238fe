"""
==============================================================================
Store Schemas Module
==============================================================================

Request schemas for store management and store discovery.

==============================================================================
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from drinkfinder.schemas.common import blank_to_none, require_text


class StoreCreate(BaseModel):
    """New retail location."""
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(default="", max_length=2)
    zip_code: str = Field(..., min_length=1, max_length=10)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    phone: Optional[str] = Field(default=None, max_length=20)
    hours_json: Optional[Dict[str, Any]] = Field(default=None)

    @field_validator("name", "address", "city", "zip_code")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return require_text(v)

    @field_validator("state")
    @classmethod
    def upper_state(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("phone")
    @classmethod
    def empty_is_null(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class StoreUpdate(BaseModel):
    """Partial store update."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    address: Optional[str] = Field(default=None, min_length=1, max_length=500)
    city: Optional[str] = Field(default=None, min_length=1, max_length=100)
    state: Optional[str] = Field(default=None, max_length=2)
    zip_code: Optional[str] = Field(default=None, min_length=1, max_length=10)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    phone: Optional[str] = Field(default=None, max_length=20)
    hours_json: Optional[Dict[str, Any]] = Field(default=None)

    @field_validator("name", "address", "city", "zip_code")
    @classmethod
    def strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        return require_text(v)

    @field_validator("state")
    @classmethod
    def upper_state(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v is not None else v


class DiscoverRequest(BaseModel):
    """Fuel station discovery around a point."""
    model_config = ConfigDict(populate_by_name=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    radius: int = Field(default=5000, gt=0, le=50000, description="Search radius in metres")
    auto_import: bool = Field(default=False, alias="autoImport")
