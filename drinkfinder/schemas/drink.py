"""
==============================================================================
Energy Drink Schemas Module
==============================================================================

Request schemas for catalog management.

==============================================================================
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from drinkfinder.schemas.common import blank_to_none, require_text


class DrinkCreate(BaseModel):
    """New catalog entry; (brand, flavor, size_ml) must be unique."""
    brand: str = Field(..., min_length=1, max_length=100)
    flavor: str = Field(..., min_length=1, max_length=100)
    size_ml: int = Field(..., gt=0, le=5000)
    caffeine_mg: Optional[int] = Field(default=None, ge=0, le=2000)
    sugar_g: Optional[float] = Field(default=None, ge=0, lt=1000)
    calories: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None, max_length=500)
    barcode: Optional[str] = Field(default=None, max_length=20)

    @field_validator("brand", "flavor")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return require_text(v)

    @field_validator("barcode", "description", "image_url")
    @classmethod
    def empty_is_null(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class DrinkUpdate(BaseModel):
    """Partial update; only fields that are sent are changed."""
    brand: Optional[str] = Field(default=None, min_length=1, max_length=100)
    flavor: Optional[str] = Field(default=None, min_length=1, max_length=100)
    size_ml: Optional[int] = Field(default=None, gt=0, le=5000)
    caffeine_mg: Optional[int] = Field(default=None, ge=0, le=2000)
    sugar_g: Optional[float] = Field(default=None, ge=0, lt=1000)
    calories: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None, max_length=500)
    barcode: Optional[str] = Field(default=None, max_length=20)

    @field_validator("brand", "flavor")
    @classmethod
    def strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        return require_text(v)

    @field_validator("barcode", "description", "image_url")
    @classmethod
    def empty_is_null(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)
