"""
==============================================================================
Catalog Record Models
==============================================================================

Pydantic models for drinks read from ingestion files.

JSON Structure:
--------------
[
  {"brand": "Monster", "flavor": "Ultra Paradise", "upc": "070847033301"},
  {"brand": "Red Bull", "flavor": "Original", "upc": null},
  ...
]

Size/caffeine heuristics:
------------------------
    Red Bull                      250 ml,  80 mg
    Celsius, Alani Nu             355 ml, 200 mg
    flavor mentions 12oz/12-pack  355 ml, 300 mg
    anything else                 473 ml, 300 mg

==============================================================================
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_SIZE_ML = 473
DEFAULT_CAFFEINE_MG = 300

# brand -> (size_ml, caffeine_mg)
BRAND_SPECS = {
    "Red Bull": (250, 80),
    "Celsius": (355, 200),
    "Alani Nu": (355, 200),
}

TWELVE_OUNCE_MARKERS = ("12oz", "12-pack")
TWELVE_OUNCE_ML = 355


def normalize_barcode(value: Optional[str]) -> Optional[str]:
    """
    Strip whitespace and leading zeros from a UPC.

    Returns None for missing, blank or all-zero input.
    """
    if value is None:
        return None
    stripped = str(value).strip().lstrip("0")
    return stripped or None


def estimate_specs(brand: str, flavor: str) -> Tuple[int, int]:
    """Best-guess (size_ml, caffeine_mg) from brand conventions."""
    if brand in BRAND_SPECS:
        return BRAND_SPECS[brand]

    if any(marker in flavor for marker in TWELVE_OUNCE_MARKERS):
        return TWELVE_OUNCE_ML, DEFAULT_CAFFEINE_MG

    return DEFAULT_SIZE_ML, DEFAULT_CAFFEINE_MG


class DrinkRecord(BaseModel):
    """
    One drink from an ingestion file.

    Attributes:
        brand: Brand name (e.g. "Monster")
        flavor: Flavor / product line
        upc: Barcode as printed, possibly zero-padded
    """

    model_config = ConfigDict(extra="ignore")

    brand: str = Field(..., min_length=1, max_length=100, description="Brand name")
    flavor: str = Field(..., min_length=1, max_length=100, description="Flavor name")
    upc: Optional[str] = Field(default=None, description="UPC-A / EAN-13 barcode")

    @field_validator("brand", "flavor")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("upc", mode="before")
    @classmethod
    def coerce_upc(cls, v):
        # Some exports store UPCs as numbers
        if isinstance(v, int):
            return str(v)
        return v

    @property
    def barcode(self) -> Optional[str]:
        return normalize_barcode(self.upc)

    @property
    def specs(self) -> Tuple[int, int]:
        return estimate_specs(self.brand, self.flavor)

    @property
    def description(self) -> str:
        return f"{self.brand} {self.flavor} energy drink"
