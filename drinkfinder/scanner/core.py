"""
==============================================================================
Barcode Decoder Core Module
==============================================================================

Barcode detection for uploaded images and camera frames.

Features:
---------
- base64 / data-URL image decoding via OpenCV
- ZBar decoding via pyzbar (UPC-A, EAN-13, EAN-8, ...)
- Catalog matching through a pluggable lookup (DrinkService.find_by_barcode)
- Overlay colour hints for the camera view:
  - green: barcode matches a catalog drink
  - red:   barcode unknown to the catalog

==============================================================================
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import cv2
import numpy as np
from pyzbar.pyzbar import decode


# Module logger
logger = logging.getLogger(__name__)


class ImageDecodeError(ValueError):
    """Raised when an uploaded image cannot be decoded."""


@dataclass
class Detection:
    """One barcode found in an image."""

    barcode: str
    symbology: str
    rect: Dict[str, int]
    drink: Optional[Dict[str, Any]] = None

    @property
    def matched(self) -> bool:
        return self.drink is not None

    @property
    def color(self) -> str:
        return "green" if self.matched else "red"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "barcode": self.barcode,
            "type": self.symbology,
            "rect": self.rect,
            "matched": self.matched,
            "color": self.color,
            "drink": self.drink,
        }


def image_from_base64(data: str) -> np.ndarray:
    """
    Decode a base64 (or data:image/...;base64,) string to an OpenCV image.

    Raises:
        ImageDecodeError: Invalid base64 or unreadable image data
    """
    if not data:
        raise ImageDecodeError("Image data is empty")

    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]

    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 image data: {e}") from e

    if not raw:
        raise ImageDecodeError("Image data is empty")

    frame = cv2.imdecode(np.frombuffer(raw, np.uint8), cv2.IMREAD_COLOR)
    if frame is None:
        raise ImageDecodeError("Could not decode image")

    return frame


class BarcodeDecoder:
    """
    Stateless barcode decoder with optional catalog lookup.

    Args:
        lookup: callable taking a barcode string and returning a drink dict
            (or None); typically wraps DrinkService.find_by_barcode

    Example:
        >>> decoder = BarcodeDecoder(lookup=lambda code: None)
        >>> detections = decoder.decode_base64(image_b64)
        >>> [d.barcode for d in detections]
        ['611269991000']
    """

    def __init__(self, lookup: Optional[Callable[[str], Optional[Dict[str, Any]]]] = None) -> None:
        self._lookup = lookup

    def detect(self, frame: np.ndarray) -> List[Detection]:
        """Find barcodes in an OpenCV image, de-duplicated per frame."""
        if frame is None or frame.size == 0:
            return []

        try:
            barcodes = decode(frame)
        except Exception as e:
            logger.error(f"Decode error: {e}")
            return []

        detections: List[Detection] = []
        seen = set()

        for barcode in barcodes:
            try:
                value = barcode.data.decode("utf-8").strip()
            except UnicodeDecodeError:
                logger.debug("Skipping barcode with non-UTF-8 payload")
                continue

            if not value or value in seen:
                continue
            seen.add(value)

            detections.append(Detection(
                barcode=value,
                symbology=barcode.type,
                rect={
                    "x": barcode.rect.left,
                    "y": barcode.rect.top,
                    "width": barcode.rect.width,
                    "height": barcode.rect.height,
                },
                drink=self._lookup(value) if self._lookup else None,
            ))

        return detections

    def decode_base64(self, data: str) -> List[Detection]:
        """Decode a base64 image and detect barcodes in it."""
        return self.detect(image_from_base64(data))
