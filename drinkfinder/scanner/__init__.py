"""
==============================================================================
Scanner Package
==============================================================================

pyzbar/OpenCV barcode decoding for uploaded images and camera frames.

==============================================================================
"""

from .core import BarcodeDecoder, Detection, ImageDecodeError, image_from_base64

__all__ = [
    "BarcodeDecoder",
    "Detection",
    "ImageDecodeError",
    "image_from_base64",
]
