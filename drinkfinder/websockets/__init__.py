"""
==============================================================================
WebSocket Package
==============================================================================

- scanner: /ws/scan camera scanning sessions

==============================================================================
"""

from .scanner import router as scanner_router

__all__ = ["scanner_router"]
