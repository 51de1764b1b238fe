"""
==============================================================================
Common Schemas Module
==============================================================================

Shared response schemas used across API endpoints.

==============================================================================
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Simple message response."""
    success: bool = Field(default=True)
    message: str


def blank_to_none(v: Optional[str]) -> Optional[str]:
    """Strip a string; empty results become None."""
    if v is None:
        return None
    v = v.strip()
    return v or None


def require_text(v: Optional[str]) -> Optional[str]:
    """Strip a required string; blank raises, None passes through."""
    if v is None:
        return None
    v = v.strip()
    if not v:
        raise ValueError("Field cannot be blank")
    return v
