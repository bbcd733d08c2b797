# src/matchgate/schemas/identity.py
"""Identity-related Pydantic schemas."""

from pydantic import BaseModel, Field


class IdentityResponse(BaseModel):
    """The caller's own public identifier."""

    id: str = Field(..., description="Opaque id other users know the caller by")
