# src/matchgate/schemas/swipe.py
"""Swipe-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class SwipeCreate(BaseModel):
    """Schema for recording a swipe."""

    to: str = Field(..., min_length=1, description="Opaque id of the profile swiped on")
    direction: Literal["left", "right"] = Field(..., description="right = like, left = pass")


class SwipeResponse(BaseModel):
    """Outcome of a swipe."""

    success: bool = True
    matched: bool = Field(..., description="True if consent is now mutual")


class SwipedIdsResponse(BaseModel):
    """Profiles the caller has already decided on."""

    swiped_ids: list[str]
