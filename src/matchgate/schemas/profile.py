# src/matchgate/schemas/profile.py
"""Profile-related Pydantic schemas."""

from pydantic import BaseModel, Field


class ProfileSummary(BaseModel):
    """Card-sized profile data keyed by opaque id."""

    id: str = Field(..., description="Opaque id of the profile owner")
    name: str
    age: int | None = None
    avatar_url: str | None = Field(None, description="Access-gated avatar path")


class ProfileDetail(ProfileSummary):
    """Full profile, only returned to matched users."""

    bio: str | None = None
    skills: list[str] = Field(default_factory=list)
    photo_urls: list[str] = Field(default_factory=list, description="Access-gated photo paths")
