# src/matchgate/api/v1/endpoints/profiles.py
"""Profile detail endpoints for the matchgate API."""

from fastapi import APIRouter, HTTPException, status

from matchgate.api.v1.dependencies import (
    CurrentIdentityDep,
    ResolverDep,
    SessionDep,
    photo_path,
    resolve_or_raise,
)
from matchgate.models import Profile
from matchgate.schemas.profile import ProfileDetail
from matchgate.services.access import AccessGate
from matchgate.services.relationship import RelationshipScope

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/{opaque_id}", response_model=ProfileDetail)
async def get_profile(
    opaque_id: str,
    current_identity: CurrentIdentityDep,
    db: SessionDep,
    resolver: ResolverDep,
) -> ProfileDetail:
    """Return a matched user's full profile."""
    target = resolve_or_raise(resolver, opaque_id, RelationshipScope.matched(db, current_identity))
    AccessGate.for_session(db).require_profile_access(current_identity, target)

    profile = db.get(Profile, target)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    return ProfileDetail(
        id=opaque_id,
        name=profile.name,
        age=profile.age,
        bio=profile.bio,
        skills=list(profile.skills or []),
        avatar_url=photo_path(opaque_id, "avatar") if profile.avatar_url else None,
        photo_urls=[photo_path(opaque_id, index) for index in range(len(profile.photos or []))],
    )
