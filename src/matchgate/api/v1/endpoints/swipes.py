# src/matchgate/api/v1/endpoints/swipes.py
"""Swipe, match and discovery endpoints for the matchgate API."""

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import select

from matchgate.api.v1.dependencies import (
    CurrentIdentityDep,
    ResolverDep,
    SessionDep,
    photo_path,
    resolve_or_raise,
)
from matchgate.models import Profile, SwipeRecord
from matchgate.schemas.profile import ProfileSummary
from matchgate.schemas.swipe import SwipeCreate, SwipedIdsResponse, SwipeResponse
from matchgate.services.identity import IdentityResolver
from matchgate.services.match_service import MatchService
from matchgate.services.relationship import (
    RelationshipScope,
    admirers_of,
    matches_of,
    swiped_by,
)

router = APIRouter(tags=["swipes"])


def _summary(resolver: IdentityResolver, profile: Profile) -> ProfileSummary:
    opaque_id = resolver.opaque_for(profile.identity)
    return ProfileSummary(
        id=opaque_id,
        name=profile.name,
        age=profile.age,
        avatar_url=photo_path(opaque_id, "avatar") if profile.avatar_url else None,
    )


@router.post("/swipes", response_model=SwipeResponse)
async def record_swipe(
    payload: SwipeCreate,
    current_identity: CurrentIdentityDep,
    db: SessionDep,
    resolver: ResolverDep,
) -> SwipeResponse:
    """Record a swipe on a profile and report whether it produced a match."""
    target = resolve_or_raise(resolver, payload.to, RelationshipScope.browsing(db, current_identity))
    try:
        outcome = MatchService(db).record_swipe(current_identity, target, payload.direction)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    return SwipeResponse(matched=outcome.matched)


@router.get("/swipes", response_model=SwipedIdsResponse)
async def list_swiped(
    current_identity: CurrentIdentityDep,
    db: SessionDep,
    resolver: ResolverDep,
) -> SwipedIdsResponse:
    """Return opaque ids of every profile the caller has swiped on."""
    return SwipedIdsResponse(
        swiped_ids=[resolver.opaque_for(target) for target in swiped_by(db, current_identity)]
    )


@router.get("/matches", response_model=list[ProfileSummary])
async def list_matches(
    current_identity: CurrentIdentityDep,
    db: SessionDep,
    resolver: ResolverDep,
) -> list[ProfileSummary]:
    """Return the caller's matches."""
    summaries: list[ProfileSummary] = []
    for match in matches_of(db, current_identity):
        profile = db.get(Profile, match.counterpart_of(current_identity))
        if profile is not None:
            summaries.append(_summary(resolver, profile))
    return summaries


@router.get("/likes", response_model=list[ProfileSummary])
async def list_likes(
    current_identity: CurrentIdentityDep,
    db: SessionDep,
    resolver: ResolverDep,
) -> list[ProfileSummary]:
    """Return users who liked the caller and are not matched with them yet."""
    summaries: list[ProfileSummary] = []
    for admirer in admirers_of(db, current_identity):
        profile = db.get(Profile, admirer)
        if profile is None:
            summaries.append(ProfileSummary(id=resolver.opaque_for(admirer), name="Unknown User"))
        else:
            summaries.append(_summary(resolver, profile))
    return summaries


@router.get("/discover", response_model=list[ProfileSummary])
async def discover(
    current_identity: CurrentIdentityDep,
    db: SessionDep,
    resolver: ResolverDep,
    limit: int = Query(20, ge=1, le=100),
) -> list[ProfileSummary]:
    """Return profiles the caller has not decided on yet."""
    already_swiped = select(SwipeRecord.to_identity).where(
        SwipeRecord.from_identity == current_identity
    )
    profiles = db.scalars(
        select(Profile)
        .where(
            Profile.identity != current_identity,
            Profile.identity.not_in(already_swiped),
        )
        .order_by(Profile.created_at)
        .limit(limit)
    )
    return [_summary(resolver, profile) for profile in profiles]
