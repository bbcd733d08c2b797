# src/matchgate/api/v1/endpoints/photos.py
"""Access-gated photo endpoints for the matchgate API."""

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import RedirectResponse

from matchgate.api.v1.dependencies import (
    CurrentIdentityDep,
    ResolverDep,
    SessionDep,
    resolve_or_raise,
)
from matchgate.models import Profile
from matchgate.services.access import AccessGate
from matchgate.services.relationship import RelationshipScope

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/photos", tags=["photos"])


@router.get("/{opaque_id}/{photo}", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
async def get_photo(
    opaque_id: str,
    photo: str,
    current_identity: CurrentIdentityDep,
    db: SessionDep,
    resolver: ResolverDep,
) -> RedirectResponse:
    """Redirect to a profile photo in the object store if the viewer may see it.

    ``photo`` is ``avatar`` or a zero-based index into the profile's photos.
    Unknown profiles and denials produce the same response.
    """
    target = resolve_or_raise(resolver, opaque_id, RelationshipScope.browsing(db, current_identity))
    AccessGate.for_session(db).require_photo_access(current_identity, target)

    profile = db.get(Profile, target)
    url = profile.photo_url(photo) if profile is not None else None
    if url is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")

    logger.info(
        "Photo access: %s -> %s (%s)",
        resolver.opaque_for(current_identity),
        opaque_id,
        photo,
    )
    return RedirectResponse(url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
