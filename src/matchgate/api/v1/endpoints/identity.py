# src/matchgate/api/v1/endpoints/identity.py
"""Identity endpoints for the matchgate API."""

from fastapi import APIRouter

from matchgate.api.v1.dependencies import CurrentIdentityDep, ResolverDep
from matchgate.schemas.identity import IdentityResponse

router = APIRouter(prefix="/identity", tags=["identity"])


@router.get("/me", response_model=IdentityResponse)
async def get_own_identity(
    current_identity: CurrentIdentityDep,
    resolver: ResolverDep,
) -> IdentityResponse:
    """Return the opaque id other users see for the caller.

    Only the caller's own identity can be hashed here; hashing arbitrary
    identities would let clients test whether an account exists.
    """
    return IdentityResponse(id=resolver.opaque_for(current_identity))
