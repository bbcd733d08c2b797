"""Shared API dependencies for authentication and common functionality."""

from collections.abc import Iterable
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from matchgate.core.errors import IdentityNotFound
from matchgate.core.security import decode_access_token
from matchgate.db.session import get_db
from matchgate.services.identity import IdentityResolver, get_identity_resolver

API_PREFIX = "/api/v1"

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
) -> str:
    """Return the caller's real identity from the session token.

    The session provider is trusted: the subject is not looked up anywhere.

    Raises:
        HTTPException: If the token is invalid or carries no subject.
    """
    try:
        subject = decode_access_token(credentials.credentials)
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return subject


def get_identity_resolver_dep() -> IdentityResolver:
    return get_identity_resolver()


CurrentIdentityDep = Annotated[str, Depends(get_current_identity)]
ResolverDep = Annotated[IdentityResolver, Depends(get_identity_resolver_dep)]


def resolve_or_raise(resolver: IdentityResolver, opaque_id: str, scope: Iterable[str]) -> str:
    """Resolve ``opaque_id`` within ``scope`` or raise ``IdentityNotFound``."""
    identity = resolver.resolve(opaque_id, scope)
    if identity is None:
        raise IdentityNotFound(opaque_id)
    return identity


def photo_path(opaque_id: str, photo: str | int) -> str:
    """Return the access-gated path serving one of a profile's photos."""
    return f"{API_PREFIX}/photos/{opaque_id}/{photo}"
