"""Bearer token helpers for the session/identity provider boundary."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import jwt

from matchgate.core.settings import settings


def create_access_token(identity: str) -> str:
    """Create a JWT whose subject is the caller's real identity."""
    to_encode: dict[str, object] = {"sub": identity}
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> str | None:
    """Return the subject of a valid token, or None when it carries none.

    Raises:
        jose.JWTError: If the token is malformed, expired or forged.
    """
    payload = jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.jwt_algorithm],
    )
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject
