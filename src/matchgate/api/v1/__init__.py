# src/matchgate/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    identity_router,
    messages_router,
    photos_router,
    profiles_router,
    swipes_router,
)

__all__ = [
    "identity_router",
    "messages_router",
    "photos_router",
    "profiles_router",
    "swipes_router",
]
