# src/matchgate/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .identity import router as identity_router
from .messages import router as messages_router
from .photos import router as photos_router
from .profiles import router as profiles_router
from .swipes import router as swipes_router

__all__ = [
    "identity_router",
    "messages_router",
    "photos_router",
    "profiles_router",
    "swipes_router",
]
