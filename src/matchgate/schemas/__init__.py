"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .identity import IdentityResponse
from .message import MessageCreate, MessageResponse
from .profile import ProfileDetail, ProfileSummary
from .swipe import SwipeCreate, SwipedIdsResponse, SwipeResponse

__all__ = [
    "IdentityResponse",
    "MessageCreate", "MessageResponse",
    "ProfileDetail", "ProfileSummary",
    "SwipeCreate", "SwipedIdsResponse", "SwipeResponse",
]
