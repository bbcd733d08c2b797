# src/matchgate/models/__init__.py
"""SQLAlchemy models for the matchgate service."""

from .match import MatchRecord, canonical_pair, pair_key
from .message import ConversationMessage
from .profile import Profile
from .swipe import SWIPE_LEFT, SWIPE_RIGHT, SwipeRecord

__all__ = [
    "MatchRecord", "canonical_pair", "pair_key",
    "ConversationMessage",
    "Profile",
    "SwipeRecord", "SWIPE_LEFT", "SWIPE_RIGHT",
]
