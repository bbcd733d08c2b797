# src/matchgate/services/__init__.py
"""Business logic services for the matchgate service."""

from .access import AccessGate
from .conversation import ConversationService
from .crypto import ConversationKeyDeriver, MessageCipher
from .identity import IdentityHasher, IdentityResolver
from .match_service import MatchService
from .relationship import RelationshipScope, RelationshipStateResolver

__all__ = [
    "AccessGate",
    "ConversationKeyDeriver",
    "ConversationService",
    "IdentityHasher",
    "IdentityResolver",
    "MatchService",
    "MessageCipher",
    "RelationshipScope",
    "RelationshipStateResolver",
]
