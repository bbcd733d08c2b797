# src/matchgate/services/access.py
"""Authorization decisions for photos and profile details.

Two separate policies share one set of relationship facts:

* photos are permissive, because the swipe UI loads pictures before any
  decision exists and the "who likes me" queue previews suitors;
* profile details require a match.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from matchgate.core.errors import AccessDenied
from matchgate.services.relationship import RelationshipState, RelationshipStateResolver

logger = logging.getLogger(__name__)


def photo_policy(state: RelationshipState) -> bool:
    """Return True if the facts allow viewing the target's photos.

    The only denial is a viewer who rejected the target and was not liked
    back.
    """
    return (
        state.is_self
        or state.is_matched
        or not state.viewer_has_swiped
        or state.viewer_swiped_right
        or state.target_swiped_right
    )


def profile_policy(state: RelationshipState) -> bool:
    """Return True if the facts allow reading the full profile."""
    return state.is_matched


class AccessGate:
    """Evaluates the photo and profile policies for a viewer/target pair."""

    def __init__(self, relationships: RelationshipStateResolver) -> None:
        self._relationships = relationships

    @classmethod
    def for_session(cls, db: Session) -> AccessGate:
        return cls(RelationshipStateResolver(db))

    def can_view_photo(self, viewer: str, target: str) -> bool:
        return photo_policy(self._relationships.state_of(viewer, target))

    def can_view_profile(self, viewer: str, target: str) -> bool:
        return profile_policy(self._relationships.state_of(viewer, target))

    def require_photo_access(self, viewer: str, target: str) -> None:
        """Raise ``AccessDenied`` unless the photo policy grants access."""
        if not self.can_view_photo(viewer, target):
            logger.info("Photo access denied by relationship state")
            raise AccessDenied("photo")

    def require_profile_access(self, viewer: str, target: str) -> None:
        """Raise ``AccessDenied`` unless the viewer is matched with the target."""
        if not self.can_view_profile(viewer, target):
            logger.debug("Profile access denied: pair is not matched")
            raise AccessDenied("profile")
