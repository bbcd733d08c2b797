# src/matchgate/services/relationship.py
"""Relationship facts derived from swipe and match records."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from sqlalchemy import exists, or_, select
from sqlalchemy.orm import Session

from matchgate.models import SWIPE_RIGHT, MatchRecord, Profile, SwipeRecord, pair_key


@dataclass(frozen=True)
class RelationshipState:
    """Facts about how a viewer relates to a target.

    The facts overlap (a viewer can have swiped right and be liked back
    before the match row exists), so access policies OR them together.
    """

    is_self: bool = False
    is_matched: bool = False
    viewer_swiped_right: bool = False
    target_swiped_right: bool = False
    viewer_has_swiped: bool = False


class RelationshipStateResolver:
    """Computes ``RelationshipState`` from the current records, per request."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def is_matched(self, a: str, b: str) -> bool:
        return self._db.get(MatchRecord, pair_key(a, b)) is not None

    def state_of(self, viewer: str, target: str) -> RelationshipState:
        if viewer == target:
            return RelationshipState(is_self=True)

        is_matched = self.is_matched(viewer, target)
        viewer_directions = set(
            self._db.scalars(
                select(SwipeRecord.direction).where(
                    SwipeRecord.from_identity == viewer,
                    SwipeRecord.to_identity == target,
                )
            )
        )
        target_swiped_right = bool(
            self._db.scalar(
                select(
                    exists().where(
                        SwipeRecord.from_identity == target,
                        SwipeRecord.to_identity == viewer,
                        SwipeRecord.direction == SWIPE_RIGHT,
                    )
                )
            )
        )
        return RelationshipState(
            is_matched=is_matched,
            viewer_has_swiped=bool(viewer_directions),
            viewer_swiped_right=SWIPE_RIGHT in viewer_directions and not is_matched,
            target_swiped_right=target_swiped_right,
        )


def matches_of(db: Session, identity: str) -> list[MatchRecord]:
    """Return every match ``identity`` takes part in, oldest first."""
    return list(
        db.scalars(
            select(MatchRecord)
            .where(or_(MatchRecord.user_a == identity, MatchRecord.user_b == identity))
            .order_by(MatchRecord.created_at)
        )
    )


def admirers_of(db: Session, identity: str) -> list[str]:
    """Return identities that swiped right on ``identity`` and are not matched with it."""
    likers = db.scalars(
        select(SwipeRecord.from_identity)
        .where(
            SwipeRecord.to_identity == identity,
            SwipeRecord.direction == SWIPE_RIGHT,
        )
        .order_by(SwipeRecord.created_at)
    )
    admirers: list[str] = []
    for liker in dict.fromkeys(likers):
        if db.get(MatchRecord, pair_key(identity, liker)) is None:
            admirers.append(liker)
    return admirers


def swiped_by(db: Session, identity: str) -> list[str]:
    """Return the distinct identities ``identity`` has swiped on, oldest first."""
    targets = db.scalars(
        select(SwipeRecord.to_identity)
        .where(SwipeRecord.from_identity == identity)
        .order_by(SwipeRecord.created_at)
    )
    return list(dict.fromkeys(targets))


class RelationshipScope:
    """The identities a viewer may resolve opaque ids into.

    Iteration yields the viewer first, then matched counterparts, then
    (optionally) swipe counterparts in either direction, then (optionally)
    every other profile. Membership checks run one query per enabled source.
    """

    def __init__(
        self,
        db: Session,
        viewer: str,
        *,
        counterparts: bool = False,
        profiles: bool = False,
    ) -> None:
        self._db = db
        self._viewer = viewer
        self._counterparts = counterparts
        self._profiles = profiles

    @classmethod
    def matched(cls, db: Session, viewer: str) -> RelationshipScope:
        """Scope for authorization-sensitive reads: matched counterparts only."""
        return cls(db, viewer)

    @classmethod
    def counterparts(cls, db: Session, viewer: str) -> RelationshipScope:
        """Matched counterparts plus anyone with a swipe to or from the viewer."""
        return cls(db, viewer, counterparts=True)

    @classmethod
    def browsing(cls, db: Session, viewer: str) -> RelationshipScope:
        """Counterparts followed by the rest of the profile directory."""
        return cls(db, viewer, counterparts=True, profiles=True)

    def _iter_sources(self) -> Iterator[str]:
        yield self._viewer
        for match in matches_of(self._db, self._viewer):
            yield match.counterpart_of(self._viewer)
        if self._counterparts:
            yield from swiped_by(self._db, self._viewer)
            yield from self._db.scalars(
                select(SwipeRecord.from_identity)
                .where(SwipeRecord.to_identity == self._viewer)
                .distinct()
            )
        if self._profiles:
            yield from self._db.scalars(
                select(Profile.identity)
                .where(Profile.identity != self._viewer)
                .order_by(Profile.created_at)
            )

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for identity in self._iter_sources():
            if identity not in seen:
                seen.add(identity)
                yield identity

    def __contains__(self, identity: object) -> bool:
        if not isinstance(identity, str):
            return False
        if identity == self._viewer:
            return True
        if self._db.get(MatchRecord, pair_key(self._viewer, identity)) is not None:
            return True
        if self._counterparts:
            linked = self._db.scalar(
                select(
                    exists().where(
                        or_(
                            (SwipeRecord.from_identity == self._viewer)
                            & (SwipeRecord.to_identity == identity),
                            (SwipeRecord.from_identity == identity)
                            & (SwipeRecord.to_identity == self._viewer),
                        )
                    )
                )
            )
            if linked:
                return True
        if self._profiles:
            return self._db.get(Profile, identity) is not None
        return False
