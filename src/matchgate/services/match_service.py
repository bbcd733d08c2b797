# src/matchgate/services/match_service.py
"""Swipe recording and idempotent match creation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from matchgate.models import (
    SWIPE_LEFT,
    SWIPE_RIGHT,
    MatchRecord,
    SwipeRecord,
    canonical_pair,
    pair_key,
)
from matchgate.services.crypto import generate_salt

logger = logging.getLogger(__name__)

SWIPE_DIRECTIONS = frozenset({SWIPE_LEFT, SWIPE_RIGHT})


@dataclass(frozen=True)
class SwipeOutcome:
    """Result of recording a swipe."""

    matched: bool
    match: MatchRecord | None = None
    created: bool = False


class MatchService:
    """Records swipes and turns mutual right swipes into a single match."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def record_swipe(self, from_identity: str, to_identity: str, direction: str) -> SwipeOutcome:
        """Append a swipe and create the match if consent is now mutual.

        Raises:
            ValueError: On a self-swipe or an unknown direction.
        """
        if direction not in SWIPE_DIRECTIONS:
            raise ValueError(f"Unknown swipe direction: {direction!r}")
        if from_identity == to_identity:
            raise ValueError("Cannot swipe on yourself")

        self._db.add(
            SwipeRecord(
                from_identity=from_identity,
                to_identity=to_identity,
                direction=direction,
            )
        )
        self._db.commit()
        logger.debug("Recorded %s swipe", direction)

        if direction != SWIPE_RIGHT or not self._has_right_swipe(to_identity, from_identity):
            return SwipeOutcome(matched=False)

        match, created = self.ensure_match(from_identity, to_identity)
        return SwipeOutcome(matched=True, match=match, created=created)

    def _has_right_swipe(self, from_identity: str, to_identity: str) -> bool:
        return bool(
            self._db.scalar(
                select(
                    exists().where(
                        SwipeRecord.from_identity == from_identity,
                        SwipeRecord.to_identity == to_identity,
                        SwipeRecord.direction == SWIPE_RIGHT,
                    )
                )
            )
        )

    def ensure_match(self, a: str, b: str) -> tuple[MatchRecord, bool]:
        """Return the match for ``a`` and ``b``, creating it at most once.

        Store errors are retried once with the same pair key; constraint
        violations mean another request won the race and are not errors.
        """
        try:
            return self._get_or_insert(a, b)
        except OperationalError as err:
            self._db.rollback()
            logger.warning("Retrying match creation after store error: %s", err)
        return self._get_or_insert(a, b)

    def _get_or_insert(self, a: str, b: str) -> tuple[MatchRecord, bool]:
        existing = self._db.get(MatchRecord, pair_key(a, b))
        if existing is not None:
            return existing, False
        return self._insert_match(a, b)

    def _insert_match(self, a: str, b: str) -> tuple[MatchRecord, bool]:
        """Conditionally insert the match row keyed by the canonical pair."""
        key = pair_key(a, b)
        user_a, user_b = canonical_pair(a, b)
        record = MatchRecord(pair_key=key, user_a=user_a, user_b=user_b, salt=generate_salt())
        self._db.add(record)
        try:
            self._db.commit()
        except IntegrityError:
            self._db.rollback()
            winner = self._db.get(MatchRecord, key)
            if winner is None:
                raise
            logger.info("Match already created by a concurrent swipe")
            return winner, False
        logger.info("Match created")
        return record, True
