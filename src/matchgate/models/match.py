# src/matchgate/models/match.py
"""Models describing mutual-consent matches."""

from datetime import datetime

from sqlalchemy import CheckConstraint, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from matchgate.db.session import Base
from matchgate.db.time import utcnow

# ASCII unit separator; cannot occur inside an account email.
PAIR_SEPARATOR = "\x1f"


def canonical_pair(a: str, b: str) -> tuple[str, str]:
    """Return the two identities in lexicographic order."""
    return (a, b) if a <= b else (b, a)


def pair_key(a: str, b: str) -> str:
    """Return the canonical key shared by both orderings of a pair."""
    return PAIR_SEPARATOR.join(canonical_pair(a, b))


class MatchRecord(Base):
    """Canonical record of mutual consent between two identities.

    The primary key doubles as the idempotency key for creation: a second
    insert for the same pair fails on the constraint instead of producing a
    second salt.
    """

    __tablename__ = "match_record"
    __table_args__ = (
        CheckConstraint("user_a < user_b", name="ck_match_record_sorted"),
    )

    pair_key: Mapped[str] = mapped_column(Text, primary_key=True)
    user_a: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    user_b: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    # 128 random bits, hex encoded; never updated after insert.
    salt: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    @property
    def users(self) -> tuple[str, str]:
        """Return both participants in canonical order."""
        return self.user_a, self.user_b

    def counterpart_of(self, identity: str) -> str:
        """Return the participant that is not ``identity``."""
        return self.user_b if identity == self.user_a else self.user_a
