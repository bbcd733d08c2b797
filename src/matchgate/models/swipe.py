# src/matchgate/models/swipe.py
"""Models capturing one-directional swipe decisions."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from matchgate.db.session import Base
from matchgate.db.time import utcnow

SWIPE_LEFT = "left"
SWIPE_RIGHT = "right"


class SwipeRecord(Base):
    """Preference expressed by one identity toward another.

    Rows are append-only: a later swipe adds a row, it never edits one.
    """

    __tablename__ = "swipe_record"
    __table_args__ = (
        CheckConstraint("direction IN ('left', 'right')", name="ck_swipe_record_direction"),
        CheckConstraint("from_identity <> to_identity", name="ck_swipe_record_not_self"),
        Index("ix_swipe_record_pair", "from_identity", "to_identity"),
        Index("ix_swipe_record_inbound", "to_identity", "direction"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    from_identity: Mapped[str] = mapped_column(Text, nullable=False)
    to_identity: Mapped[str] = mapped_column(Text, nullable=False)
    direction: Mapped[str] = mapped_column(String(5), nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
