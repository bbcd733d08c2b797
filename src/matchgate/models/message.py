# src/matchgate/models/message.py
"""Models for messages exchanged inside a match."""

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from matchgate.db.session import Base
from matchgate.db.time import utcnow


class ConversationMessage(Base):
    """A message in the conversation owned by a match.

    ``is_encrypted`` is NULL for rows written before encryption existed; such
    rows may hold plaintext or ciphertext.
    """

    __tablename__ = "conversation_message"
    __table_args__ = (
        Index("ix_conversation_message_thread", "pair_key", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pair_key: Mapped[str] = mapped_column(
        Text,
        ForeignKey("match_record.pair_key", ondelete="CASCADE"),
        nullable=False,
    )
    sender: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    is_encrypted: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
