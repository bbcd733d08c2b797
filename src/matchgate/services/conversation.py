# src/matchgate/services/conversation.py
"""Storing and reading messages inside a match."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from matchgate.models import ConversationMessage, MatchRecord
from matchgate.services.crypto import (
    ConversationKeyDeriver,
    decrypt_for_conversation,
    encrypt_for_conversation,
    get_key_deriver,
    looks_encrypted,
)


class ConversationService:
    """Encrypts outgoing messages and renders stored ones for display."""

    def __init__(self, db: Session, deriver: ConversationKeyDeriver | None = None) -> None:
        self._db = db
        self._deriver = deriver or get_key_deriver()

    def send(self, match: MatchRecord, sender: str, text: str) -> ConversationMessage:
        """Encrypt ``text`` under the match's key and store it."""
        recipient = match.counterpart_of(sender)
        body = encrypt_for_conversation(text, sender, recipient, match.salt, self._deriver)
        message = ConversationMessage(
            pair_key=match.pair_key,
            sender=sender,
            body=body,
            is_encrypted=True,
        )
        self._db.add(message)
        self._db.commit()
        self._db.refresh(message)
        return message

    def history(self, match: MatchRecord, limit: int = 100) -> Sequence[ConversationMessage]:
        """Return the latest ``limit`` messages, oldest first."""
        rows = self._db.scalars(
            select(ConversationMessage)
            .where(ConversationMessage.pair_key == match.pair_key)
            .order_by(ConversationMessage.created_at.desc(), ConversationMessage.id.desc())
            .limit(limit)
        ).all()
        return list(reversed(rows))

    def render(self, match: MatchRecord, message: ConversationMessage) -> str:
        """Return the displayable text of ``message``.

        An explicit ``is_encrypted`` flag decides whether to decrypt. Legacy
        rows without the flag are decrypted only when they look like
        ciphertext. Any decryption miss yields the stored body unchanged.
        """
        if message.is_encrypted is False:
            return message.body
        if message.is_encrypted is None and not looks_encrypted(message.body):
            return message.body
        return decrypt_for_conversation(
            message.body,
            match.user_a,
            match.user_b,
            match.salt,
            self._deriver,
        )
