# src/matchgate/schemas/message.py
"""Conversation message Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    """Schema for sending a message to a match."""

    text: str = Field(..., min_length=1, max_length=4000, description="Plaintext message body")


class MessageResponse(BaseModel):
    """A message as displayed to one of the two participants."""

    id: int
    sender_id: str = Field(..., description="Opaque id of the sender")
    from_self: bool
    text: str = Field(..., description="Decrypted text, or the stored body on a decryption miss")
    created_at: datetime
