# src/matchgate/models/profile.py
"""Profile rows read by the access-gated endpoints."""

from datetime import datetime

from sqlalchemy import JSON, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from matchgate.db.session import Base
from matchgate.db.time import utcnow


class Profile(Base):
    """Structured profile keyed by the owner's real identity.

    Photo columns hold object-store URLs; bytes are never stored here.
    """

    __tablename__ = "profile"

    identity: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    skills: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    photos: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    def photo_url(self, photo: str) -> str | None:
        """Return the URL for ``avatar`` or a zero-based photo index."""
        if photo == "avatar":
            return self.avatar_url
        try:
            index = int(photo)
        except ValueError:
            return None
        if index < 0 or index >= len(self.photos or []):
            return None
        return self.photos[index]
