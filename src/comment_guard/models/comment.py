# src/comment_guard/models/comment.py
"""SQLAlchemy model for moderated comments."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from comment_guard.core.moderation import CommentStatus, Flag
from comment_guard.db.session import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Comment(Base):
    """A user-submitted comment and the outcome of its moderation.

    Author identity is denormalized onto the row; the email is the key used to
    aggregate an author's history.
    """

    __tablename__ = "comment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_email: Mapped[str] = mapped_column(String(254), nullable=False, index=True)
    author_display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    author_is_registered: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # pending | approved | rejected | spam | hidden
    status: Mapped[str] = mapped_column(
        String(16),
        default=CommentStatus.PENDING.value,
        nullable=False,
        index=True,
    )

    auto_moderated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    moderation_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Flags from the latest analysis pass; replaced wholesale on re-analysis.
    flags: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    rejection_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def flag_records(self) -> list[Flag]:
        """Return the stored flags as value objects."""
        return [Flag.from_dict(item) for item in self.flags or []]
