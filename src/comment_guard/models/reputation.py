# src/comment_guard/models/reputation.py
"""Per-author reputation summary maintained by the reputation tracker."""

from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from comment_guard.db.session import Base
from comment_guard.models.comment import utcnow


class AuthorReputationRecord(Base):
    """Cached reputation counters keyed by author email.

    Always recomputed from the comment table; never the source of truth.
    """

    __tablename__ = "author_reputation"

    author_email: Mapped[str] = mapped_column(String(254), primary_key=True)
    total_comments: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    approved_comments: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    rejected_comments: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    spam_comments: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
