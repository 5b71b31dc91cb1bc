"""Data access helpers for comments and author reputation."""
from __future__ import annotations

from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from comment_guard.core.moderation import AuthorReputation, CommentStatus
from comment_guard.models.comment import Comment
from comment_guard.models.reputation import AuthorReputationRecord

__all__ = ["CommentRepository"]


class CommentRepository:
    """Thin wrapper around database access for comment entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, comment_id: int) -> Comment | None:
        """Return a comment by identifier."""
        return self.session.get(Comment, comment_id)

    def add(self, comment: Comment) -> Comment:
        """Stage a new comment and flush so it receives an identifier."""
        self.session.add(comment)
        self.session.flush()
        return comment

    def count_by_status_for_author(
        self,
        author_email: str,
        exclude_id: int | None = None,
    ) -> dict[str, int]:
        """Return ``{status: count}`` over every comment by *author_email*.

        Args:
            author_email: Author identity key.
            exclude_id: Comment to leave out, typically the one being analyzed.
        """
        # Make sure pending status changes are visible to the aggregate.
        self.session.flush()
        stmt = (
            select(Comment.status, func.count())
            .where(Comment.author_email == author_email)
            .group_by(Comment.status)
        )
        if exclude_id is not None:
            stmt = stmt.where(Comment.id != exclude_id)
        return {status: int(count) for status, count in self.session.execute(stmt).all()}

    def list_oldest_pending(self, limit: int) -> list[Comment]:
        """Return up to *limit* pending comments, oldest first."""
        return self.list_by_status(CommentStatus.PENDING.value, limit=limit)

    def list_by_status(self, status: str, limit: int, offset: int = 0) -> list[Comment]:
        """Return comments with *status* ordered by creation time."""
        stmt = (
            select(Comment)
            .where(Comment.status == status)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def count_with_status(self, status: str) -> int:
        stmt = select(func.count()).select_from(Comment).where(Comment.status == status)
        return int(self.session.execute(stmt).scalar() or 0)

    def status_counts(self) -> dict[str, int]:
        """Return ``{status: count}`` across all comments."""
        stmt = select(Comment.status, func.count()).group_by(Comment.status)
        return {status: int(count) for status, count in self.session.execute(stmt).all()}

    def top_approved_authors(self, limit: int) -> list[tuple[str, str, int]]:
        """Return ``(email, display name, approved count)`` for the busiest authors."""
        approved = func.count().label("approved")
        stmt = (
            select(Comment.author_email, func.max(Comment.author_display_name), approved)
            .where(Comment.status == CommentStatus.APPROVED.value)
            .group_by(Comment.author_email)
            .order_by(approved.desc(), Comment.author_email.asc())
            .limit(limit)
        )
        return [(email, name, int(count)) for email, name, count in self.session.execute(stmt).all()]

    def moderation_durations(self) -> list[timedelta]:
        """Return the time from submission to decision for approved and rejected comments."""
        decided_at = func.coalesce(Comment.approved_at, Comment.rejected_at)
        stmt = select(Comment.created_at, decided_at).where(
            Comment.status.in_([CommentStatus.APPROVED.value, CommentStatus.REJECTED.value]),
            decided_at.is_not(None),
        )
        return [decided - created for created, decided in self.session.execute(stmt).all()]

    def get_reputation(self, author_email: str) -> AuthorReputationRecord | None:
        return self.session.get(AuthorReputationRecord, author_email)

    def save_reputation(
        self,
        author_email: str,
        reputation: AuthorReputation,
    ) -> AuthorReputationRecord:
        """Insert or update the stored reputation summary for an author."""
        record = self.get_reputation(author_email)
        if record is None:
            record = AuthorReputationRecord(author_email=author_email)
            self.session.add(record)
        record.total_comments = reputation.total_comments
        record.approved_comments = reputation.approved_comments
        record.rejected_comments = reputation.rejected_comments
        record.spam_comments = reputation.spam_comments
        record.score = reputation.score
        self.session.flush()
        return record
