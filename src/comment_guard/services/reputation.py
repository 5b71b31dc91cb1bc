"""Author reputation derived from comment history."""
from __future__ import annotations

import logging

from comment_guard.core.moderation import AuthorContext, AuthorReputation, CommentStatus
from comment_guard.models.reputation import AuthorReputationRecord
from comment_guard.repositories.comment_repo import CommentRepository

logger = logging.getLogger(__name__)


class ReputationTracker:
    """Recomputes author reputation from the aggregate of their comments."""

    def __init__(self, repo: CommentRepository) -> None:
        self.repo = repo

    def author_context(
        self,
        author_email: str,
        is_registered: bool,
        exclude_id: int | None = None,
    ) -> AuthorContext:
        """Return the counts the decision engine needs for a new decision.

        Args:
            author_email: Author identity key.
            is_registered: Whether the author is a signed-in user.
            exclude_id: The comment being decided, so that re-analysis sees the
                same history as the initial submission did.
        """
        counts = self.repo.count_by_status_for_author(author_email, exclude_id=exclude_id)
        return AuthorContext(
            total_comments=sum(counts.values()),
            approved_comments=counts.get(CommentStatus.APPROVED.value, 0),
            rejected_comments=counts.get(CommentStatus.REJECTED.value, 0),
            is_registered=is_registered,
        )

    def compute(self, author_email: str) -> AuthorReputation:
        """Return the author's reputation without persisting it."""
        return AuthorReputation.from_status_counts(
            self.repo.count_by_status_for_author(author_email)
        )

    def refresh(self, author_email: str) -> AuthorReputation:
        """Recompute and store the reputation summary for *author_email*.

        The caller owns the transaction; the update is flushed, not committed.
        """
        reputation = self.compute(author_email)
        self.repo.save_reputation(author_email, reputation)
        logger.debug(
            "Reputation for %s: %d comments, score %.1f",
            author_email,
            reputation.total_comments,
            reputation.score,
        )
        return reputation

    def stored(self, author_email: str) -> AuthorReputationRecord | None:
        """Return the last stored summary, if any."""
        return self.repo.get_reputation(author_email)
