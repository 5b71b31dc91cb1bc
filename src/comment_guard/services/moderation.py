# src/comment_guard/services/moderation.py
"""Moderation services for Comment Guard.

Ties the analyzer, the decision engine and the reputation tracker to the
comment store: moderating new submissions, batch re-analysis of the pending
queue and the manual actions moderators take afterwards.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any
from weakref import WeakValueDictionary

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from comment_guard.core.moderation import (
    ACTION_TO_STATUS,
    AnalysisResult,
    AuthorContext,
    AutoAction,
    CommentStatus,
)
from comment_guard.core.settings import settings
from comment_guard.models.comment import Comment
from comment_guard.repositories.comment_repo import CommentRepository
from comment_guard.services.analyzer import ContentAnalyzer, get_content_analyzer
from comment_guard.services.reputation import ReputationTracker

logger = logging.getLogger(__name__)

AUTO_REJECTION_REASON = "Automatically rejected for inappropriate content"
SPAM_REJECTION_REASON = "Marked as spam"
TOP_AUTHORS_LIMIT = 10
MS_PER_HOUR = 3_600_000

# Serializes read-reputation -> decide -> persist per author within this process.
# An entry lives only while some caller holds or waits on its lock.
_AUTHOR_LOCKS: WeakValueDictionary[str, Lock] = WeakValueDictionary()
_AUTHOR_LOCKS_GUARD = Lock()


@contextmanager
def author_lock(author_email: str) -> Iterator[None]:
    """Hold the moderation lock for *author_email*."""
    with _AUTHOR_LOCKS_GUARD:
        lock = _AUTHOR_LOCKS.get(author_email)
        if lock is None:
            lock = Lock()
            _AUTHOR_LOCKS[author_email] = lock
    with lock:
        yield


class CommentNotFoundError(LookupError):
    """Raised when a moderation action targets a missing comment."""


class InvalidModerationActionError(ValueError):
    """Raised when a moderation action is missing required input."""


@dataclass
class BatchReanalysisResult:
    """Aggregate outcome of a batch re-analysis run."""

    processed: int = 0
    approved: int = 0
    rejected: int = 0
    spam: int = 0
    still_pending: int = 0
    errors: int = 0

    def record(self, status: str) -> None:
        self.processed += 1
        if status == CommentStatus.APPROVED.value:
            self.approved += 1
        elif status == CommentStatus.REJECTED.value:
            self.rejected += 1
        elif status == CommentStatus.SPAM.value:
            self.spam += 1
        else:
            self.still_pending += 1

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class BulkActionResult:
    succeeded: int = 0
    failed: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def apply_analysis(comment: Comment, analysis: AnalysisResult) -> None:
    """Copy an analysis onto *comment* and set its status from the disposition."""
    comment.auto_moderated = True
    comment.moderation_score = analysis.score
    comment.flags = [flag.to_dict() for flag in analysis.flags]
    comment.status = ACTION_TO_STATUS[analysis.auto_action].value
    comment.rejection_reason = None

    if analysis.auto_action is AutoAction.APPROVE:
        comment.approved_at = _utcnow()
    elif analysis.auto_action is AutoAction.REJECT:
        comment.rejection_reason = AUTO_REJECTION_REASON
        comment.rejected_at = _utcnow()


class ModerationService:
    """Service handling automatic and manual comment moderation."""

    def __init__(self, db: Session, analyzer: ContentAnalyzer | None = None) -> None:
        self.db = db
        self.repo = CommentRepository(db)
        self.reputation = ReputationTracker(self.repo)
        self.analyzer = analyzer or get_content_analyzer()

    # -- automatic moderation ------------------------------------------------

    def analyze(self, content: str, context: AuthorContext | None = None) -> AnalysisResult:
        """Run the pipeline without touching the store."""
        return self.analyzer.analyze(content, context)

    def moderate(self, comment: Comment) -> AnalysisResult:
        """Analyze *comment* against its author's history and apply the result.

        Does not commit; callers run this inside :func:`author_lock` together
        with the write that persists the outcome.
        """
        context = self.reputation.author_context(
            comment.author_email,
            comment.author_is_registered,
            exclude_id=comment.id,
        )
        analysis = self.analyzer.analyze(comment.content, context)
        apply_analysis(comment, analysis)
        return analysis

    def submit_comment(
        self,
        *,
        content: str,
        author_email: str,
        author_display_name: str,
        author_is_registered: bool = False,
    ) -> tuple[Comment, AnalysisResult]:
        """Moderate a new comment, persist it and refresh the author's reputation."""
        author_email = author_email.strip().lower()
        comment = Comment(
            content=content,
            author_email=author_email,
            author_display_name=author_display_name,
            author_is_registered=author_is_registered,
            status=CommentStatus.PENDING.value,
            created_at=_utcnow(),
        )
        with author_lock(author_email):
            analysis = self.moderate(comment)
            self.repo.add(comment)
            self.reputation.refresh(author_email)
            self.db.commit()
        self.db.refresh(comment)
        logger.info(
            "Comment %s by %s auto-moderated: %s (score %d)",
            comment.id,
            author_email,
            analysis.auto_action.value,
            analysis.score,
        )
        return comment, analysis

    def reanalyze_batch(self, limit: int | None = None) -> BatchReanalysisResult:
        """Re-run moderation over the oldest pending comments.

        Each comment is committed on its own; a failure to persist one is
        logged and counted, and the batch moves on to the next.
        """
        if limit is None:
            limit = settings.reanalyze_default_limit
        result = BatchReanalysisResult()
        pending = self.repo.list_oldest_pending(limit)
        # Capture identifiers up front; a rollback expires the loaded rows.
        targets = [(comment.id, comment.author_email) for comment in pending]

        for comment_id, author_email in targets:
            try:
                with author_lock(author_email):
                    comment = self.repo.get_by_id(comment_id)
                    if comment is None or comment.status != CommentStatus.PENDING.value:
                        continue
                    self.moderate(comment)
                    self.reputation.refresh(author_email)
                    self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                result.errors += 1
                logger.error("Failed to persist re-analysis of comment %s: %s", comment_id, e)
                continue
            result.record(comment.status)

        logger.info("Batch re-analysis finished: %s", result.to_dict())
        return result

    # -- manual moderation -----------------------------------------------------

    def _get_or_raise(self, comment_id: int) -> Comment:
        comment = self.repo.get_by_id(comment_id)
        if comment is None:
            raise CommentNotFoundError(f"Comment {comment_id} not found")
        return comment

    def _commit_with_reputation(self, comment: Comment) -> Comment:
        with author_lock(comment.author_email):
            self.reputation.refresh(comment.author_email)
            self.db.commit()
        self.db.refresh(comment)
        return comment

    def approve(self, comment_id: int, notes: str | None = None) -> Comment:
        """Approve a comment."""
        comment = self._get_or_raise(comment_id)
        comment.status = CommentStatus.APPROVED.value
        comment.approved_at = _utcnow()
        comment.rejected_at = None
        if notes:
            comment.notes = notes
        return self._commit_with_reputation(comment)

    def reject(self, comment_id: int, reason: str | None, notes: str | None = None) -> Comment:
        """Reject a comment; a reason is required."""
        if not reason or not reason.strip():
            raise InvalidModerationActionError("A rejection reason is required")
        comment = self._get_or_raise(comment_id)
        comment.status = CommentStatus.REJECTED.value
        comment.rejected_at = _utcnow()
        comment.rejection_reason = reason.strip()
        comment.approved_at = None
        if notes:
            comment.notes = notes
        return self._commit_with_reputation(comment)

    def mark_spam(self, comment_id: int, notes: str | None = None) -> Comment:
        """Mark a comment as spam."""
        comment = self._get_or_raise(comment_id)
        comment.status = CommentStatus.SPAM.value
        comment.rejected_at = _utcnow()
        comment.rejection_reason = SPAM_REJECTION_REASON
        if notes:
            comment.notes = notes
        return self._commit_with_reputation(comment)

    def bulk_action(
        self,
        action: AutoAction,
        comment_ids: Sequence[int],
        reason: str | None = None,
    ) -> BulkActionResult:
        """Apply a manual action to many comments, collecting per-id failures."""
        if not comment_ids:
            raise InvalidModerationActionError("At least one comment id is required")
        if action is AutoAction.REJECT and (not reason or not reason.strip()):
            raise InvalidModerationActionError("A rejection reason is required")

        result = BulkActionResult()
        for comment_id in comment_ids:
            try:
                if action is AutoAction.APPROVE:
                    self.approve(comment_id)
                elif action is AutoAction.REJECT:
                    self.reject(comment_id, reason)
                elif action is AutoAction.SPAM:
                    self.mark_spam(comment_id)
                else:
                    raise InvalidModerationActionError(f"Unsupported bulk action: {action.value}")
            except CommentNotFoundError as e:
                result.failed += 1
                result.errors.append({"id": comment_id, "error": str(e)})
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error("Bulk %s failed for comment %s: %s", action.value, comment_id, e)
                result.failed += 1
                result.errors.append({"id": comment_id, "error": "Database error"})
            else:
                result.succeeded += 1
        return result

    # -- reporting -----------------------------------------------------------

    def queue(
        self,
        status: CommentStatus = CommentStatus.PENDING,
        page: int = 1,
        limit: int | None = None,
    ) -> tuple[list[Comment], int]:
        """Return one page of comments with *status*, oldest first, and the total."""
        limit = limit or settings.moderation_queue_page_size
        page = max(page, 1)
        comments = self.repo.list_by_status(status.value, limit=limit, offset=(page - 1) * limit)
        return comments, self.repo.count_with_status(status.value)

    def stats(self) -> dict[str, Any]:
        """Return comment counts per status and overall, plus moderator reporting.

        ``avg_moderation_time_*`` covers approved and rejected comments only,
        measured from submission to the decision timestamp.
        """
        counts = self.repo.status_counts()
        stats: dict[str, Any] = {
            status.value: counts.get(status.value, 0) for status in CommentStatus
        }
        stats["total"] = sum(counts.values())
        stats["needs_attention"] = stats[CommentStatus.PENDING.value]
        stats["top_authors"] = [
            {"author_email": email, "display_name": name, "approved_comments": approved}
            for email, name, approved in self.repo.top_approved_authors(TOP_AUTHORS_LIMIT)
        ]

        durations = self.repo.moderation_durations()
        avg_ms = (
            sum(d.total_seconds() for d in durations) / len(durations) * 1000
            if durations
            else 0.0
        )
        stats["avg_moderation_time_ms"] = avg_ms
        stats["avg_moderation_time_hours"] = round(avg_ms / MS_PER_HOUR, 2)
        return stats
