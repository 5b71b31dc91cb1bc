# tests/services/test_reputation.py
from __future__ import annotations

import pytest

from comment_guard.core.moderation import AuthorContext, AuthorReputation, CommentStatus
from comment_guard.repositories.comment_repo import CommentRepository
from comment_guard.services.reputation import ReputationTracker

AUTHOR = "regular@example.com"


@pytest.fixture()
def tracker(db_session) -> ReputationTracker:
    return ReputationTracker(CommentRepository(db_session))


class TestReputationFormula:
    def test_new_author_scores_zero(self) -> None:
        assert AuthorReputation().score == 0.0

    def test_approval_rate_as_percentage(self) -> None:
        reputation = AuthorReputation(total_comments=4, approved_comments=3, rejected_comments=1)
        assert reputation.score == pytest.approx(75.0)

    def test_spam_costs_twenty_points_each(self) -> None:
        reputation = AuthorReputation(total_comments=5, approved_comments=4, spam_comments=1)
        assert reputation.score == pytest.approx(60.0)

    def test_score_never_goes_negative(self) -> None:
        reputation = AuthorReputation(total_comments=4, approved_comments=1, spam_comments=3)
        assert reputation.score == 0.0

    def test_from_status_counts(self) -> None:
        reputation = AuthorReputation.from_status_counts(
            {"approved": 2, "rejected": 1, "spam": 1, "pending": 3}
        )
        assert reputation.total_comments == 7
        assert reputation.approved_comments == 2
        assert reputation.rejected_comments == 1
        assert reputation.spam_comments == 1

    def test_author_context_is_neutral_without_history(self) -> None:
        assert AuthorContext().approval_rate == 0.5
        assert AuthorContext(total_comments=4, approved_comments=1).approval_rate == 0.25


class TestReputationTracker:
    def test_counts_every_status(self, tracker, make_comment) -> None:
        make_comment(author_email=AUTHOR, status=CommentStatus.APPROVED)
        make_comment(author_email=AUTHOR, status=CommentStatus.APPROVED)
        make_comment(author_email=AUTHOR, status=CommentStatus.REJECTED)
        make_comment(author_email=AUTHOR, status=CommentStatus.SPAM)
        make_comment(author_email=AUTHOR, status=CommentStatus.PENDING)
        make_comment(author_email="someone-else@example.com", status=CommentStatus.APPROVED)

        reputation = tracker.compute(AUTHOR)

        assert reputation.total_comments == 5
        assert reputation.approved_comments == 2
        assert reputation.rejected_comments == 1
        assert reputation.spam_comments == 1
        assert reputation.score == pytest.approx(20.0)

    def test_author_context_can_exclude_the_comment_under_review(
        self, tracker, make_comment
    ) -> None:
        make_comment(author_email=AUTHOR, status=CommentStatus.APPROVED)
        current = make_comment(author_email=AUTHOR)

        context = tracker.author_context(AUTHOR, is_registered=True, exclude_id=current.id)

        assert context.total_comments == 1
        assert context.approved_comments == 1
        assert context.is_registered is True

    def test_unknown_author_has_empty_context(self, tracker) -> None:
        context = tracker.author_context("nobody@example.com", is_registered=False)
        assert context.total_comments == 0
        assert context.approval_rate == 0.5

    def test_refresh_stores_summary(self, tracker, make_comment, db_session) -> None:
        make_comment(author_email=AUTHOR, status=CommentStatus.APPROVED)
        make_comment(author_email=AUTHOR, status=CommentStatus.REJECTED)

        tracker.refresh(AUTHOR)
        db_session.commit()

        stored = tracker.stored(AUTHOR)
        assert stored is not None
        assert stored.total_comments == 2
        assert stored.approved_comments == 1
        assert stored.rejected_comments == 1
        assert stored.score == pytest.approx(50.0)

    def test_refresh_updates_existing_summary(self, tracker, make_comment) -> None:
        comment = make_comment(author_email=AUTHOR, status=CommentStatus.PENDING)
        tracker.refresh(AUTHOR)

        comment.status = CommentStatus.APPROVED.value
        tracker.refresh(AUTHOR)

        stored = tracker.stored(AUTHOR)
        assert stored.approved_comments == 1
        assert stored.score == pytest.approx(100.0)

    def test_stored_is_none_before_first_refresh(self, tracker) -> None:
        assert tracker.stored("fresh@example.com") is None
