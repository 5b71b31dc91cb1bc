# tests/services/test_batch_reanalysis.py
"""Batch re-analysis of the pending queue."""

from __future__ import annotations

from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from comment_guard.core.moderation import CommentStatus
from comment_guard.models import Comment
from comment_guard.services.moderation import ModerationService

REPUTABLE = "reputable@example.com"
SPAMMER = "spammer@example.com"
NEWCOMER = "newcomer@example.com"


def test_batch_applies_each_disposition(make_comment, moderation_service, db_session) -> None:
    for _ in range(4):
        make_comment(author_email=REPUTABLE, status=CommentStatus.APPROVED)
    shouting = make_comment("THIS IS A REALLY GREAT ARTICLE, thanks", author_email=REPUTABLE)
    spam = make_comment("buy now! click here! free money!!!", author_email=SPAMMER)
    rude = make_comment("Esto es basura, tonto, idiota sin remedio", author_email=NEWCOMER)

    result = moderation_service.reanalyze_batch(limit=10)

    assert result.to_dict() == {
        "processed": 3,
        "approved": 1,
        "rejected": 0,
        "spam": 1,
        "still_pending": 1,
        "errors": 0,
    }
    assert shouting.status == CommentStatus.APPROVED.value
    assert shouting.moderation_score == 85
    assert shouting.approved_at is not None
    assert spam.status == CommentStatus.SPAM.value
    assert rude.status == CommentStatus.PENDING.value
    assert rude.moderation_score == 40
    assert rude.auto_moderated is True
    assert [flag["type"] for flag in rude.flags] == ["offensive"]

    stored = moderation_service.reputation.stored(REPUTABLE)
    assert stored.total_comments == 5
    assert stored.approved_comments == 5


def test_batch_takes_oldest_first_up_to_limit(make_comment, moderation_service) -> None:
    first = make_comment("First comment here", author_email="a@example.com")
    second = make_comment("Second comment here", author_email="b@example.com")
    third = make_comment("Third comment here", author_email="c@example.com")

    result = moderation_service.reanalyze_batch(limit=2)

    assert result.processed == 2
    assert first.auto_moderated is True
    assert second.auto_moderated is True
    assert third.auto_moderated is False


def test_batch_uses_configured_default_limit(make_comment, moderation_service, monkeypatch) -> None:
    from comment_guard.core.settings import settings

    monkeypatch.setattr(settings, "reanalyze_default_limit", 1)
    make_comment("One", author_email="a@example.com")
    make_comment("Two", author_email="b@example.com")

    assert moderation_service.reanalyze_batch().processed == 1


def test_batch_ignores_decided_comments(make_comment, moderation_service) -> None:
    approved = make_comment("Already approved", status=CommentStatus.APPROVED)
    rejected = make_comment("Already rejected", status=CommentStatus.REJECTED)

    result = moderation_service.reanalyze_batch(limit=10)

    assert result.processed == 0
    assert approved.status == CommentStatus.APPROVED.value
    assert approved.auto_moderated is False
    assert rejected.status == CommentStatus.REJECTED.value


def test_empty_queue(moderation_service) -> None:
    assert moderation_service.reanalyze_batch(limit=5).to_dict() == {
        "processed": 0,
        "approved": 0,
        "rejected": 0,
        "spam": 0,
        "still_pending": 0,
        "errors": 0,
    }


def test_batch_continues_after_a_failed_write(make_comment, db_session, analyzer) -> None:
    ids = [
        make_comment("buy now! click here! free money!!!", author_email=f"user{i}@example.com").id
        for i in range(3)
    ]
    db_session.commit()

    real_commit = db_session.commit
    calls = {"n": 0}

    def flaky_commit() -> None:
        calls["n"] += 1
        if calls["n"] == 2:
            raise SQLAlchemyError("disk full")
        real_commit()

    service = ModerationService(db_session, analyzer)
    with patch.object(db_session, "commit", side_effect=flaky_commit):
        result = service.reanalyze_batch(limit=10)

    assert result.processed == 2
    assert result.spam == 2
    assert result.errors == 1

    statuses = [db_session.get(Comment, comment_id).status for comment_id in ids]
    assert statuses == ["spam", "pending", "spam"]


def test_reanalysis_agrees_with_initial_decision(moderation_service) -> None:
    comment, analysis = moderation_service.submit_comment(
        content="A thoughtful reply about the article",
        author_email="first-timer@example.com",
        author_display_name="First Timer",
    )
    assert comment.status == CommentStatus.PENDING.value

    result = moderation_service.reanalyze_batch(limit=10)

    assert result.still_pending == 1
    assert comment.status == CommentStatus.PENDING.value
    assert comment.moderation_score == analysis.score
