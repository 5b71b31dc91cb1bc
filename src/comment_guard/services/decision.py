"""Decision policy mapping an analysis onto an automatic disposition."""
from __future__ import annotations

from collections.abc import Sequence

from comment_guard.core.moderation import AuthorContext, AutoAction, Flag, FlagType, Severity

SPAM_CONFIDENCE_THRESHOLD = 0.7
CRITICAL_FLAGS_REJECT_COUNT = 2
REJECT_BELOW_SCORE = 30
REVIEW_BELOW_SCORE = 60
REGISTERED_APPROVE_SCORE = 70
REPUTABLE_APPROVE_SCORE = 80
REPUTABLE_MIN_APPROVAL_RATE = 0.8
TRUSTED_APPROVE_SCORE = 70
TRUSTED_MIN_APPROVAL_RATE = 0.9
TRUSTED_MIN_COMMENTS = 10


def decide(score: int, flags: Sequence[Flag], author: AuthorContext) -> AutoAction:
    """Return the disposition for an analyzed comment.

    Rules are evaluated in order and the first match wins; the spam and
    rejection rules must run before any of the approval fast paths.
    """
    if any(
        flag.type is FlagType.SPAM and flag.confidence > SPAM_CONFIDENCE_THRESHOLD
        for flag in flags
    ):
        return AutoAction.SPAM

    critical = sum(1 for flag in flags if flag.severity is Severity.CRITICAL)
    if critical >= CRITICAL_FLAGS_REJECT_COUNT:
        return AutoAction.REJECT

    if score < REJECT_BELOW_SCORE:
        return AutoAction.REJECT

    if score < REVIEW_BELOW_SCORE:
        return AutoAction.REVIEW

    approval_rate = author.approval_rate

    if author.is_registered and score >= REGISTERED_APPROVE_SCORE and critical == 0:
        return AutoAction.APPROVE

    if (
        score >= REPUTABLE_APPROVE_SCORE
        and approval_rate >= REPUTABLE_MIN_APPROVAL_RATE
        and critical == 0
    ):
        return AutoAction.APPROVE

    if (
        score >= TRUSTED_APPROVE_SCORE
        and approval_rate >= TRUSTED_MIN_APPROVAL_RATE
        and author.total_comments >= TRUSTED_MIN_COMMENTS
    ):
        return AutoAction.APPROVE

    return AutoAction.REVIEW


def policy_summary() -> dict[str, dict[str, float | int]]:
    """Describe the thresholds in force, for operators."""
    return {
        "spam": {"min_confidence": SPAM_CONFIDENCE_THRESHOLD},
        "auto_reject": {
            "max_score": REJECT_BELOW_SCORE,
            "critical_flags": CRITICAL_FLAGS_REJECT_COUNT,
        },
        "review": {"max_score": REVIEW_BELOW_SCORE},
        "auto_approve": {
            "registered_min_score": REGISTERED_APPROVE_SCORE,
            "min_score": REPUTABLE_APPROVE_SCORE,
            "min_reputation": REPUTABLE_MIN_APPROVAL_RATE,
            "trusted_min_score": TRUSTED_APPROVE_SCORE,
            "trusted_min_reputation": TRUSTED_MIN_APPROVAL_RATE,
            "trusted_min_comments": TRUSTED_MIN_COMMENTS,
        },
    }
