"""Aggregate moderation flags into a cleanliness score."""
from __future__ import annotations

from collections.abc import Iterable

from comment_guard.core.moderation import Flag

MAX_SCORE = 100
CLEAN_CONFIDENCE = 0.9


def aggregate(flags: Iterable[Flag]) -> tuple[int, float]:
    """Return ``(score, confidence)`` for a set of flags.

    The score starts at 100 and loses each flag's penalty, floored at 0.
    Confidence is 0.9 when nothing was flagged, otherwise the mean of the
    flag confidences.
    """
    flags = list(flags)
    score = max(0, MAX_SCORE - sum(flag.penalty for flag in flags))
    if not flags:
        return score, CLEAN_CONFIDENCE
    confidence = sum(flag.confidence for flag in flags) / len(flags)
    return score, confidence
