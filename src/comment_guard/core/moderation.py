"""Value objects shared by the moderation pipeline.

Flags, author context and analysis results are plain frozen dataclasses so the
analyzer, aggregator and decision engine stay free of ORM and HTTP concerns.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

NEUTRAL_APPROVAL_RATE = 0.5
SPAM_REPUTATION_PENALTY = 20


class FlagType(str, Enum):
    """Kind of moderation concern a flag describes."""

    LENGTH = "length"
    SPAM = "spam"
    OFFENSIVE = "offensive"
    TOXIC = "toxic"
    SUSPICIOUS = "suspicious"
    LINKS = "links"
    CAPS = "caps"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AutoAction(str, Enum):
    """Automatic disposition chosen by the decision engine."""

    APPROVE = "approve"
    REJECT = "reject"
    SPAM = "spam"
    REVIEW = "review"


class CommentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SPAM = "spam"
    # Only reachable through report resolution, which lives outside this service.
    HIDDEN = "hidden"


ACTION_TO_STATUS: dict[AutoAction, CommentStatus] = {
    AutoAction.APPROVE: CommentStatus.APPROVED,
    AutoAction.REJECT: CommentStatus.REJECTED,
    AutoAction.SPAM: CommentStatus.SPAM,
    AutoAction.REVIEW: CommentStatus.PENDING,
}


@dataclass(frozen=True)
class Flag:
    """One detected moderation concern."""

    type: FlagType
    severity: Severity
    confidence: float
    reason: str
    penalty: int

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation for persistence."""
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "confidence": self.confidence,
            "reason": self.reason,
            "penalty": self.penalty,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Flag:
        return cls(
            type=FlagType(data["type"]),
            severity=Severity(data["severity"]),
            confidence=float(data["confidence"]),
            reason=str(data.get("reason", "")),
            penalty=int(data.get("penalty", 0)),
        )


@dataclass(frozen=True)
class AuthorContext:
    """Historical counts for the author of a submission."""

    total_comments: int = 0
    approved_comments: int = 0
    rejected_comments: int = 0
    is_registered: bool = False

    @property
    def approval_rate(self) -> float:
        """Share of approved comments; first-time authors count as neutral."""
        if self.total_comments <= 0:
            return NEUTRAL_APPROVAL_RATE
        return self.approved_comments / self.total_comments


@dataclass(frozen=True)
class AuthorReputation:
    """Reputation summary derived from an author's comment history."""

    total_comments: int = 0
    approved_comments: int = 0
    rejected_comments: int = 0
    spam_comments: int = 0

    @property
    def score(self) -> float:
        # No neutral default here: an author without history scores 0.
        if self.total_comments <= 0:
            return 0.0
        approval_rate = self.approved_comments / self.total_comments
        return max(0.0, approval_rate * 100 - self.spam_comments * SPAM_REPUTATION_PENALTY)

    @classmethod
    def from_status_counts(cls, counts: dict[str, int]) -> AuthorReputation:
        """Build a reputation from a ``{status: count}`` aggregate."""
        return cls(
            total_comments=sum(counts.values()),
            approved_comments=counts.get(CommentStatus.APPROVED.value, 0),
            rejected_comments=counts.get(CommentStatus.REJECTED.value, 0),
            spam_comments=counts.get(CommentStatus.SPAM.value, 0),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of running the full pipeline over one piece of content."""

    score: int
    flags: tuple[Flag, ...]
    auto_action: AutoAction
    confidence: float
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["flags"] = [flag.to_dict() for flag in self.flags]
        data["auto_action"] = self.auto_action.value
        return data
