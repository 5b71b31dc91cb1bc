"""Rule-based content analysis for submitted comments.

Each check is an independent object that inspects the raw text and returns
zero or more :class:`Flag` records. :class:`ContentAnalyzer` runs a sequence of
checks, aggregates their flags into a score and hands the result to the
decision engine. Checks can be added, removed or reconfigured by passing a
different sequence; the aggregator never needs to know about them.
"""
from __future__ import annotations

import logging
import math
import re
from abc import ABC, abstractmethod
from collections import Counter
from collections.abc import Sequence
from functools import lru_cache
from typing import Any

from comment_guard.core.moderation import (
    AnalysisResult,
    AuthorContext,
    Flag,
    FlagType,
    Severity,
)
from comment_guard.core.patterns import PatternLibrary, get_pattern_library
from comment_guard.services.decision import decide
from comment_guard.services.scoring import aggregate

logger = logging.getLogger(__name__)

LENGTH_PENALTY = 50
SPAM_PENALTY = 80
SPAM_THRESHOLD = 0.5
SPAM_PATTERN_WEIGHT = 0.3
SPAM_REPETITION_WEIGHT = 0.2
SPAM_SPECIAL_CHAR_WEIGHT = 0.2
SPAM_REPEATED_WORD_MIN_LENGTH = 3
SPAM_REPEATED_WORD_MAX_COUNT = 5
SPAM_SPECIAL_CHAR_MAX_COUNT = 10
BANNED_WORD_PENALTY = 20
BANNED_WORD_CONFIDENCE = 0.9
TOXIC_WORD_WEIGHT = 0.2
PERSONAL_ATTACK_WEIGHT = 0.3
SUSPICIOUS_CONTACT_PENALTY = 20
EXCLAMATION_PENALTY = 10
LINK_PENALTY = 10
CAPS_PENALTY = 15
CAPS_MAX_PERCENTAGE = 50
CAPS_MIN_LETTERS = 20

# (threshold, severity, penalty), highest first.
TOXICITY_TIERS: tuple[tuple[float, Severity, int], ...] = (
    (0.6, Severity.CRITICAL, 60),
    (0.4, Severity.HIGH, 40),
    (0.2, Severity.MEDIUM, 20),
)
TOXICITY_FLOOR = (Severity.LOW, 10)


# ---------------------------------------------------------------------------
# Measurements shared by checks and result details
# ---------------------------------------------------------------------------


def count_links(content: str, patterns: PatternLibrary) -> int:
    return len(patterns.link_regex.findall(content))


def caps_stats(content: str) -> tuple[int, int]:
    """Return ``(rounded uppercase percentage, letter count)`` over ASCII letters."""
    letters = [ch for ch in content if ch.isascii() and ch.isalpha()]
    if not letters:
        return 0, 0
    upper = sum(1 for ch in letters if ch.isupper())
    # Round half up so 50.5% reports as 51%.
    return math.floor(upper / len(letters) * 100 + 0.5), len(letters)


def count_banned_words(content: str, patterns: PatternLibrary) -> tuple[int, list[str]]:
    """Return the number of banned-word matches and the distinct words found."""
    count = 0
    found: list[str] = []
    for word, regex in patterns.banned_word_regexes:
        matches = regex.findall(content)
        if matches:
            count += len(matches)
            found.append(word)
    return count, found


def toxicity_stats(content: str, patterns: PatternLibrary) -> tuple[int, float]:
    """Return ``(match count, toxicity score)`` for *content*.

    Every toxic word occurrence adds 0.2; every attack phrase pattern that
    matches at least once adds 0.3.
    """
    count = 0
    score = 0.0
    for _word, regex in patterns.toxic_word_regexes:
        matches = len(regex.findall(content))
        count += matches
        score += matches * TOXIC_WORD_WEIGHT
    for regex in patterns.personal_attack_regexes:
        if regex.search(content):
            count += 1
            score += PERSONAL_ATTACK_WEIGHT
    return count, score


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


class ContentCheck(ABC):
    """A single independent moderation check."""

    name: str = "check"

    def __init__(self, patterns: PatternLibrary) -> None:
        self.patterns = patterns

    @abstractmethod
    def run(self, content: str, context: AuthorContext) -> list[Flag]:
        """Return the flags raised for *content* (possibly none)."""


class LengthCheck(ContentCheck):
    name = "length"

    def run(self, content: str, context: AuthorContext) -> list[Flag]:
        length = len(content.strip())
        if length < self.patterns.min_length:
            reason = f"Comment too short ({length} characters, minimum {self.patterns.min_length})"
        elif length > self.patterns.max_length:
            reason = f"Comment too long ({length} characters, maximum {self.patterns.max_length})"
        else:
            return []
        return [Flag(FlagType.LENGTH, Severity.CRITICAL, 1.0, reason, LENGTH_PENALTY)]


class SpamCheck(ContentCheck):
    """Promotional phrases, keyword stuffing and symbol floods."""

    name = "spam"

    def score(self, content: str) -> tuple[float, list[str]]:
        spam_score = 0.0
        reasons: list[str] = []

        for regex in self.patterns.spam_regexes:
            if regex.search(content):
                spam_score += SPAM_PATTERN_WEIGHT
                reasons.append(f"Spam pattern: {regex.pattern}")

        words = Counter(
            word for word in content.lower().split() if len(word) > SPAM_REPEATED_WORD_MIN_LENGTH
        )
        if words and max(words.values()) > SPAM_REPEATED_WORD_MAX_COUNT:
            spam_score += SPAM_REPETITION_WEIGHT
            reasons.append("Excessively repeated words")

        specials = set(self.patterns.spam_special_characters)
        if sum(1 for ch in content if ch in specials) > SPAM_SPECIAL_CHAR_MAX_COUNT:
            spam_score += SPAM_SPECIAL_CHAR_WEIGHT
            reasons.append("Excessive special characters")

        return min(spam_score, 1.0), reasons

    def run(self, content: str, context: AuthorContext) -> list[Flag]:
        spam_score, reasons = self.score(content)
        if spam_score < SPAM_THRESHOLD:
            return []
        return [
            Flag(FlagType.SPAM, Severity.CRITICAL, spam_score, ", ".join(reasons), SPAM_PENALTY)
        ]


class BannedWordsCheck(ContentCheck):
    name = "banned_words"

    def run(self, content: str, context: AuthorContext) -> list[Flag]:
        count, _words = count_banned_words(content, self.patterns)
        if count == 0:
            return []
        return [
            Flag(
                FlagType.OFFENSIVE,
                Severity.HIGH,
                BANNED_WORD_CONFIDENCE,
                f"Contains {count} banned word(s)",
                BANNED_WORD_PENALTY * count,
            )
        ]


class ToxicityCheck(ContentCheck):
    name = "toxicity"

    def run(self, content: str, context: AuthorContext) -> list[Flag]:
        count, toxic_score = toxicity_stats(content, self.patterns)
        if count == 0:
            return []
        severity, penalty = TOXICITY_FLOOR
        for threshold, tier_severity, tier_penalty in TOXICITY_TIERS:
            if toxic_score >= threshold:
                severity, penalty = tier_severity, tier_penalty
                break
        return [
            Flag(
                FlagType.TOXIC,
                severity,
                min(toxic_score, 1.0),
                f"Contains {count} toxic expression(s)",
                penalty,
            )
        ]


class SuspiciousPatternsCheck(ContentCheck):
    """Contact details and exclamation runs, one flag per kind found."""

    name = "suspicious_patterns"

    def run(self, content: str, context: AuthorContext) -> list[Flag]:
        flags: list[Flag] = []

        emails = self.patterns.email_regex.findall(content)
        if emails:
            flags.append(
                Flag(
                    FlagType.SUSPICIOUS,
                    Severity.MEDIUM,
                    0.7,
                    f"Contains {len(emails)} email address(es)",
                    SUSPICIOUS_CONTACT_PENALTY,
                )
            )

        phones = list(self.patterns.phone_regex.finditer(content))
        if phones:
            flags.append(
                Flag(
                    FlagType.SUSPICIOUS,
                    Severity.MEDIUM,
                    0.7,
                    f"Contains {len(phones)} phone number(s)",
                    SUSPICIOUS_CONTACT_PENALTY,
                )
            )

        if self.patterns.exclamation_regex.search(content):
            flags.append(
                Flag(
                    FlagType.SUSPICIOUS,
                    Severity.LOW,
                    0.5,
                    "Excessive exclamation marks",
                    EXCLAMATION_PENALTY,
                )
            )

        return flags


class LinksCheck(ContentCheck):
    name = "links"

    def run(self, content: str, context: AuthorContext) -> list[Flag]:
        count = count_links(content, self.patterns)
        max_links = self.patterns.max_links
        if count <= max_links:
            return []
        return [
            Flag(
                FlagType.LINKS,
                Severity.MEDIUM,
                0.8,
                f"Contains {count} links (maximum {max_links})",
                LINK_PENALTY * (count - max_links),
            )
        ]


class CapsCheck(ContentCheck):
    name = "caps"

    def run(self, content: str, context: AuthorContext) -> list[Flag]:
        percentage, letters = caps_stats(content)
        # Short acronyms are not shouting.
        if percentage <= CAPS_MAX_PERCENTAGE or letters <= CAPS_MIN_LETTERS:
            return []
        return [Flag(FlagType.CAPS, Severity.LOW, 0.6, f"{percentage}% uppercase", CAPS_PENALTY)]


DEFAULT_CHECKS: tuple[type[ContentCheck], ...] = (
    LengthCheck,
    SpamCheck,
    BannedWordsCheck,
    ToxicityCheck,
    SuspiciousPatternsCheck,
    LinksCheck,
    CapsCheck,
)


def default_checks(patterns: PatternLibrary) -> list[ContentCheck]:
    """Instantiate the standard check set against *patterns*."""
    return [check_cls(patterns) for check_cls in DEFAULT_CHECKS]


# ---------------------------------------------------------------------------
# Analyzer
# ---------------------------------------------------------------------------


class ContentAnalyzer:
    """Runs the configured checks and produces an :class:`AnalysisResult`."""

    def __init__(
        self,
        patterns: PatternLibrary | None = None,
        checks: Sequence[ContentCheck] | None = None,
    ) -> None:
        self.patterns = patterns or get_pattern_library()
        self.checks: list[ContentCheck] = (
            list(checks) if checks is not None else default_checks(self.patterns)
        )

    def run_checks(self, content: str, context: AuthorContext) -> list[Flag]:
        """Collect flags from every check.

        A check that raises is logged and treated as having produced no flags,
        so a disposition can always be reached.
        """
        flags: list[Flag] = []
        for check in self.checks:
            try:
                flags.extend(check.run(content, context))
            except Exception as e:
                logger.error("Moderation check %r failed: %s", check.name, e, exc_info=True)
        return flags

    def describe(self, content: str) -> dict[str, Any]:
        """Return audit counters for *content*; never used for the decision."""
        caps_percentage, _letters = caps_stats(content)
        banned_count, _words = count_banned_words(content, self.patterns)
        toxic_count, _score = toxicity_stats(content, self.patterns)
        return {
            # Whitespace-separated pieces, so empty text still counts as one.
            "word_count": len(re.split(r"\s+", content)),
            "char_count": len(content),
            "links_count": count_links(content, self.patterns),
            "caps_percentage": caps_percentage,
            "banned_words_count": banned_count,
            "toxic_words_count": toxic_count,
        }

    def analyze(self, content: str, context: AuthorContext | None = None) -> AnalysisResult:
        """Analyze *content* written by an author with the given history."""
        context = context or AuthorContext()
        flags = self.run_checks(content, context)
        score, confidence = aggregate(flags)
        return AnalysisResult(
            score=score,
            flags=tuple(flags),
            auto_action=decide(score, flags, context),
            confidence=confidence,
            details=self.describe(content),
        )


@lru_cache(maxsize=1)
def get_content_analyzer() -> ContentAnalyzer:
    """Return the shared analyzer built from the configured pattern library."""
    return ContentAnalyzer(get_pattern_library())
