"""Pattern library used by the content analyzer.

The word lists and regular expressions are configuration data: the defaults
ship as ``comment_guard/data/default_patterns.json`` and can be replaced by
pointing ``MODERATION_PATTERNS_FILE`` at another JSON document with the same
shape. Numeric limits come from the application settings.
"""
from __future__ import annotations

import logging
import re
from functools import cached_property, lru_cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from comment_guard.core.settings import settings

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS_RESOURCE = "default_patterns.json"


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


class PatternLibrary(BaseModel):
    """Static word lists, regexes and limits consumed by the checks."""

    banned_words: list[str] = Field(default_factory=list)
    spam_patterns: list[str] = Field(default_factory=list)
    toxic_words: list[str] = Field(default_factory=list)
    personal_attack_patterns: list[str] = Field(default_factory=list)
    email_pattern: str = r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"
    phone_pattern: str = r"(\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}"
    exclamation_pattern: str = r"!{3,}"
    link_pattern: str = r"https?://[^\s]+"
    spam_special_characters: str = "!?$€£¥@#%&*"

    min_length: int = Field(default=2, ge=0)
    max_length: int = Field(default=5000, ge=1)
    max_links: int = Field(default=2, ge=0)

    @field_validator(
        "spam_patterns",
        "personal_attack_patterns",
    )
    @classmethod
    def _check_regex_list(cls, value: list[str]) -> list[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid pattern {pattern!r}: {exc}") from exc
        return value

    @field_validator("email_pattern", "phone_pattern", "exclamation_pattern", "link_pattern")
    @classmethod
    def _check_regex(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid pattern {value!r}: {exc}") from exc
        return value

    # Compiled forms. Pattern lists match case-insensitively; the suspicious
    # patterns keep their own casing rules.

    @cached_property
    def spam_regexes(self) -> list[re.Pattern[str]]:
        return [_compile(p) for p in self.spam_patterns]

    @cached_property
    def banned_word_regexes(self) -> list[tuple[str, re.Pattern[str]]]:
        """Whole-word matchers for each banned word."""
        return [(w, _compile(rf"\b{re.escape(w)}\b")) for w in self.banned_words]

    @cached_property
    def toxic_word_regexes(self) -> list[tuple[str, re.Pattern[str]]]:
        """Word-prefix matchers for each toxic word."""
        return [(w, _compile(rf"\b{re.escape(w)}")) for w in self.toxic_words]

    @cached_property
    def personal_attack_regexes(self) -> list[re.Pattern[str]]:
        return [_compile(p) for p in self.personal_attack_patterns]

    @cached_property
    def email_regex(self) -> re.Pattern[str]:
        return re.compile(self.email_pattern)

    @cached_property
    def phone_regex(self) -> re.Pattern[str]:
        return re.compile(self.phone_pattern)

    @cached_property
    def exclamation_regex(self) -> re.Pattern[str]:
        return re.compile(self.exclamation_pattern)

    @cached_property
    def link_regex(self) -> re.Pattern[str]:
        return re.compile(self.link_pattern)


def load_pattern_library(path: str | Path | None = None) -> PatternLibrary:
    """Load a pattern library from *path*, or the packaged defaults.

    Limits are always taken from the application settings so that they can be
    tuned through the environment without editing the pattern file.
    """
    if path is not None:
        raw = Path(path).read_text(encoding="utf-8")
        logger.info("Loading moderation patterns from %s", path)
    else:
        raw = (
            resources.files("comment_guard.data")
            .joinpath(DEFAULT_PATTERNS_RESOURCE)
            .read_text(encoding="utf-8")
        )
    library = PatternLibrary.model_validate_json(raw)
    return library.model_copy(update=settings.content_limits)


@lru_cache(maxsize=1)
def get_pattern_library() -> PatternLibrary:
    """Return the shared pattern library configured for this process."""
    return load_pattern_library(settings.moderation_patterns_file)
