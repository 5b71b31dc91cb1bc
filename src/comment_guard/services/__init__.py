# src/comment_guard/services/__init__.py
"""Business logic services for the Comment Guard application."""

from .analyzer import ContentAnalyzer
from .moderation import ModerationService
from .reputation import ReputationTracker

__all__ = [
    "ContentAnalyzer",
    "ModerationService",
    "ReputationTracker",
]
