# src/comment_guard/models/__init__.py
"""SQLAlchemy models for the Comment Guard service."""

from .comment import Comment
from .reputation import AuthorReputationRecord

__all__ = [
    "Comment",
    "AuthorReputationRecord",
]
