# src/comment_guard/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import (
    CommentAuthor,
    CommentCreate,
    CommentResponse,
    CommentSubmissionResponse,
    ModerationQueueResponse,
)
from .moderation import (
    AnalysisResponse,
    AnalyzeRequest,
    AuthorReputationResponse,
    BulkActionRequest,
    BulkActionResponse,
    FlagResponse,
    ModerationStatsResponse,
    ReanalyzeRequest,
    ReanalyzeResponse,
)

__all__ = [
    "CommentAuthor", "CommentCreate", "CommentResponse",
    "CommentSubmissionResponse", "ModerationQueueResponse",
    "AnalysisResponse", "AnalyzeRequest", "AuthorReputationResponse",
    "BulkActionRequest", "BulkActionResponse", "FlagResponse", "ModerationStatsResponse",
    "ReanalyzeRequest", "ReanalyzeResponse",
]
