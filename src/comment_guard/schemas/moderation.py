# src/comment_guard/schemas/moderation.py
"""Moderation-related Pydantic schemas."""

from typing import Any

from pydantic import BaseModel, Field


class FlagResponse(BaseModel):
    """One moderation flag as stored on a comment."""

    type: str
    severity: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    reason: str
    penalty: int = 0


class AuthorContextIn(BaseModel):
    """Author history supplied to a dry-run analysis."""

    total_comments: int = Field(0, ge=0)
    approved_comments: int = Field(0, ge=0)
    rejected_comments: int = Field(0, ge=0)
    is_registered: bool = False


class AnalyzeRequest(BaseModel):
    """Schema for analyzing text without storing it."""

    content: str = Field(..., max_length=20_000)
    author: AuthorContextIn = Field(default_factory=AuthorContextIn)


class AnalysisResponse(BaseModel):
    """Result of running the moderation pipeline over some content."""

    score: int = Field(..., ge=0, le=100)
    flags: list[FlagResponse]
    auto_action: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    details: dict[str, Any]


class ModerationNote(BaseModel):
    notes: str | None = Field(None, max_length=1000)


class RejectRequest(BaseModel):
    """Schema for rejecting a comment; the reason is mandatory."""

    reason: str | None = Field(None, max_length=500)
    notes: str | None = Field(None, max_length=1000)


class BulkActionRequest(BaseModel):
    """Schema for applying one action to several comments."""

    comment_ids: list[int]
    reason: str | None = Field(None, max_length=500)


class BulkActionResponse(BaseModel):
    succeeded: int
    failed: int
    errors: list[dict[str, Any]]


class ReanalyzeRequest(BaseModel):
    limit: int | None = Field(None, ge=1, le=1000, description="Maximum comments to process")


class ReanalyzeResponse(BaseModel):
    """Counts produced by a batch re-analysis run."""

    processed: int
    approved: int
    rejected: int
    spam: int
    still_pending: int
    errors: int


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class AuthorReputationResponse(BaseModel):
    """Reputation summary for one author."""

    author_email: str
    total_comments: int
    approved_comments: int
    rejected_comments: int
    spam_comments: int
    score: float = Field(..., ge=0.0, le=100.0)


class TopAuthor(BaseModel):
    author_email: str
    display_name: str
    approved_comments: int


class ModerationStatsResponse(BaseModel):
    """Comment counts per status plus reporting aggregates."""

    pending: int
    approved: int
    rejected: int
    spam: int
    hidden: int
    total: int
    needs_attention: int
    top_authors: list[TopAuthor]
    avg_moderation_time_ms: float
    avg_moderation_time_hours: float
