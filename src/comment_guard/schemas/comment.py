# src/comment_guard/schemas/comment.py
"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from comment_guard.schemas.moderation import FlagResponse, Pagination


class CommentAuthor(BaseModel):
    """Identity of the person submitting a comment."""

    email: str = Field(..., max_length=254, pattern=r"^\S+@\S+\.\S+$")
    display_name: str = Field(..., min_length=1, max_length=100)
    is_registered: bool = False


class CommentCreate(BaseModel):
    """Schema for submitting a new comment.

    Length is deliberately not validated here; out-of-range content is flagged
    by the analyzer instead of being refused.
    """

    content: str = Field(..., max_length=20_000)
    author: CommentAuthor


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    id: int
    content: str
    author_email: str
    author_display_name: str
    author_is_registered: bool
    status: str
    auto_moderated: bool
    moderation_score: int
    flags: list[FlagResponse]
    rejection_reason: str | None = None
    notes: str | None = None
    created_at: datetime
    approved_at: datetime | None = None
    rejected_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class SubmissionModeration(BaseModel):
    status: str
    score: int
    requires_review: bool


class CommentSubmissionResponse(BaseModel):
    """Schema returned after a comment has been submitted and moderated."""

    comment: CommentResponse
    moderation: SubmissionModeration


class ModerationQueueResponse(BaseModel):
    """One page of the moderation queue."""

    data: list[CommentResponse]
    pagination: Pagination
