# src/comment_guard/api/v1/endpoints/comments.py
"""Comment submission endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from comment_guard.api.v1.dependencies import ModerationServiceDep
from comment_guard.core.moderation import CommentStatus
from comment_guard.models import Comment
from comment_guard.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentSubmissionResponse,
    SubmissionModeration,
)

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post(
    "",
    response_model=CommentSubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_comment(
    payload: CommentCreate,
    service: ModerationServiceDep,
) -> CommentSubmissionResponse:
    """Submit a comment; it is moderated automatically before being stored."""
    comment, analysis = service.submit_comment(
        content=payload.content,
        author_email=payload.author.email,
        author_display_name=payload.author.display_name,
        author_is_registered=payload.author.is_registered,
    )
    return CommentSubmissionResponse(
        comment=CommentResponse.model_validate(comment),
        moderation=SubmissionModeration(
            status=comment.status,
            score=analysis.score,
            requires_review=comment.status == CommentStatus.PENDING.value,
        ),
    )


@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(comment_id: int, service: ModerationServiceDep) -> Comment:
    """Get a single comment by ID."""
    comment = service.repo.get_by_id(comment_id)
    if comment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found",
        )
    return comment
