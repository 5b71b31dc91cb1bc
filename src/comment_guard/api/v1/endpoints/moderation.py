"""Moderation-related endpoints for the Comment Guard API."""

from __future__ import annotations

import math
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from comment_guard.api.v1.dependencies import ModerationServiceDep
from comment_guard.core.moderation import AuthorContext, AutoAction, CommentStatus
from comment_guard.core.settings import settings
from comment_guard.models import Comment
from comment_guard.schemas.comment import CommentResponse, ModerationQueueResponse
from comment_guard.schemas.moderation import (
    AnalysisResponse,
    AnalyzeRequest,
    AuthorReputationResponse,
    BulkActionRequest,
    BulkActionResponse,
    ModerationNote,
    ModerationStatsResponse,
    Pagination,
    ReanalyzeRequest,
    ReanalyzeResponse,
    RejectRequest,
)
from comment_guard.services.decision import policy_summary
from comment_guard.services.moderation import (
    CommentNotFoundError,
    InvalidModerationActionError,
    ModerationService,
)

router = APIRouter(prefix="/moderation", tags=["moderation"])


def _not_found(err: CommentNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err))


def _bad_request(err: InvalidModerationActionError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err))


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_content(
    payload: AnalyzeRequest,
    service: ModerationServiceDep,
) -> dict[str, Any]:
    """Run the moderation pipeline over text without storing anything."""
    context = AuthorContext(**payload.author.model_dump())
    return service.analyze(payload.content, context).to_dict()


@router.get("/queue", response_model=ModerationQueueResponse)
async def get_moderation_queue(
    service: ModerationServiceDep,
    status_filter: CommentStatus = Query(CommentStatus.PENDING, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.moderation_queue_page_size, ge=1, le=100),
) -> ModerationQueueResponse:
    """Get comments awaiting moderation, oldest first."""
    comments, total = service.queue(status_filter, page=page, limit=limit)
    return ModerationQueueResponse(
        data=[CommentResponse.model_validate(c) for c in comments],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit) if total else 0,
        ),
    )


@router.post("/comments/{comment_id}/approve", response_model=CommentResponse)
async def approve_comment(
    comment_id: int,
    service: ModerationServiceDep,
    payload: ModerationNote | None = None,
) -> Comment:
    """Approve a comment and refresh its author's reputation."""
    try:
        return service.approve(comment_id, notes=payload.notes if payload else None)
    except CommentNotFoundError as err:
        raise _not_found(err) from err


@router.post("/comments/{comment_id}/reject", response_model=CommentResponse)
async def reject_comment(
    comment_id: int,
    payload: RejectRequest,
    service: ModerationServiceDep,
) -> Comment:
    """Reject a comment with a mandatory reason."""
    try:
        return service.reject(comment_id, payload.reason, notes=payload.notes)
    except InvalidModerationActionError as err:
        raise _bad_request(err) from err
    except CommentNotFoundError as err:
        raise _not_found(err) from err


@router.post("/comments/{comment_id}/spam", response_model=CommentResponse)
async def mark_comment_as_spam(
    comment_id: int,
    service: ModerationServiceDep,
    payload: ModerationNote | None = None,
) -> Comment:
    """Mark a comment as spam."""
    try:
        return service.mark_spam(comment_id, notes=payload.notes if payload else None)
    except CommentNotFoundError as err:
        raise _not_found(err) from err


def _bulk(
    service: ModerationService,
    action: AutoAction,
    payload: BulkActionRequest,
) -> BulkActionResponse:
    try:
        result = service.bulk_action(action, payload.comment_ids, reason=payload.reason)
    except InvalidModerationActionError as err:
        raise _bad_request(err) from err
    return BulkActionResponse(
        succeeded=result.succeeded,
        failed=result.failed,
        errors=result.errors,
    )


@router.post("/bulk/approve", response_model=BulkActionResponse)
async def bulk_approve(payload: BulkActionRequest, service: ModerationServiceDep) -> BulkActionResponse:
    """Approve several comments at once."""
    return _bulk(service, AutoAction.APPROVE, payload)


@router.post("/bulk/reject", response_model=BulkActionResponse)
async def bulk_reject(payload: BulkActionRequest, service: ModerationServiceDep) -> BulkActionResponse:
    """Reject several comments with a shared reason."""
    return _bulk(service, AutoAction.REJECT, payload)


@router.post("/bulk/spam", response_model=BulkActionResponse)
async def bulk_spam(payload: BulkActionRequest, service: ModerationServiceDep) -> BulkActionResponse:
    """Mark several comments as spam."""
    return _bulk(service, AutoAction.SPAM, payload)


@router.post("/reanalyze", response_model=ReanalyzeResponse)
async def reanalyze_pending(
    service: ModerationServiceDep,
    payload: ReanalyzeRequest | None = None,
) -> dict[str, int]:
    """Re-run automatic moderation over the oldest pending comments."""
    limit = payload.limit if payload else None
    return service.reanalyze_batch(limit).to_dict()


@router.get("/stats", response_model=ModerationStatsResponse)
async def get_moderation_stats(service: ModerationServiceDep) -> dict[str, Any]:
    """Get comment counts per status and moderator reporting aggregates."""
    return service.stats()


@router.get("/authors/{author_email}/reputation", response_model=AuthorReputationResponse)
async def get_author_reputation(
    author_email: str,
    service: ModerationServiceDep,
) -> AuthorReputationResponse:
    """Get an author's reputation, recomputed from their comment history."""
    email = author_email.strip().lower()
    reputation = service.reputation.compute(email)
    return AuthorReputationResponse(
        author_email=email,
        total_comments=reputation.total_comments,
        approved_comments=reputation.approved_comments,
        rejected_comments=reputation.rejected_comments,
        spam_comments=reputation.spam_comments,
        score=reputation.score,
    )


@router.get("/settings")
async def get_moderation_settings(service: ModerationServiceDep) -> dict[str, Any]:
    """Get the decision thresholds and content limits currently in force."""
    patterns = service.analyzer.patterns
    return {
        "policy": policy_summary(),
        "limits": {
            "min_length": patterns.min_length,
            "max_length": patterns.max_length,
            "max_links": patterns.max_links,
        },
        "checks": [check.name for check in service.analyzer.checks],
        "reanalyze_default_limit": settings.reanalyze_default_limit,
    }
