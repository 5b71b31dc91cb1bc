"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from comment_guard.db.session import get_db
from comment_guard.services.moderation import ModerationService

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_moderation_service(db: SessionDep) -> ModerationService:
    """Return a moderation service bound to the request's session."""
    return ModerationService(db)


# Type alias for moderation service dependency
ModerationServiceDep = Annotated[ModerationService, Depends(get_moderation_service)]
