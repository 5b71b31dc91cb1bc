# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from comment_guard.core.moderation import CommentStatus
from comment_guard.core.patterns import PatternLibrary, load_pattern_library
from comment_guard.db.session import Base
from comment_guard.db.session import get_db as app_get_session
from comment_guard.main import app as fastapi_app
from comment_guard.models import Comment
from comment_guard.services.analyzer import ContentAnalyzer
from comment_guard.services.moderation import ModerationService

TEST_DB_URL = "sqlite://"

_COMMENT_ORDER_COUNTER = count(1)
_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def patterns() -> PatternLibrary:
    """Return the packaged pattern library."""
    return load_pattern_library()


@pytest.fixture(scope="session")
def analyzer(patterns: PatternLibrary) -> ContentAnalyzer:
    """Return an analyzer running the default checks."""
    return ContentAnalyzer(patterns)


@pytest.fixture()
def moderation_service(db_session: Session, analyzer: ContentAnalyzer) -> ModerationService:
    return ModerationService(db_session, analyzer)


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    """Return a factory persisting comments with strictly increasing creation times."""

    def _make(
        content: str = "Thanks for the write-up",
        *,
        author_email: str = "reader@example.com",
        display_name: str = "Reader",
        status: CommentStatus = CommentStatus.PENDING,
        is_registered: bool = False,
    ) -> Comment:
        comment = Comment(
            content=content,
            author_email=author_email,
            author_display_name=display_name,
            author_is_registered=is_registered,
            status=status.value,
            created_at=_BASE_TIME + timedelta(minutes=next(_COMMENT_ORDER_COUNTER)),
        )
        db_session.add(comment)
        db_session.flush()
        return comment

    return _make
