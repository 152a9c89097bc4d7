# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime
from itertools import count

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SALT_KEY", "test-salt")
os.environ.setdefault("TRUST_FORWARDED_FOR", "true")
os.environ.setdefault("REQUEST_LIMIT_ENABLED", "false")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from reveal.core.settings import Settings
from reveal.db.session import Base, configure_sqlite
from reveal.db.session import get_db as app_get_session
from reveal.db.time import utcnow
from reveal.main import app as fastapi_app
from reveal.models import Comment, Post
from reveal.services.content import ContentStore
from reveal.services.moderation import FlagEscalator
from reveal.services.votes import VoteLedger
from reveal.utils.hash import IdentityHasher

TEST_DB_URL = "sqlite://"
TEST_SALT = "test-salt"

_TEST_SETTINGS_INSTANCE = Settings()
_ADDRESS_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = configure_sqlite(
        create_engine(
            TEST_DB_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
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
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return _TEST_SETTINGS_INSTANCE


@pytest.fixture(scope="session")
def hasher() -> IdentityHasher:
    return IdentityHasher(TEST_SALT)


@pytest.fixture()
def address_headers() -> Callable[[str | None], dict[str, str]]:
    """Return a factory producing forwarded-address headers.

    Without an argument each call yields a fresh address, i.e. a new identity.
    """

    def _headers(address: str | None = None) -> dict[str, str]:
        if address is None:
            n = next(_ADDRESS_COUNTER)
            address = f"10.{(n >> 16) & 255}.{(n >> 8) & 255}.{n & 255}"
        return {"X-Forwarded-For": address}

    return _headers


@pytest.fixture()
def identity_a(hasher: IdentityHasher) -> str:
    return hasher.digest("203.0.113.10")


@pytest.fixture()
def identity_b(hasher: IdentityHasher) -> str:
    return hasher.digest("203.0.113.20")


@pytest.fixture()
def content_store() -> ContentStore:
    return ContentStore()


@pytest.fixture()
def ledger(content_store: ContentStore) -> VoteLedger:
    return VoteLedger(content=content_store)


@pytest.fixture()
def escalator(content_store: ContentStore) -> FlagEscalator:
    return FlagEscalator(content=content_store)


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Insert a post directly, bypassing throttles."""

    def _make_post(
        ip_hash: str = "author-hash",
        *,
        title: str = "A title",
        body: str = "A post body long enough",
        hidden: bool = False,
        created_at: datetime | None = None,
    ) -> Post:
        post = Post(
            title=title,
            body=body,
            ip_hash=ip_hash,
            hidden=hidden,
            created_at=created_at or utcnow(),
        )
        db_session.add(post)
        db_session.commit()
        return post

    return _make_post


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    """Insert a comment directly, bypassing throttles."""

    def _make_comment(
        post: Post,
        ip_hash: str = "commenter-hash",
        *,
        body: str = "A comment",
        hidden: bool = False,
        created_at: datetime | None = None,
    ) -> Comment:
        comment = Comment(
            post_id=post.id,
            body=body,
            ip_hash=ip_hash,
            hidden=hidden,
            created_at=created_at or utcnow(),
        )
        db_session.add(comment)
        db_session.commit()
        return comment

    return _make_comment


@pytest.fixture()
def test_post(make_post: Callable[..., Post]) -> Post:
    """Create a baseline post for tests."""
    return make_post()


@pytest.fixture()
def test_comment(make_comment: Callable[..., Comment], test_post: Post) -> Comment:
    """Create a baseline comment on the baseline post."""
    return make_comment(test_post)
