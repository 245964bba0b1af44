# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count

os.environ.setdefault("DATABASE_URL", "sqlite://")

import bcrypt
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from threadline.core.settings import settings
from threadline.db.session import Base
from threadline.db.session import get_db as app_get_db
from threadline.main import app as fastapi_app
from threadline.records import PostRecord, UserRecord
from threadline.repositories import PostRepository, UserRepository
from threadline.services.email import get_email_sender
from threadline.services.session_store import KeyValueStore, SessionService, get_kv_store

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "hunter22"
# Low-cost hash so fixtures don't pay for full bcrypt rounds.
TEST_PASSWORD_HASH = bcrypt.hashpw(TEST_PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode()
BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)

_USER_COUNTER = count(1)
_POST_COUNTER = count(1)


class RecordingMailer:
    """Email sender stand-in that keeps messages in memory."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to: str, html: str, subject: str) -> None:
        self.sent.append((to, html, subject))


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
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def kv_store() -> KeyValueStore:
    """Process-local store standing in for Redis."""
    return KeyValueStore()


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    kv_store: KeyValueStore,
    mailer: RecordingMailer,
) -> Iterator[None]:
    def _get_db_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_db] = _get_db_override
    app.dependency_overrides[get_kv_store] = lambda: kv_store
    app.dependency_overrides[get_email_sender] = lambda: mailer
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., UserRecord]:
    """Return a factory persisting users whose password is TEST_PASSWORD."""

    def _make_user(username: str | None = None, email: str | None = None) -> UserRecord:
        n = next(_USER_COUNTER)
        username = username or f"user{n:04d}"
        user = UserRepository(db_session).create(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=TEST_PASSWORD_HASH,
        )
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., PostRecord]:
    """Return a factory persisting posts one second apart unless told otherwise."""

    def _make_post(creator: UserRecord, created_at: datetime | None = None, title: str | None = None) -> PostRecord:
        n = next(_POST_COUNTER)
        post = PostRepository(db_session).create(
            title=title or f"Post {n}",
            text=f"Body of post {n}",
            creator_id=creator.id,
            created_at=created_at or BASE_TIME + timedelta(seconds=n),
        )
        db_session.commit()
        return post

    return _make_post


@pytest.fixture()
def test_user(make_user: Callable[..., UserRecord]) -> UserRecord:
    """Create and return the primary test user."""
    return make_user("alice_test", "alice@example.com")


@pytest.fixture()
def other_user(make_user: Callable[..., UserRecord]) -> UserRecord:
    """Create and return a second user."""
    return make_user("bobby_test", "bob@example.com")


@pytest.fixture()
def test_post(make_post: Callable[..., PostRecord], test_user: UserRecord) -> PostRecord:
    """Create a baseline post owned by the primary test user."""
    return make_post(test_user)


@pytest.fixture()
def login_as(client: TestClient, kv_store: KeyValueStore) -> Callable[[UserRecord], str]:
    """Return a helper that gives the test client a session for a user."""

    def _login_as(user: UserRecord) -> str:
        session_id = SessionService(kv_store).create(user.id)
        client.cookies.set(settings.session_cookie_name, session_id)
        return session_id

    return _login_as
