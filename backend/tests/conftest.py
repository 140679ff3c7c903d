"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["AUTO_CREATE_DB"] = "false"
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'

from authentication.passwords import get_password_hash  # noqa: E402
from models.config import settings  # noqa: E402
from repositories.database import Base, enable_sqlite_pragmas, get_db  # noqa: E402
import repositories.db_models as db_models  # noqa: E402
from services.login_throttle import LoginThrottle  # noqa: E402
from services.session_service import SessionService  # noqa: E402

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(engine, "connect", enable_sqlite_pragmas)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "password123"
# Hashing once keeps user fixtures fast
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session."""
    return db_session


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with overridden database dependency."""
    from main import app
    from helpers.rate_limiter import limiter

    # Reset rate limiter storage before each test to prevent rate limit errors
    limiter.reset()
    app.state.login_throttle = LoginThrottle(
        max_failures=settings.LOGIN_MAX_FAILED_ATTEMPTS
    )

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    app.state.login_throttle = None


def _make_user(
    db_session: Session, username: str, role: db_models.Role
) -> db_models.User:
    user = db_models.User(
        email=f"{username}@example.com",
        username=username,
        hashed_password=TEST_PASSWORD_HASH,
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session) -> db_models.User:
    """Create a regular user."""
    return _make_user(db_session, "alice", db_models.Role.USER)


@pytest.fixture
def other_user(db_session) -> db_models.User:
    """Create a second regular user."""
    return _make_user(db_session, "bob", db_models.Role.USER)


@pytest.fixture
def moderator_user(db_session) -> db_models.User:
    return _make_user(db_session, "mod", db_models.Role.MODERATOR)


@pytest.fixture
def admin_user(db_session) -> db_models.User:
    return _make_user(db_session, "admin", db_models.Role.ADMIN)


@pytest.fixture
def test_category(db_session) -> db_models.Category:
    """Create a test category."""
    category = db_models.Category(name="General")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def test_post(db_session, test_user, test_category) -> db_models.Post:
    """Create a post owned by test_user."""
    post = db_models.Post(
        user_id=test_user.id,
        title="First post",
        content="Some content that is long enough.",
    )
    db_session.add(post)
    db_session.flush()
    db_session.add(
        db_models.PostCategory(post_id=post.id, category_id=test_category.id)
    )
    db_session.commit()
    db_session.refresh(post)
    return post


@pytest.fixture
def test_comment(db_session, test_post, other_user) -> db_models.Comment:
    """Create a comment by other_user on test_post."""
    comment = db_models.Comment(
        post_id=test_post.id,
        user_id=other_user.id,
        content="Nice post!",
    )
    db_session.add(comment)
    db_session.commit()
    db_session.refresh(comment)
    return comment


@pytest.fixture
def login_as(client, db_session) -> Callable[[db_models.User], str]:
    """Return a function that gives the test client a session for a user."""

    def _login(user: db_models.User) -> str:
        user_session = SessionService.create(db_session, user.id)
        client.cookies.set(settings.SESSION_COOKIE_NAME, user_session.token)
        return user_session.token

    return _login
