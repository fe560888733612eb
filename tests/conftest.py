"""
Pytest fixtures for DevConnector API tests.

Every test gets a fresh in-memory SQLite database built from the ORM models.
"""

import os
import sys

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from core.config import Settings  # noqa: E402
from core.db import Base  # noqa: E402
from core.models import Profile, User  # noqa: E402

TEST_JWT_SECRET = "unit-test-secret-key-that-is-long-enough-1234"


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's .env file."""
    values = {
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET_KEY": TEST_JWT_SECRET,
        "GITHUB_CLIENT_ID": "client-id",
        "GITHUB_CLIENT_SECRET": "client-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def settings_factory():
    """Build Settings with overrides, e.g. settings_factory(PROFILE_WRITE_MODE="serialized")."""
    return make_settings


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh in-memory database for each test."""
    db_url = "sqlite://"
    engine = create_engine(
        db_url,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
    )

    yield db_url, TestingSessionLocal, engine

    engine.dispose()


@pytest.fixture
def test_session(test_db):
    """Get a test session from the test database."""
    _, TestingSessionLocal, _ = test_db
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture
def sample_user(test_session) -> User:
    """A persisted user without a profile."""
    user = User(
        name="Jane Doe",
        email="jane@example.com",
        avatar="//www.gravatar.com/avatar/jane",
    )
    test_session.add(user)
    test_session.commit()
    return user


@pytest.fixture
def sample_profile_fields():
    """Raw upsert input as the route hands it to the service."""
    return {
        "status": "Developer",
        "skills": "node, react , redux",
        "company": "Acme",
        "website": "https://jane.dev",
        "location": "Berlin",
        "bio": "Full stack developer",
        "github_username": "janedoe",
        "twitter": "https://twitter.com/janedoe",
        "linkedin": "https://linkedin.com/in/janedoe",
    }


@pytest.fixture
def create_profile(test_db):
    """Factory inserting a profile row directly, bypassing the service."""
    _, TestingSessionLocal, _ = test_db

    def _create(user_id: int, **fields) -> Profile:
        values = {"status": "Developer", "skills": ["python"]}
        values.update(fields)
        session = TestingSessionLocal()
        try:
            profile = Profile(user_id=user_id, **values)
            session.add(profile)
            session.commit()
            return profile
        finally:
            session.close()

    return _create
