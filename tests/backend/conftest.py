from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from backend.app.auth.dependencies import get_current_user
from backend.app.auth.jwt import create_access_token
from backend.app.main import create_app
from core.db import get_db
from core.models import User


@pytest.fixture
def test_app_client(test_db, settings) -> Iterator[tuple[TestClient, sessionmaker]]:
    db_url, TestingSessionLocal, engine = test_db

    app = create_app(settings)

    def override_get_db() -> Iterator[Session]:
        db = TestingSessionLocal()
        try:
            yield db
            db.commit()  # Auto-commit on success like production
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client, TestingSessionLocal


@pytest.fixture
def registered_user(test_app_client) -> User:
    _, TestingSessionLocal = test_app_client
    session = TestingSessionLocal()
    user = User(
        name="Tester",
        email="tester@example.com",
        avatar="http://example.com/avatar.png",
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    session.close()
    return user


@pytest.fixture
def auth_headers(settings, registered_user) -> dict[str, str]:
    token = create_access_token(settings, {"sub": str(registered_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def authorized_client(
    test_app_client, registered_user
) -> Iterator[tuple[TestClient, Callable[[], User], sessionmaker]]:
    client, TestingSessionLocal = test_app_client

    def override_current_user() -> User:
        session_inner = TestingSessionLocal()
        try:
            return session_inner.query(User).filter(User.id == registered_user.id).one()
        finally:
            session_inner.close()

    client.app.dependency_overrides[get_current_user] = override_current_user

    yield client, override_current_user, TestingSessionLocal

    client.app.dependency_overrides.pop(get_current_user, None)
