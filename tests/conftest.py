"""
Pytest configuration and fixtures for SocialSync tests.
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from socialsync.auth import create_access_token, get_password_hash
from socialsync.database import Base, build_engine, build_session_factory, init_db
from socialsync.main import create_app
from socialsync.storage import DatabaseStorage, MemStorage

TEST_PASSWORD = "testpassword123"


def make_database_storage():
    """Fresh in-memory SQLite database behind a DatabaseStorage."""
    engine = build_engine("sqlite:///:memory:")
    init_db(engine)
    return DatabaseStorage(build_session_factory(engine)), engine


@pytest.fixture(params=["memory", "database"])
def storage(request):
    """Each test using this fixture runs once per storage backend."""
    if request.param == "memory":
        yield MemStorage()
        return

    db_storage, engine = make_database_storage()
    yield db_storage
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def app(storage):
    return create_app(storage=storage)


@pytest.fixture(scope="function")
def client(app):
    """Create a test client."""
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def test_user(storage):
    """Create a test user."""
    return storage.create_user({
        "username": "tester",
        "password": get_password_hash(TEST_PASSWORD),
        "display_name": "Test User",
        "email": "test@example.com",
    })


@pytest.fixture(scope="function")
def auth_headers(test_user):
    """Get auth headers for the test user."""
    token = create_access_token({"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}


def post_payload(**overrides) -> dict:
    data = {
        "platform": "instagram",
        "content_id": "ig-1",
        "caption": "Beach day",
        "created_at": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        "likes_count": 10,
        "type": "post",
    }
    data.update(overrides)
    return data


def future_iso(hours: int = 24) -> str:
    return (datetime.now(timezone.utc) + timedelta(hours=hours)).isoformat()
