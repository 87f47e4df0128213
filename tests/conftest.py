"""Pytest configuration and fixtures."""

import os
import tempfile
from unittest.mock import MagicMock

# Rendered images go to a throwaway directory; must be set before settings are loaded
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="qr-uploads-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from qrsystem.api.dependencies import get_email_service  # noqa: E402
from qrsystem.database import Base, get_db  # noqa: E402
from qrsystem.main import app  # noqa: E402
from qrsystem.services.auth import create_user  # noqa: E402
from qrsystem.services.email import EmailService  # noqa: E402
from qrsystem.services.storage import ArtifactStorage  # noqa: E402


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/qr_codes", "/qr_codes_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    response = client.post(
        "/api/auth/signup",
        json={"name": "Test User", "email": "test@example.com", "password": "testpass123"},
    )
    assert response.status_code == 201
    data = response.json()
    token = data["token"]
    user_id = data["user"]["id"]

    return AuthHeaders(
        {"Authorization": f"Bearer {token}"}, user_id=user_id, email="test@example.com"
    )


@pytest.fixture
def other_auth_headers(client):
    """Auth headers for a second, unrelated user."""
    response = client.post(
        "/api/auth/signup",
        json={"name": "Other User", "email": "other@example.com", "password": "otherpass123"},
    )
    assert response.status_code == 201
    data = response.json()

    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"},
        user_id=data["user"]["id"],
        email="other@example.com",
    )


@pytest.fixture
def mail_service(client):
    """Email service whose SMTP send is replaced with a mock."""
    service = EmailService()
    service.send = MagicMock()
    app.dependency_overrides[get_email_service] = lambda: service
    return service


@pytest.fixture
def user(db):
    """A user created directly in the database."""
    return create_user(db, "owner@example.com", "ownerpass123", "Owner")


@pytest.fixture
def storage(tmp_path):
    """Image storage in a per-test directory."""
    return ArtifactStorage(tmp_path / "uploads")
