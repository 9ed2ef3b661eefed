"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from src.api.dependencies import get_upload_manager
from src.database import Base, create_db_engine, get_db
from src.main import app
from src.services.uploads import UploadManager
from tests.factories import image, page_form, template_form


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: str | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").rsplit("/", 1)[0] + "/page_builder_test"
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_db_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


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


@pytest.fixture
def uploads(tmp_path):
    """Upload manager rooted in a per-test directory."""
    manager = UploadManager(tmp_path / "uploads", max_bytes=1024)
    manager.ensure_root()
    return manager


@pytest.fixture(scope="function")
def client(db, uploads):
    """Create a test client with database and upload overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upload_manager] = lambda: uploads
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _signup(client, email: str, full_name: str) -> AuthHeaders:
    response = client.post(
        "/auth/signup",
        json={"email": email, "password": "testpass123", "full_name": full_name},
    )
    assert response.status_code == 201
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=email,
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return _signup(client, "test@example.com", "Test User")


@pytest.fixture
def other_auth_headers(client):
    """A second user, for ownership checks."""
    return _signup(client, "other@example.com", "Other User")


@pytest.fixture
def create_template(client, auth_headers):
    """Factory creating a template through the API."""

    def _create(headers=None, **overrides) -> dict:
        response = client.post(
            "/api/template",
            headers=headers or auth_headers,
            data=template_form(**overrides),
            files={"custom_logo": image()},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_page(client, auth_headers, create_template):
    """Factory creating a page (and a template for it when none is given)."""

    def _create(template_id: str | None = None, headers=None, **overrides) -> dict:
        if template_id is None:
            template_id = create_template()["id"]
        response = client.post(
            "/api/page",
            headers=headers or auth_headers,
            data=page_form(template_id, **overrides),
            files={
                "custom_logo": image("logo.png"),
                "footer_logo": image("footer.jpg", "image/jpeg"),
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create
