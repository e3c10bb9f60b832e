"""
Pytest configuration and fixtures for the CMS API tests.
"""

import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REVALIDATION_BACKEND", "log")
os.environ.setdefault("ENVIRONMENT", "test")

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cms_api.main import app
from cms_api.models import Base
from cms_api.seed import ADMIN_ROLE, EDITOR_ROLE, ensure_user, seed_permissions
from cms_api.services import FAQS, OrderedCollectionService
from shared.config.settings import settings
from shared.infrastructure.db import get_db
from shared.infrastructure.revalidation import RecordingRevalidationPublisher, get_revalidation_publisher
from shared.security.auth import sign_jwt
from shared.security.rate_limit import limiter


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fresh_session():
    """
    Factory of isolated sessions, for hypothesis tests that need an empty
    database per generated example.
    """

    @contextmanager
    def _fresh():
        Base.metadata.create_all(bind=engine)
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()
            Base.metadata.drop_all(bind=engine)

    return _fresh


@pytest.fixture
def publisher():
    """Revalidation publisher that records every signal."""
    return RecordingRevalidationPublisher()


@pytest.fixture(scope="function")
def client(db_session, publisher):
    """
    Create a test client with database session and publisher overrides.
    Rate limiting is disabled; tests that exercise it turn it back on.
    """

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_revalidation_publisher] = lambda: publisher
    limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def roles(db_session):
    return seed_permissions(db_session)


@pytest.fixture
def admin_user(db_session, roles):
    return ensure_user(db_session, "admin@test.com", roles[ADMIN_ROLE], full_name="Test Admin")


@pytest.fixture
def editor_user(db_session, roles):
    return ensure_user(db_session, "editor@test.com", roles[EDITOR_ROLE], full_name="Test Editor")


@pytest.fixture
def csrf_headers(client):
    """Fetch a CSRF token; the client keeps the cookie, the header echoes it."""
    response = client.get("/api/csrf")
    assert response.status_code == 200
    return {settings.csrf_header_name: response.json()["csrf_token"]}


@pytest.fixture
def auth_headers(admin_user, csrf_headers):
    """Bearer token of the admin plus the CSRF header."""
    token = sign_jwt({"sub": admin_user.id})
    return {"Authorization": f"Bearer {token}", **csrf_headers}


@pytest.fixture
def editor_headers(editor_user, csrf_headers):
    token = sign_jwt({"sub": editor_user.id})
    return {"Authorization": f"Bearer {token}", **csrf_headers}


@pytest.fixture
def make_faqs(db_session):
    """Append FAQs through the service and return them in display order."""

    def _make(*questions: str):
        service = OrderedCollectionService(db_session, FAQS)
        items = []
        for question in questions:
            result = service.append({"question": question, "answer": f"Answer to {question}"})
            assert result.success, result.error
            items.append(result.data)
        return items

    return _make
