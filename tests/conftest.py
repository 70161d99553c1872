"""
Pytest configuration and shared fixtures for Recovery Companion tests.

This module provides:
- Test database setup (SQLite in-memory)
- FastAPI TestClient configuration
- Patient / family viewer users with JWT auth headers
"""

import os
import sys
import tempfile
from datetime import date, timedelta
from typing import Generator

import pytest

# =============================================================================
# TEST SETTINGS BEFORE ANY APP IMPORTS
# =============================================================================
_TMP_DIR = tempfile.mkdtemp(prefix="recovery_companion_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["AI_PROVIDER"] = "local"
os.environ["JWT_SECRET"] = "test-secret"

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from models import ai_log, exercise, medication, recovery_log, reminder, viewer  # noqa: F401
from models.base import Base
from models.user import User
from services.auth_service import create_access_token, hash_password
from services.responder_service import TemplateResponder

TEST_PASSWORD = "TestPassword123!"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine using SQLite in-memory."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_db(test_engine) -> Generator[Session, None, None]:
    """Create a test database session with automatic rollback."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def override_get_db(test_db):
    """Override the get_db dependency to use test database."""
    def _override_get_db():
        try:
            yield test_db
        finally:
            pass
    return _override_get_db


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def app_instance():
    """Create the FastAPI app once per test session."""
    from main import app as fastapi_app
    return fastapi_app


@pytest.fixture(scope="function")
def app(app_instance, override_get_db):
    """Configure the app with the test database and local templates."""
    from api.deps import get_db, get_responder

    app_instance.dependency_overrides[get_db] = override_get_db
    app_instance.dependency_overrides[get_responder] = lambda: TemplateResponder()
    yield app_instance
    app_instance.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app) -> TestClient:
    """TestClient without lifespan, so the demo seed never runs."""
    return TestClient(app)


# =============================================================================
# USER FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def patient_user(test_db) -> User:
    """A patient ten days into recovery."""
    user = User(
        email="patient@example.com",
        name="Test Patient",
        role="patient",
        hashed_password=hash_password(TEST_PASSWORD),
        recovery_start_date=date.today() - timedelta(days=10),
        recovery_type="surgery",
    )
    test_db.add(user)
    test_db.commit()
    test_db.refresh(user)
    return user


@pytest.fixture(scope="function")
def viewer_user(test_db) -> User:
    """A family viewer account."""
    user = User(
        email="family@example.com",
        name="Test Family",
        role="family_viewer",
        hashed_password=hash_password(TEST_PASSWORD),
    )
    test_db.add(user)
    test_db.commit()
    test_db.refresh(user)
    return user


def _headers_for(user: User) -> dict:
    token = create_access_token(sub=str(user.id), role=user.role, email=user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def patient_headers(patient_user) -> dict:
    return _headers_for(patient_user)


@pytest.fixture(scope="function")
def viewer_headers(viewer_user) -> dict:
    return _headers_for(viewer_user)
