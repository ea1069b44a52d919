"""Shared test configuration and fixtures for Event RSVP tests"""

import logging
import os

# Must be set before event_rsvp.models.database is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from event_rsvp.main import app
from event_rsvp.models.database import get_db
from event_rsvp.services.registration_service import RegistrationService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Smallest valid PNG payload, base64 encoded
TINY_PNG_B64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
TINY_PNG_DATA_URL = f"data:image/png;base64,{TINY_PNG_B64}"


@pytest.fixture
def _db_session():
    """Private DB session for fixtures only.

    Do not use this fixture directly in tests. Prefer `registration_service`
    or `api_client`.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    session = Session(engine)

    yield session

    # Cleanup
    session.close()
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def registration_service(_db_session):
    """Create a RegistrationService instance for testing"""
    return RegistrationService(_db_session)


@pytest.fixture
def api_client(_db_session):
    """Create a test client that uses the test database"""
    original_overrides = app.dependency_overrides.copy()

    def get_test_db():
        return _db_session

    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = get_test_db

    client = TestClient(app)

    yield client

    # Completely restore original state
    app.dependency_overrides.clear()
    app.dependency_overrides.update(original_overrides)


@pytest.fixture
def asgi_transport(api_client):
    """httpx transport that sends requests straight to the app under test"""
    return httpx.ASGITransport(app=app)


@pytest.fixture
def registration_payload():
    """Build a valid registration payload, overriding any fields given"""

    def _build(**overrides):
        payload = {
            "name": "Alice",
            "email": "alice@x.com",
            "phone": "0812-3456-7890",
            "has_joined_cg": True,
            "connect_group": "CG Samuel",
            "food_item": "AYAM SERUNDENG - 45000",
            "drink_item": "LEMON TEA - 20000",
            "bringing_gift": True,
            "transfer_proof": TINY_PNG_DATA_URL,
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture
def tiny_png_b64():
    return TINY_PNG_B64


@pytest.fixture
def tiny_png_data_url():
    return TINY_PNG_DATA_URL
