"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
Services run against the in-memory document store with a low bcrypt cost.
"""

import pytest
from datetime import datetime, timezone, timedelta
import jwt  # PyJWT
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import ServiceContainer
from modules.auth.passwords import PasswordHasher
from modules.auth.repository import SessionRepository, UserRepository
from modules.auth.service import AuthService
from modules.tasks.repository import TaskRepository
from modules.tasks.service import TaskService
from shared.config import Settings
from shared.store import InMemoryDocumentStore


# Test JWT secrets (only for testing)
TEST_JWT_SECRET = "test-access-secret-key-for-testing-only-0123456789"
TEST_JWT_REFRESH_SECRET = "test-refresh-secret-key-for-testing-only-0123456789"
TEST_PASSWORD = "correct-horse-battery"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    token_type: str = "access",
    secret: str = TEST_JWT_SECRET,
    **overrides,
) -> str:
    """
    Create a JWT signed the way the app signs access tokens.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        token_type: Value of the ``type`` claim
        secret: Signing secret
        overrides: Extra or replacement claims

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "type": token_type,
        "jti": "test-jti",
        "iss": "task-management-api",
        "aud": "task-management-app",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        **overrides,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def settings() -> Settings:
    """Settings for tests: in-memory store, test secrets, cheap bcrypt."""
    return Settings(
        _env_file=None,
        database_backend="memory",
        jwt_secret=TEST_JWT_SECRET,
        jwt_refresh_secret=TEST_JWT_REFRESH_SECRET,
        bcrypt_rounds=4,
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Empty in-memory store with the unique indexes of the SQL schema."""
    return InMemoryDocumentStore(
        unique_fields={
            UserRepository.collection: UserRepository.unique_fields,
            SessionRepository.collection: SessionRepository.unique_fields,
        }
    )


@pytest.fixture
def auth_service(settings: Settings, store: InMemoryDocumentStore) -> AuthService:
    return AuthService(
        users=UserRepository(store),
        sessions=SessionRepository(store),
        settings=settings,
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
    )


@pytest.fixture
def task_service(store: InMemoryDocumentStore) -> TaskService:
    return TaskService(TaskRepository(store))


@pytest.fixture
def container(settings: Settings, store: InMemoryDocumentStore) -> ServiceContainer:
    return ServiceContainer(settings, store=store)


@pytest.fixture
def client(settings: Settings, container: ServiceContainer) -> TestClient:
    """TestClient around an app wired to the in-memory store."""
    return TestClient(create_app(settings=settings, container=container))


def signup(client: TestClient, email: str = "test@example.com", password: str = TEST_PASSWORD) -> dict:
    """Sign up through the API and return the ``data`` payload (user + tokens)."""
    response = client.post("/api/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def bearer(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}
