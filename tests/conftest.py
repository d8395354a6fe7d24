"""Shared test fixtures for API and service tests."""

import os

# Must be set before paharnama.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SENDGRID_API_KEY", "")

from unittest.mock import patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from paharnama import models  # noqa: E402, F401
from paharnama.database import Base, get_db  # noqa: E402
from paharnama.main import app  # noqa: E402
from paharnama.models.user import Role, User  # noqa: E402
from paharnama.rate_limiter import limiter  # noqa: E402
from paharnama.services.password_hasher import PasswordHasher  # noqa: E402
from paharnama.services.repositories import UserRepository  # noqa: E402

SEND_VERIFICATION = "paharnama.services.auth_service.EmailService.send_verification_email"
SEND_WELCOME = "paharnama.services.auth_service.EmailService.send_welcome_email"


def make_session_maker():
    """In-memory SQLite database with every table created."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def register_user(
    test_client: TestClient, email: str, password: str, **extra
) -> tuple[dict, str | None]:
    """Register through the API. Returns (response body, emailed verification token)."""
    with patch(SEND_VERIFICATION) as mock_send:
        mock_send.return_value = True
        response = test_client.post(
            "/api/auth/register",
            json={"email": email, "password": password, **extra},
        )
    token = mock_send.call_args[0][2] if mock_send.called else None
    return response.json(), token


def register_and_verify_user(
    test_client: TestClient, email: str, password: str
) -> dict:
    """Helper to register and verify a user, then login to get tokens."""
    _, token = register_user(test_client, email, password)

    with patch(SEND_WELCOME):
        test_client.post("/api/auth/verify-email", json={"token": token})

    response = test_client.post(
        "/api/auth/login",
        json={"email": email, "password": password},
    )
    return response.json()


def create_user(
    db_session_maker,
    email: str,
    password: str,
    role: Role = Role.USER,
    is_verified: bool = True,
) -> User:
    """Insert a user directly, bypassing registration."""
    db = db_session_maker()
    try:
        user = UserRepository(db).create(
            email=email,
            password_hash=PasswordHasher.hash_password(password),
            role=role,
            is_verified=is_verified,
        )
        db.commit()
        return user
    finally:
        db.close()


def login(test_client: TestClient, email: str, password: str) -> dict:
    """Login and return the response data (tokens and user)."""
    response = test_client.post(
        "/api/auth/login",
        json={"email": email, "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]


def auth_headers(access_token: str) -> dict:
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def db_session():
    """Standalone session on a fresh in-memory database."""
    session_maker = make_session_maker()
    session = session_maker()
    yield session
    session.close()


@pytest.fixture
def auth_client():
    """Create test client with in-memory database.

    Yields a tuple of (TestClient, SessionMaker) for use in tests.
    """
    # Clear rate limiter storage between tests
    limiter.reset()

    testing_session_local = make_session_maker()

    def override_get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client, testing_session_local

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(auth_client):
    """Authorization headers of a logged-in admin."""
    test_client, db_session_maker = auth_client
    create_user(db_session_maker, "admin@example.com", "Admin1234", role=Role.ADMIN)
    tokens = login(test_client, "admin@example.com", "Admin1234")
    return auth_headers(tokens["access_token"])


@pytest.fixture
def user_headers(auth_client):
    """Authorization headers of a logged-in regular user."""
    test_client, db_session_maker = auth_client
    create_user(db_session_maker, "member@example.com", "Member1234")
    tokens = login(test_client, "member@example.com", "Member1234")
    return auth_headers(tokens["access_token"])
