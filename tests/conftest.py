# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from src.config import settings
from src.database import get_db
from src.events import event_bus
from src.main import app
from src.models import Claim, User
from src.models.base import Base
from src.models.enums import UserRole
from src.security import get_password_hash

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpassword123"  # nosec - test-only secret  # noqa: S105
# bcrypt is slow on purpose, hash once for all fixtures
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Store uploaded documents in a per-test directory."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(path))
    return path


@pytest.fixture(autouse=True)
def clean_event_bus():
    """Drop subscriptions made during a test."""
    yield
    event_bus.clear()


def _create_user(
    db_session,
    username: str,
    role: UserRole,
    department: str | None = "Computing",
    first_name: str = "Test",
    last_name: str = "User",
) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=TEST_PASSWORD_HASH,
        first_name=first_name,
        last_name=last_name,
        department=department,
        role=role,
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _create_claim(
    db_session,
    lecturer: User,
    hours: str = "40",
    rate: str = "150",
    period: str = "2025-05-01",
) -> Claim:
    claim = Claim(
        lecturer_id=lecturer.id,
        period=date.fromisoformat(period),
        hours_worked=Decimal(hours),
        hourly_rate=Decimal(rate),
    )
    db_session.add(claim)
    db_session.commit()
    db_session.refresh(claim)
    return claim


@pytest.fixture
def make_user(db_session):
    """Factory for persisted users."""

    def factory(username: str, role: UserRole = UserRole.LECTURER, **kwargs) -> User:
        return _create_user(db_session, username, role, **kwargs)

    return factory


@pytest.fixture
def make_claim(db_session):
    """Factory for persisted pending claims."""

    def factory(lecturer: User, **kwargs) -> Claim:
        return _create_claim(db_session, lecturer, **kwargs)

    return factory


@pytest.fixture
def lecturer(db_session) -> User:
    return _create_user(
        db_session,
        "lecturer",
        UserRole.LECTURER,
        first_name="Ada",
        last_name="Lovelace",
    )


@pytest.fixture
def other_lecturer(db_session) -> User:
    """A lecturer in a different department."""
    return _create_user(
        db_session,
        "other",
        UserRole.LECTURER,
        department="History",
        first_name="Edward",
        last_name="Gibbon",
    )


@pytest.fixture
def coordinator(db_session) -> User:
    return _create_user(db_session, "coordinator", UserRole.PROGRAMME_COORDINATOR)


@pytest.fixture
def manager(db_session) -> User:
    return _create_user(
        db_session, "manager", UserRole.ACADEMIC_MANAGER, department=None
    )


@pytest.fixture
def hr_user(db_session) -> User:
    return _create_user(db_session, "hr", UserRole.HR, department=None)


@pytest.fixture
def claim(db_session, lecturer) -> Claim:
    return _create_claim(db_session, lecturer)


def login(client, username: str) -> None:
    """Log the test client in as ``username``."""
    response = client.post(
        "/api/v1/auth/login",
        json={"username": username, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200


@pytest.fixture
def lecturer_client(client, lecturer):
    """Create a test client authenticated as the lecturer."""
    login(client, "lecturer")
    return client


@pytest.fixture
def manager_client(client, manager):
    """Create a test client authenticated as the academic manager."""
    login(client, "manager")
    return client


@pytest.fixture
def hr_client(client, hr_user):
    """Create a test client authenticated as HR."""
    login(client, "hr")
    return client


@pytest.fixture
def login_as(client):
    """Switch the test client to another user."""

    def _login(username: str):
        login(client, username)
        return client

    return _login
