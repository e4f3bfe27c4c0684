"""Pytest configuration and fixtures."""

import os
import secrets

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from user_api.database import Base, get_db
from user_api.main import app
from user_api.models.enums import Role
from user_api.models.user import User
from user_api.services.auth import generate_api_key, get_password_hash

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/user_api", "/user_api_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# bcrypt is slow; hash once and share it across fixture users
PASSWORD_HASH = get_password_hash("password123")


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
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
def make_user(db):
    """Factory that stores a user with the given role."""

    def _make_user(role: Role = Role.USER, **overrides) -> User:
        token = secrets.token_hex(4)
        fields = {
            "name": f"User {token}",
            "email": f"user-{token}@example.com",
            "password_hash": PASSWORD_HASH,
            "phone_number": "+1 555 0100",
            "api_key": generate_api_key(),
            "role": role,
        }
        fields.update(overrides)
        user = User(**fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    """An administrator."""
    return make_user(Role.ADMIN)


@pytest.fixture
def regular_user(make_user):
    """A regular user."""
    return make_user(Role.USER)


@pytest.fixture
def user_payload():
    """A valid create payload."""
    return {
        "name": "Jane Doe",
        "email": "jane.doe@example.com",
        "password": "s3cretPassw0rd",
        "phone_number": "+1 (555) 010-2030",
        "role": "user",
    }
