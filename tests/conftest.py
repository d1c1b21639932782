"""
Pytest configuration for testing
"""

import os
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set up environment variables for testing before any imports.
# No DATABASE_URL: the app itself runs degraded, tests inject sessions.
os.environ.pop("DATABASE_URL", None)
os.environ.pop("FIREBASE_CREDENTIALS_PATH", None)
os.environ["FIREBASE_PROJECT_ID"] = "test-project"
os.environ["OWNER_UID"] = "owner-uid"
os.environ["ENVIRONMENT"] = "test"


@pytest.fixture(autouse=True)
def mock_firebase_admin(monkeypatch):
    """Mock Firebase Admin SDK to avoid initialization issues in tests"""
    mock_credentials = MagicMock()
    monkeypatch.setattr("firebase_admin.credentials.Certificate", mock_credentials.Certificate)

    mock_init = MagicMock()
    monkeypatch.setattr("firebase_admin.initialize_app", mock_init)

    mock_auth = MagicMock()
    monkeypatch.setattr("app.core.firebase.auth", mock_auth)

    yield mock_auth


@pytest.fixture(scope="function")
def db_engine():
    """In-memory SQLite engine shared by every session of one test"""
    # Import after env vars are set
    from app.core.database import Base
    from app import models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a new database session for a test"""
    session = session_factory()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def make_user(db_session):
    """Factory inserting users into the test database"""
    from app.models.user import User, UserRole

    counter = {"n": 0}

    def _make_user(role=UserRole.USER, email=None):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            open_id=f"uid_{n}",
            name=f"User {n}",
            email=email or f"user{n}@example.com",
            role=role,
            last_signed_in=datetime.utcnow(),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    from app.models.user import UserRole
    return make_user(role=UserRole.ADMIN)
