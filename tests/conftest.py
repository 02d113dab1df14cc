"""
Pytest configuration and shared fixtures for the GenDocAI API tests.
"""

import os
import tempfile
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test_secret_key_for_testing_must_be_at_least_32_characters_long"
os.environ["DOC_BUILDER_URL"] = "http://docbuilder.test"
os.environ["UPLOAD_DIR"] = os.path.join(tempfile.gettempdir(), "gendocai-test-uploads")

from app.config import settings  # noqa: E402
from app.db import Base, get_db  # noqa: E402
from app.models.history_model import HistoryRecord  # noqa: F401, E402
from app.models.user_model import User  # noqa: E402
from app.services.auth_service import create_access_token, get_password_hash  # noqa: E402
from app.services.doc_builder_service import DocBuilderClient, get_doc_builder  # noqa: E402
from main import app as fastapi_app  # noqa: E402


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path) -> Generator[str, None, None]:
    """Point the uploads area at a per-test directory."""
    path = str(tmp_path / "uploads")
    with patch.object(settings, "UPLOAD_DIR", path):
        yield path


@pytest.fixture
def doc_builder():
    """Stand-in for the external document builder."""
    return MagicMock(spec=DocBuilderClient)


@pytest.fixture(scope="function")
def client(db_session, doc_builder) -> Generator[TestClient, None, None]:
    """Create a test client with a fresh database and a mocked document builder."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_doc_builder] = lambda: doc_builder

    with TestClient(fastapi_app) as test_client:
        yield test_client

    fastapi_app.dependency_overrides.clear()


# One hash for every fixture user keeps bcrypt out of most tests
_FIXTURE_PASSWORD = "correct horse battery staple"
_FIXTURE_HASH = None


def _fixture_hash():
    global _FIXTURE_HASH
    if _FIXTURE_HASH is None:
        _FIXTURE_HASH = get_password_hash(_FIXTURE_PASSWORD)
    return _FIXTURE_HASH


@pytest.fixture
def fixture_password() -> str:
    return _FIXTURE_PASSWORD


@pytest.fixture
def make_user(db_session):
    def _make_user(email: str) -> User:
        user = User(email=email, hashed_password=_fixture_hash())
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user(make_user) -> User:
    return make_user("alice@gendoc.io")


@pytest.fixture
def other_user(make_user) -> User:
    return make_user("bob@gendoc.io")


def bearer(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def auth_headers(user) -> dict:
    return bearer(user)


def list_uploads(path: str) -> list:
    """Files left in the uploads area (an absent directory counts as empty)."""
    if not os.path.isdir(path):
        return []
    return os.listdir(path)
