"""Shared test fixtures and configuration."""
import os

# Point the application engine at a throwaway database before it is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from datetime import timedelta  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from quickvote.main import app  # noqa: E402
from quickvote.db.base import Base  # noqa: E402
from quickvote.db.session import make_engine  # noqa: E402
from quickvote.api.deps import get_db, get_notifier  # noqa: E402
from quickvote.core.rate_limit import limiter  # noqa: E402
from quickvote.realtime.notifier import InProcessNotifier  # noqa: E402
from quickvote.store.sql import SqlSessionStore  # noqa: E402


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite://"
SESSION_TTL = timedelta(days=30)


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Disable rate limiting for all tests except rate limiting tests."""
    limiter.reset()
    if "rate_limit" in request.keywords:
        limiter.enabled = True
        yield
        limiter.reset()
    else:
        limiter.enabled = False
        yield
        limiter.enabled = True


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh database for each test."""
    engine = make_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a new database session for a test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sql_store(db_session):
    return SqlSessionStore(db_session, ttl=SESSION_TTL)


@pytest.fixture
def notifier():
    """A fresh channel registry per test."""
    return InProcessNotifier()


@pytest.fixture(scope="function")
def client(db_session, notifier):
    """Create a test client with a test database and its own notifier."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def create_session(client):
    """Create a session through the API and return its JSON body."""
    def _create(**overrides):
        payload = {
            "question": "Where should we eat?",
            "options": ["A", "B", "C"],
            "voteCount": 2,
            "voteMode": "exactly",
        }
        payload.update(overrides)
        response = client.post("/api/sessions", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["session"]

    return _create
