"""Shared test fixtures and configuration."""
from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import patch

from attendance.main import app
from attendance.db.base import Base
from attendance.api.deps import get_db
from attendance.core.constants import TEACHER_TOKEN_COOKIE
from attendance.core.security import create_access_token
from tests.utils import FakeClock, make_store


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Disable rate limiting for all tests except rate limiting tests."""
    from attendance.core.rate_limit import limiter

    limiter.reset()
    if "rate_limit" in request.keywords:
        yield
        limiter.reset()
    else:
        limiter.enabled = False
        try:
            yield
        finally:
            limiter.enabled = True


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh database for each test."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
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
def fake_clock():
    return FakeClock()


@pytest.fixture
def store(fake_clock):
    """Store with a fake clock and seeded codes."""
    return make_store(fake_clock)


@pytest.fixture(scope="function")
def client(db_session, store):
    """Test client whose app uses the test database and the fake-clock store."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    @contextmanager
    def override_db_context():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with patch("attendance.main.get_db_context", override_db_context):
        with TestClient(app) as test_client:
            app.state.store = store
            yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def teacher_token():
    """Generate a valid teacher JWT token for the configured account."""
    return create_access_token({"sub": "1"})


@pytest.fixture
def teacher_client(client, teacher_token):
    """Create a test client with the teacher cookie already set."""
    client.cookies.set(TEACHER_TOKEN_COOKIE, teacher_token)
    return client
