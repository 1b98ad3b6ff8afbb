"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Each test gets a fresh schema and a
session that rolls back after the test.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from finance_tracker.config import TokenConfig
from finance_tracker.main import app
from finance_tracker.models.base import Base, get_db
from finance_tracker.api.deps import get_password_hasher, get_token_issuer
from finance_tracker.services.identity_service import IdentityService
from finance_tracker.services.ledger_service import LedgerService
from finance_tracker.services.password_hasher import PasswordHasher
from finance_tracker.services.token_service import TokenIssuer


# Use SQLite for tests — no external database needed.
TEST_DATABASE_URL = "sqlite:///./test.db"

TEST_SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs256"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    This ensures each test starts with a clean database.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def other_session():
    """A second, independent session, as a concurrent request would have."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def token_config():
    return TokenConfig(
        secret_key=TEST_SECRET_KEY,
        issuer="FinanceTrackerTest",
        audience="FinanceTrackerTestUsers",
    )


@pytest.fixture
def token_issuer(token_config):
    return TokenIssuer(token_config)


@pytest.fixture
def password_hasher():
    """Lowest bcrypt cost, so tests don't spend seconds hashing."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def identity_service(db_session, token_issuer, password_hasher):
    return IdentityService(db_session, token_issuer, password_hasher)


@pytest.fixture
def ledger_service(db_session):
    return LedgerService(db_session)


@pytest.fixture
def client(db_session, token_issuer, password_hasher):
    """
    Provide a test client with the test database.

    We override the get_db dependency so the FastAPI app
    uses our test session instead of the real database, and
    swap in the test token issuer and a cheap hasher.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_issuer] = lambda: token_issuer
    app.dependency_overrides[get_password_hasher] = lambda: password_hasher
    yield TestClient(app)
    app.dependency_overrides.clear()
