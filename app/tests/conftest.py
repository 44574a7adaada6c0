import os
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker

# CRITICAL: Set test configuration BEFORE importing any app modules
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
os.environ["CLERK_JWT_KEY"] = "test-clerk-signing-key"
os.environ["CLERK_JWT_ALGORITHM"] = "HS256"
os.environ["CLERK_WEBHOOK_SECRET"] = "whsec_MfKQ9r8GKYqrTwjUPD8ILPZIo2LaLaSw"
os.environ["UNSPLASH_ACCESS_KEY"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"

from app.main import app
from app.database import Base, enable_sqlite_foreign_keys
import app.database as db_module
import app.dependencies as dependencies_module
from app.services import image_service as image_service_module

TEST_JWT_KEY = os.environ["CLERK_JWT_KEY"]


@pytest.fixture(scope="session")
def test_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # share same in-memory DB across connections
    )
    enable_sqlite_foreign_keys(engine)
    return engine


@pytest.fixture()
def db_session(test_engine):
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    # Fresh schema per test to avoid cross-test data
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def patch_sessionlocal(monkeypatch, test_engine, db_session):
    monkeypatch.setattr(db_module, "engine", test_engine, raising=False)

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    monkeypatch.setattr(db_module, "SessionLocal", TestingSessionLocal, raising=True)
    # get_db() resolves SessionLocal from this module at call time
    monkeypatch.setattr(
        dependencies_module, "SessionLocal", TestingSessionLocal, raising=True
    )

    # Disable rate limiter globally for tests
    if hasattr(app.state, "limiter"):
        setattr(app.state.limiter, "enabled", False)
    yield


@pytest.fixture(autouse=True)
def isolate_image_service(monkeypatch):
    image_service_module.clear_cache()
    monkeypatch.setattr(
        image_service_module.settings, "UNSPLASH_ACCESS_KEY", "", raising=True
    )
    yield
    image_service_module.clear_cache()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def auth_headers():
    """Build Authorization headers carrying a Clerk-style session token."""

    def _headers(user_id: str) -> dict:
        token = jwt.encode(
            {"sub": user_id, "sid": f"sess_{user_id}"}, TEST_JWT_KEY, algorithm="HS256"
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
