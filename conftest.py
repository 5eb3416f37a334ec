"""
Root conftest.py for pytest configuration and shared fixtures.
"""
import json
import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment BEFORE importing any app code
os.environ["ENV"] = "test"
os.environ.pop("DATABASE_URL", None)
os.environ.pop("GITHUB_WEBHOOK_SECRET", None)

from services.receiver.app.core.signature import compute_signature  # noqa: E402

TEST_WEBHOOK_SECRET = "test-webhook-secret"


@pytest.fixture(scope="function")
def test_db_engine():
    """
    Create a test database engine using SQLite in-memory.
    Function-scoped so every test starts from an empty webhook_events table.
    """
    from services.receiver.app.db import Base
    # Import models so they're registered with Base.metadata
    from services.receiver.app.models.events import WebhookEvent  # noqa: F401

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Required for SQLite in-memory
        echo=False,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_db_engine) -> sessionmaker[Session]:
    return sessionmaker(bind=test_db_engine, expire_on_commit=False)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Session for inspecting what the app wrote."""
    with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
def event_store(session_factory):
    from services.receiver.app.services.event_store import SqlAlchemyEventStore

    return SqlAlchemyEventStore(session_factory)


@pytest.fixture
def webhook_secret() -> str:
    return TEST_WEBHOOK_SECRET


@pytest.fixture
def settings(webhook_secret):
    from services.receiver.app.core.config import Settings

    return Settings(
        env="test",
        github_webhook_secret=webhook_secret,
        database_url=None,
        persistence_timeout_seconds=2.0,
    )


@pytest.fixture(scope="function")
def client(settings, event_store) -> Generator[TestClient, None, None]:
    """
    Create a FastAPI test client wired to the in-memory event store.
    """
    from services.receiver.app.main import create_app

    app = create_app(settings=settings, event_store=event_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def pull_request_body() -> bytes:
    return json.dumps(
        {
            "action": "opened",
            "repository": {"full_name": "a/b"},
            "sender": {"login": "u"},
        }
    ).encode("utf-8")


@pytest.fixture
def signed_headers(webhook_secret):
    """Build GitHub headers for a body, signed with the test secret."""

    def _build(body: bytes, event_type: str = "pull_request", delivery_id: str = "delivery-1"):
        return {
            "Content-Type": "application/json",
            "X-GitHub-Event": event_type,
            "X-GitHub-Delivery": delivery_id,
            "X-Hub-Signature-256": compute_signature(webhook_secret, body),
        }

    return _build


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
