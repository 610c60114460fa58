"""
Pytest fixtures for the test suite.

Data-layer tests use an in-memory SQLite engine and a session that rolls back
after each test, so tests do not affect each other.

API tests run the real app (security dependency, row-scoping hook, voters)
against a seeded in-memory database shared through a StaticPool.
"""
from __future__ import annotations

import os

# Must be set before app.settings / app.db.session are imported.
os.environ.setdefault("APP_DB_URL", "sqlite://")
os.environ.setdefault("APP_INIT_DB_ON_STARTUP", "false")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-bytes!")

import pytest
from fastapi import Request
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.security.passwords import PasswordHasher


TEST_DB_URL = "sqlite:///:memory:"

_fast_hasher = PasswordHasher(cost_factor=4)


@pytest.fixture
def engine():
    """Create a fresh in-memory SQLite engine for each test."""
    return create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        echo=False,
    )


@pytest.fixture
def tables(engine):
    """Create all ORM tables on the test engine."""
    from app.db.base import Base
    import app.models.calendar  # noqa: F401
    import app.models.security  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def db_session(tables):
    """
    Provide a Session bound to the test DB; roll back after each test.

    Use this in tests that need a database (e.g. data layer tests). The
    transaction is rolled back so the next test gets a clean state.
    """
    connection = tables.connect()
    transaction = connection.begin()
    TestSession = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        class_=Session,
    )
    session = TestSession()
    yield session
    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def fast_passwords(monkeypatch):
    """Swap the cost-12 default hasher for a cost-4 one (bcrypt is slow on purpose)."""
    monkeypatch.setattr("app.db.init_db.hash_password", _fast_hasher.hash_password)
    monkeypatch.setattr("app.routers.users.hash_password", _fast_hasher.hash_password)


@pytest.fixture
def seeded_sessionmaker(fast_passwords):
    """In-memory database with the demo data (3 users, their calendars, images, events)."""
    from app.db.base import Base
    from app.db.init_db import seed_demo_data

    api_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=api_engine)

    factory = sessionmaker(bind=api_engine, autocommit=False, autoflush=False, class_=Session)
    with factory() as db:
        seed_demo_data(db)

    yield factory
    api_engine.dispose()


@pytest.fixture
def api_app(seeded_sessionmaker):
    from app.db.session import bind_access_context, get_db
    from app.main import create_app

    application = create_app()

    def override_get_db(request: Request):
        db = seeded_sessionmaker()
        try:
            bind_access_context(db, request)
            yield db
        finally:
            db.close()

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
def client(api_app):
    # Context manager runs the lifespan (security config, filter, voters, JWT).
    with TestClient(api_app) as c:
        yield c


@pytest.fixture
def login(client):
    """Return a function that logs a seeded user in and builds the auth header."""

    def _login(username: str) -> dict[str, str]:
        resp = client.post(
            "/api/v1/token/get",
            json={"email": f"{username}@example.com", "password": username},
        )
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _login
