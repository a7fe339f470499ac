"""
Test configuration and fixtures for the URL shortener.
This centralizes all test setup, making individual tests clean.
"""

import os
import socket

# Point the app at a throw-away database before settings are loaded
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["STORE_BACKEND"] = "sql"

import pytest
from fastapi.testclient import TestClient

from main import app
from shorturl_app.database.connection import Base, SessionLocal, engine, get_db
from shorturl_app.dependencies import get_validator
from shorturl_app.models import Counter, URL  # noqa: F401  (register tables)
from shorturl_app.validation.validator import URLValidator


class FakeResolver:
    """
    Stand-in for DNS: every hostname resolves except the ones listed.
    Records each lookup so tests can assert DNS was (not) consulted.
    """

    def __init__(self, unresolvable=("does-not-exist.invalid",)):
        self.unresolvable = set(unresolvable)
        self.calls = []

    async def __call__(self, hostname):
        self.calls.append(hostname)
        if hostname in self.unresolvable:
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
        return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("93.184.216.34", 0))]


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def validator(resolver):
    return URLValidator(resolver=resolver)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session, validator):
    """
    Create a test client with database and DNS dependencies overridden.
    This is the main fixture that tests will use.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_validator] = lambda: validator

    # Entering the client runs startup, which initializes the counter
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
