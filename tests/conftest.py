"""
Pytest configuration and fixtures for the test suite.

Every test gets its own app over a temporary data directory, so users and
sessions never leak between tests.
"""
from typing import Callable, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from profilehub.core.config import Settings
from profilehub.core.context import AppContext
from profilehub.core.security import unsign_session_id
from profilehub.main import create_app

TEST_SECRET = "test-secret-key-for-testing-purposes-only"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        data_dir=tmp_path,
        session_secret=TEST_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def ctx(app: FastAPI) -> AppContext:
    return app.state.ctx


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Client that does not follow redirects, so 302s can be asserted."""
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


@pytest.fixture
def db(ctx: AppContext, client: TestClient) -> Generator[Session, None, None]:
    """Direct session on the main database (tables exist once client started)."""
    session = ctx.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def register(client: TestClient) -> Callable:
    """Register through the HTTP form; the client ends up logged in as that user."""

    def _register(login: str, password: str = "pw123", display_name: str | None = None):
        return client.post(
            "/register",
            data={"login": login, "password": password, "display_name": display_name or login.title()},
        )

    return _register


@pytest.fixture
def session_id(client: TestClient, settings: Settings) -> Callable[[], str | None]:
    """Read the session id out of the client's signed cookie."""

    def _session_id():
        return unsign_session_id(client.cookies.get(settings.session_cookie_name), settings.session_secret)

    return _session_id
