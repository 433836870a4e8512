"""
Notebook API - Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that needs persistence gets its own SQLite file under
       tmp_path, so tests never share documents. Tokens are minted with the
       same python-jose library the verifier uses.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:  Settings pointing at a per-test SQLite file
    ├── store:          Connected DocumentStore with the schema created
    ├── verifier:       TokenVerifier sharing the test secret
    ├── make_token:     Callable minting signed JWTs for a subject
    ├── auth_headers:   Callable returning {"Authorization": "Bearer ..."}
    ├── test_client:    HTTPX AsyncClient for the app around the real store
    ├── mock_store:     AsyncMock standing in for DocumentStore
    └── mock_client:    HTTPX AsyncClient for the app around mock_store
"""

import os
import time
from typing import Any, Callable, Dict
from unittest.mock import AsyncMock

# Must be set before notebook_api.config is imported anywhere
TEST_JWT_SECRET = "test-secret-not-for-production"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./never-connected.db"
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt

from notebook_api.config import Settings
from notebook_api.database import DocumentStore
from notebook_api.main import create_app
from notebook_api.services.identity import TokenVerifier


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notebook.db'}",
        jwt_secret=TEST_JWT_SECRET,
        jwt_algorithms="HS256",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def store(test_settings):
    """
    A connected DocumentStore backed by a fresh SQLite file.

    The schema is created directly from the ORM metadata; Alembic is not
    involved in tests.
    """
    document_store = DocumentStore(test_settings.database_url)
    await document_store.connect()
    await document_store.create_schema()
    yield document_store
    await document_store.close()


@pytest.fixture
def verifier() -> TokenVerifier:
    return TokenVerifier(secret=TEST_JWT_SECRET, algorithms=["HS256"])


@pytest.fixture
def make_token() -> Callable[..., str]:
    """
    Mint a signed token.

    Usage:
        make_token("u1")                              # valid for 15 minutes
        make_token("u1", exp=int(time.time()) - 60)   # already expired
        make_token("u1", secret="other")              # wrong signing key
    """

    def _make(subject: Any = "u1", secret: str = TEST_JWT_SECRET, algorithm: str = "HS256", **claims) -> str:
        now = int(time.time())
        payload: Dict[str, Any] = {"iat": now, "exp": now + 15 * 60}
        if subject is not None:
            payload["sub"] = subject
        payload.update(claims)
        return jwt.encode(payload, secret, algorithm=algorithm)

    return _make


@pytest.fixture
def auth_headers(make_token) -> Callable[[str], Dict[str, str]]:
    def _headers(subject: str = "u1") -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_token(subject)}"}

    return _headers


@pytest_asyncio.fixture
async def test_client(test_settings, store, verifier):
    """
    HTTPX AsyncClient talking to an app built around the real test store.

    ASGITransport does not run the lifespan; the `store` fixture has
    already connected the store and created the schema.
    """
    app = create_app(test_settings, store=store, verifier=verifier)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_store():
    """
    A DocumentStore double whose primitives are AsyncMocks.

    Usage:
        mock_store.find.side_effect = ConnectionResetError("reset")
        mock_store.insert_one.assert_not_awaited()
    """
    return AsyncMock(spec=DocumentStore)


@pytest_asyncio.fixture
async def mock_client(test_settings, mock_store, verifier):
    app = create_app(test_settings, store=mock_store, verifier=verifier)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
