# tests/conftest.py
import os

# Set up test environment variables BEFORE any other imports
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-bytes!")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("OPENAI_API_KEY", "")

from datetime import UTC, datetime, timedelta

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.auth import StaticAuthGuard
from app.core.config import settings
from app.core.security import Session
from app.domains.chat.repository import ChatRepository
from app.main import create_app
from app.shared.cache import EntityCache
from app.store.memory import InMemoryDocumentStore
from tests.factories import ChatFactory

TEST_USER_ID = "user-alice"
OTHER_USER_ID = "user-bob"


def make_token(user_id: str, email: str | None = None, expires_in: timedelta = timedelta(hours=1)) -> str:
    """Sign a session token the way the login subsystem does."""
    payload = {"sub": user_id, "exp": datetime.now(UTC) + expires_in}
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


# Store and cache fixtures
@pytest.fixture
def store():
    """Fresh in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def cache():
    """Fresh entity cache per test."""
    return EntityCache(max_entries=100)


@pytest.fixture
def session():
    return Session(user_id=TEST_USER_ID, email="alice@example.com")


@pytest.fixture
def other_session():
    return Session(user_id=OTHER_USER_ID, email="bob@example.com")


# Repository fixtures
@pytest.fixture
def repository(store, cache, session):
    """Repository acting for the test user."""
    return ChatRepository(store=store, cache=cache, guard=StaticAuthGuard(session), page_size=30)


@pytest.fixture
def anonymous_repository(store, cache):
    """Repository acting without a session."""
    return ChatRepository(store=store, cache=cache, guard=StaticAuthGuard(None), page_size=30)


@pytest.fixture
def other_repository(store, cache, other_session):
    """Repository acting for a second user over the same store and cache."""
    return ChatRepository(store=store, cache=cache, guard=StaticAuthGuard(other_session), page_size=30)


# Chat fixtures
@pytest_asyncio.fixture
async def stored_chat(store):
    """A chat owned by the test user, present in the store only."""
    chat = ChatFactory(user_id=TEST_USER_ID)
    await store.set("chat", chat.id, chat.to_document())
    return chat


# API fixtures
@pytest.fixture
def app(store, cache):
    return create_app(document_store=store, entity_cache=cache)


@pytest_asyncio.fixture
async def client(app):
    """Anonymous test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def authenticated_client(app):
    """Test client carrying a session token for the test user."""
    headers = {"Authorization": f"Bearer {make_token(TEST_USER_ID, 'alice@example.com')}"}
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test", headers=headers) as ac:
        yield ac


@pytest_asyncio.fixture
async def other_client(app):
    """Test client carrying a session token for the second user."""
    headers = {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test", headers=headers) as ac:
        yield ac
