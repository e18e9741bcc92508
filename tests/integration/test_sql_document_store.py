"""
SQL document store integration tests.

This module runs the SQLAlchemy document store against a real SQLite database
and checks that the chat repository behaves the same over it as over the
in-memory store.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from sqlalchemy.exc import SQLAlchemyError

from app.core.auth import StaticAuthGuard
from app.database import build_engine
from app.domains.chat.repository import ChatRepository
from app.exceptions.store import DocumentNotFoundError, StoreUnavailableError
from app.shared.cache import EntityCache
from app.store.sql import SQLAlchemyDocumentStore
from tests.conftest import TEST_USER_ID
from tests.factories import ChatFactory


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    """SQL store over a throwaway SQLite file."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path}/store.db")
    store = SQLAlchemyDocumentStore(engine)
    await store.create_schema()
    yield store
    await store.close()


class TestSQLDocumentStore:
    """Integration tests for SQLAlchemyDocumentStore."""

    @pytest.mark.asyncio
    async def test_set_and_get(self, sql_store):
        await sql_store.set("chat", "c1", {"id": "c1", "userId": "u1", "messages": [{"role": "user"}]})

        assert await sql_store.get("chat", "c1") == {"id": "c1", "userId": "u1", "messages": [{"role": "user"}]}
        assert await sql_store.get("chat", "missing") is None

    @pytest.mark.asyncio
    async def test_set_replaces_existing_document(self, sql_store):
        await sql_store.set("chat", "c1", {"a": 1, "b": 2})
        await sql_store.set("chat", "c1", {"a": 3})

        assert await sql_store.get("chat", "c1") == {"a": 3}

    @pytest.mark.asyncio
    async def test_same_id_in_different_collections(self, sql_store):
        await sql_store.set("chat", "k", {"kind": "chat"})
        await sql_store.set("user", "k", {"kind": "user"})

        assert (await sql_store.get("chat", "k"))["kind"] == "chat"
        assert (await sql_store.get("user", "k"))["kind"] == "user"

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, sql_store):
        await sql_store.set("chat", "c1", {"a": 1})
        await sql_store.update("chat", "c1", {"sharePath": "/share/c1"})

        assert await sql_store.get("chat", "c1") == {"a": 1, "sharePath": "/share/c1"}

    @pytest.mark.asyncio
    async def test_update_missing_document(self, sql_store):
        with pytest.raises(DocumentNotFoundError):
            await sql_store.update("chat", "missing", {"a": 1})

    @pytest.mark.asyncio
    async def test_delete(self, sql_store):
        await sql_store.set("chat", "c1", {"a": 1})
        await sql_store.delete("chat", "c1")
        await sql_store.delete("chat", "c1")

        assert await sql_store.get("chat", "c1") is None

    @pytest.mark.asyncio
    async def test_query_orders_newest_first_with_limit(self, sql_store):
        now = datetime.now(UTC)
        chats = [ChatFactory(created_at=now - timedelta(minutes=i)) for i in range(4)]
        for chat in chats:
            await sql_store.set("chat", chat.id, chat.to_document())
        other = ChatFactory(user_id="someone-else", created_at=now + timedelta(minutes=5))
        await sql_store.set("chat", other.id, other.to_document())

        results = await sql_store.query(
            "chat", "userId", TEST_USER_ID, order_by="createdAt", descending=True, limit=3
        )

        assert [doc["id"] for doc in results] == [chat.id for chat in chats[:3]]

    @pytest.mark.asyncio
    async def test_query_without_ordering(self, sql_store):
        await sql_store.set("chat", "c1", {"userId": "u1"})
        await sql_store.set("chat", "c2", {"userId": "u2"})

        results = await sql_store.query("chat", "userId", "u1")

        assert results == [{"userId": "u1"}]

    @pytest.mark.asyncio
    async def test_database_errors_become_store_unavailable(self, sql_store):
        with patch.object(sql_store, "_get", AsyncMock(side_effect=SQLAlchemyError("disk I/O error"))):
            with pytest.raises(StoreUnavailableError) as exc_info:
                await sql_store.get("chat", "c1")

        assert exc_info.value.details["operation"] == "get"
        assert exc_info.value.details["retryable"] is True


class TestChatRepositoryOverSQL:
    """The repository contract holds over the SQL store."""

    @pytest.mark.asyncio
    async def test_save_list_share_delete(self, sql_store, session):
        repository = ChatRepository(
            store=sql_store,
            cache=EntityCache(max_entries=10),
            guard=StaticAuthGuard(session),
            page_size=30,
        )
        older = ChatFactory(created_at=datetime.now(UTC) - timedelta(hours=1))
        newer = ChatFactory()

        await repository.save_chat(older)
        await repository.save_chat(newer)

        assert [chat.id for chat in await repository.get_chats(TEST_USER_ID)] == [newer.id, older.id]

        shared = await repository.share_chat(newer.id)
        assert shared.share_path == f"/share/{newer.id}"
        assert (await sql_store.get("chat", newer.id))["sharePath"] == f"/share/{newer.id}"

        assert await repository.delete_chat(older.id, older.path) is None
        assert await sql_store.get("chat", older.id) is None
        assert [chat.id for chat in await repository.get_chats(TEST_USER_ID)] == [newer.id]

    @pytest.mark.asyncio
    async def test_fresh_cache_reads_through_to_sql(self, sql_store, session):
        chat = ChatFactory()
        await sql_store.set("chat", chat.id, chat.to_document())

        repository = ChatRepository(
            store=sql_store,
            cache=EntityCache(max_entries=10),
            guard=StaticAuthGuard(session),
        )

        assert await repository.get_chat(chat.id, TEST_USER_ID) == chat
