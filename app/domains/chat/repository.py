"""Chat repository: read-through / write-through access to chat history.

The document store is the system of record. The entity cache is a disposable
view in front of it: reads populate it on miss, saves and shares overwrite the
cached chat after the store write succeeds, deletes drop the chat and its
owner's chat-id list before the store delete.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from app.core.auth import AuthGuard
from app.core.config import settings
from app.exceptions.store import StoreError, StoreTimeoutError
from app.schemas.chat import Chat, ErrorResult
from app.shared.cache import USER_CHATS_KEY_SUFFIX, EntityCache
from app.store.base import CHAT_COLLECTION, DocumentStore

from .revalidation import ROOT_PATH, LoggingPathRevalidator, PathRevalidator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChatRepository:
    """Entry point for every chat read, write and delete."""

    def __init__(
        self,
        store: DocumentStore,
        cache: EntityCache,
        guard: AuthGuard,
        revalidator: PathRevalidator | None = None,
        page_size: int | None = None,
        store_timeout: float | None = None,
    ):
        """Initialize the repository for one request.

        Args:
            store: Process-wide document store.
            cache: Process-wide entity cache.
            guard: Supplies the session of the current caller.
            revalidator: Invalidates rendered views after deletes and clears.
            page_size: Number of chats fetched per user listing.
            store_timeout: Seconds allowed per store call.
        """
        self.store = store
        self.cache = cache
        self.guard = guard
        self.revalidator = revalidator or LoggingPathRevalidator()
        self.page_size = settings.chat_page_size if page_size is None else page_size
        self.store_timeout = settings.store_request_timeout if store_timeout is None else store_timeout
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")
        if self.store_timeout <= 0:
            raise ValueError("store_timeout must be positive")

    async def get_chats(self, user_id: str | None, limit: int | None = None) -> list[Chat]:
        """Get a user's most recent chats, newest first.

        Store failures are logged and produce an empty list.

        Args:
            user_id: Owner of the chats; empty means anonymous.
            limit: Maximum number of chats, defaults to the page size.

        Returns:
            Chats ordered by creation time, descending.
        """
        if not user_id:
            return []
        limit = min(limit or self.page_size, self.page_size)

        try:
            cached_ids = self.cache.get_chat_ids(user_id)
            if cached_ids is not None:
                return await self._resolve_chat_ids(cached_ids[:limit])

            documents = await self._call_store(
                self.store.query(
                    CHAT_COLLECTION,
                    "userId",
                    user_id,
                    order_by="createdAt",
                    descending=True,
                    limit=self.page_size,
                )
            )
            chats = [Chat.from_document(document) for document in documents]
        except StoreError as e:
            logger.error(f"Failed to load chats for user {user_id}: {str(e.message)}")
            return []

        if not chats:
            logger.info(f"No chats found for user {user_id}")

        for chat in chats:
            self.cache.set(chat.id, chat)
        self.cache.set_chat_ids(user_id, [chat.id for chat in chats])
        return chats[:limit]

    async def get_chat(self, chat_id: str, user_id: str | None) -> Chat | None:
        """Get a chat owned by ``user_id``.

        A chat belonging to someone else is reported exactly like a missing one.
        """
        try:
            chat = await self._read_through(chat_id)
        except StoreError as e:
            logger.error(f"Failed to load chat {chat_id}: {str(e.message)}")
            return None

        if chat is None or not user_id or chat.user_id != user_id:
            return None
        return chat

    async def get_shared_chat(self, chat_id: str) -> Chat | None:
        """Get a chat by id if, and only if, it has been shared."""
        try:
            chat = await self._read_through(chat_id)
        except StoreError as e:
            logger.error(f"Failed to load shared chat {chat_id}: {str(e.message)}")
            return None

        if chat is None or not chat.is_shared:
            return None
        return chat

    async def save_chat(self, chat: Chat) -> None:
        """Persist a chat for the current session.

        Anonymous callers are skipped silently. So are chats that do not
        belong to the session: a chat's owner never changes once stored.
        Store failures are logged and not raised; the chat may then be
        missing from history.
        """
        session = await self.guard.get_session()
        if session is None:
            return None

        if chat.user_id != session.user_id:
            logger.warning(f"Refusing to save chat {chat.id} for user {chat.user_id} from session {session.user_id}")
            return None
        if chat.id.endswith(USER_CHATS_KEY_SUFFIX):
            # Would collide with a user's cached chat-id list
            logger.warning(f"Refusing to save chat with reserved id {chat.id}")
            return None

        try:
            existing = await self._call_store(self.store.get(CHAT_COLLECTION, chat.id))
            if existing is not None and existing.get("userId") != session.user_id:
                logger.warning(f"Refusing to overwrite chat {chat.id} owned by another user")
                return None
            await self._call_store(self.store.set(CHAT_COLLECTION, chat.id, chat.to_document()))
        except StoreError as e:
            logger.error(f"Error writing chat {chat.id}: {str(e.message)}")
            return None

        self.cache.set(chat.id, chat)
        cached_ids = self.cache.get_chat_ids(chat.user_id)
        if cached_ids is not None and chat.id not in cached_ids:
            self.cache.delete_chat_ids(chat.user_id)
        return None

    async def delete_chat(self, chat_id: str, path: str) -> ErrorResult | None:
        """Delete a chat owned by the current session.

        Args:
            chat_id: Chat to delete.
            path: Route of the chat view to revalidate.

        Returns:
            None on success (including when the chat does not exist), or an
            ``Unauthorized`` error result.

        Raises:
            StoreUnavailableError: The store could not be read or written.
        """
        session = await self.guard.get_session()
        if session is None:
            return ErrorResult.unauthorized()

        document = await self._call_store(self.store.get(CHAT_COLLECTION, chat_id))
        if document is not None:
            owner = document.get("userId")
            if owner != session.user_id:
                return ErrorResult.unauthorized()

            self.cache.delete(chat_id)
            self.cache.delete_chat_ids(owner)
            await self._call_store(self.store.delete(CHAT_COLLECTION, chat_id))
            logger.info(f"Deleted chat {chat_id} for user {owner}")

        await self.revalidator.revalidate(ROOT_PATH)
        await self.revalidator.revalidate(path)
        return None

    async def clear_chats(self) -> ErrorResult | None:
        """Forget every cached chat and chat list for the current session.

        Only the cache is cleared; stored chats are left in place.
        """
        session = await self.guard.get_session()
        if session is None:
            return ErrorResult.unauthorized()

        self.cache.clear()
        logger.warning(f"Cleared chat cache for user {session.user_id}; stored chats were not deleted")
        await self.revalidator.revalidate(ROOT_PATH)
        return None

    async def share_chat(self, chat_id: str) -> Chat | ErrorResult:
        """Publish a chat owned by the current session under ``/share/<id>``.

        Returns:
            The chat including its share path, or an error result.

        Raises:
            StoreUnavailableError: The store could not be read or written.
        """
        session = await self.guard.get_session()
        if session is None:
            return ErrorResult.unauthorized()

        document = await self._call_store(self.store.get(CHAT_COLLECTION, chat_id))
        chat = Chat.from_document(document) if document is not None else None
        if chat is None or chat.user_id != session.user_id:
            return ErrorResult.something_went_wrong()

        share_path = Chat.share_path_for(chat.id)
        await self._call_store(self.store.update(CHAT_COLLECTION, chat.id, {"sharePath": share_path}))

        shared = chat.model_copy(update={"share_path": share_path})
        self.cache.set(shared.id, shared)
        return shared

    # Private helper methods

    async def _read_through(self, chat_id: str) -> Chat | None:
        """Return the cached chat, or load it from the store and cache it."""
        cached = self.cache.get(chat_id)
        if isinstance(cached, Chat):
            return cached

        document = await self._call_store(self.store.get(CHAT_COLLECTION, chat_id))
        if document is None:
            return None

        chat = Chat.from_document(document)
        self.cache.set(chat.id, chat)
        return chat

    async def _resolve_chat_ids(self, chat_ids: tuple[str, ...]) -> list[Chat]:
        chats = []
        for chat_id in chat_ids:
            chat = await self._read_through(chat_id)
            if chat is not None:
                chats.append(chat)
        return chats

    async def _call_store(self, operation: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(operation, timeout=self.store_timeout)
        except TimeoutError:
            raise StoreTimeoutError(
                f"Store call exceeded {self.store_timeout}s",
                details={"timeout": self.store_timeout},
            ) from None
