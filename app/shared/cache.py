"""Bounded least-recently-used cache for chats and per-user chat-id lists.

One cache instance is created at process start and shared by every request.
Chats are keyed by their id; a user's recent chat ids are keyed by
``"<user_id>_chats"``. Both kinds share the same capacity and eviction order.
"""

import logging
import threading
from collections import OrderedDict
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

USER_CHATS_KEY_SUFFIX = "_chats"


def user_chats_key(user_id: str) -> str:
    """Cache key for the ordered list of a user's recent chat ids."""
    return f"{user_id}{USER_CHATS_KEY_SUFFIX}"


class LRUCache(Generic[V]):
    """Fixed-capacity LRU mapping.

    ``get`` and ``set`` both refresh recency. Each operation holds an internal
    lock, so the cache can be shared across threads as well as tasks.
    """

    def __init__(self, max_entries: int):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: OrderedDict[str, V] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> V | None:
        with self._lock:
            if key not in self._entries:
                return None
            self._entries.move_to_end(key)
            return self._entries[key]

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry %s", evicted)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class EntityCache(LRUCache[object]):
    """LRU cache holding ``Chat`` records and per-user chat-id tuples."""

    def get_chat_ids(self, user_id: str) -> tuple[str, ...] | None:
        """Cached chat ids of a user, or None if no id list is cached under the key."""
        chat_ids = self.get(user_chats_key(user_id))
        return chat_ids if isinstance(chat_ids, tuple) else None

    def set_chat_ids(self, user_id: str, chat_ids: list[str] | tuple[str, ...]) -> None:
        self.set(user_chats_key(user_id), tuple(chat_ids))

    def delete_chat_ids(self, user_id: str) -> None:
        self.delete(user_chats_key(user_id))
