"""
Document store interface.

The 'DocumentStore' ABC is the pluggable backend holding chat and user
documents. Documents are JSON-compatible dicts addressed by collection name and
document id. Concrete implementations ('InMemoryDocumentStore',
'SQLAlchemyDocumentStore') are interchangeable at construction time, keeping
the chat repository free of storage-specific code.

Implementations must raise 'StoreError' subclasses for backend failures so
callers can tell store trouble apart from programming errors.
"""

from abc import ABC, abstractmethod
from typing import Any

Document = dict[str, Any]

CHAT_COLLECTION = "chat"
USER_COLLECTION = "user"


class DocumentStore(ABC):
    """Abstract async document store."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Document | None:
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        field: str,
        value: Any,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        """Documents whose ``field`` equals ``value``, optionally ordered and limited."""

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Document) -> None:
        """Create or fully replace a document."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        """Merge ``fields`` into an existing document. Raises 'DocumentNotFoundError'."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document. Missing documents are ignored."""

    async def close(self) -> None:
        return None
