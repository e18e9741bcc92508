"""In-process document store used for development and tests."""

import copy
from collections import defaultdict
from typing import Any

from app.exceptions.store import DocumentNotFoundError
from app.store.base import Document, DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store. Documents are deep-copied in and out."""

    def __init__(self):
        self._collections: defaultdict[str, dict[str, Document]] = defaultdict(dict)

    async def get(self, collection: str, doc_id: str) -> Document | None:
        document = self._collections[collection].get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    async def query(
        self,
        collection: str,
        field: str,
        value: Any,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        matches = [doc for doc in self._collections[collection].values() if doc.get(field) == value]
        if order_by is not None:
            # Documents missing the order field are excluded, as in ordered document queries
            matches = [doc for doc in matches if doc.get(order_by) is not None]
            matches.sort(key=lambda doc: doc[order_by], reverse=descending)
        if limit is not None:
            matches = matches[:limit]
        return copy.deepcopy(matches)

    async def set(self, collection: str, doc_id: str, data: Document) -> None:
        self._collections[collection][doc_id] = copy.deepcopy(data)

    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        document = self._collections[collection].get(doc_id)
        if document is None:
            raise DocumentNotFoundError(f"No document {doc_id!r} in {collection!r}")
        document.update(copy.deepcopy(fields))

    async def delete(self, collection: str, doc_id: str) -> None:
        self._collections[collection].pop(doc_id, None)

    def count(self, collection: str) -> int:
        return len(self._collections[collection])
