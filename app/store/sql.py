"""SQL-backed document store built on async SQLAlchemy."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.core.config import settings
from app.database import build_session_factory, create_schema
from app.exceptions.store import DocumentNotFoundError, StoreUnavailableError
from app.store.base import Document, DocumentStore
from models import Document as DocumentRow

logger = logging.getLogger(__name__)

transient_retry = retry(
    retry=retry_if_exception_type(OperationalError),
    stop=stop_after_attempt(settings.store_max_retry_attempts),
    wait=wait_exponential(min=settings.store_retry_min_wait, max=settings.store_retry_max_wait),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


def _json_field(field: str, value: Any):
    """Typed JSON path expression matching the Python type of ``value``."""
    element = DocumentRow.data[field]
    if isinstance(value, bool):
        return element.as_boolean()
    if isinstance(value, int):
        return element.as_integer()
    if isinstance(value, float):
        return element.as_float()
    return element.as_string()


class SQLAlchemyDocumentStore(DocumentStore):
    """Stores every collection in the ``documents`` table as JSON rows."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = build_session_factory(engine)

    async def create_schema(self) -> None:
        await create_schema(self.engine)

    @asynccontextmanager
    async def _translate_errors(self, operation: str, collection: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Store {operation} on {collection} failed: {str(e)}")
            raise StoreUnavailableError(
                f"Store {operation} failed",
                details={"operation": operation, "collection": collection},
            ) from e

    async def get(self, collection: str, doc_id: str) -> Document | None:
        async with self._translate_errors("get", collection):
            return await self._get(collection, doc_id)

    async def query(
        self,
        collection: str,
        field: str,
        value: Any,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        async with self._translate_errors("query", collection):
            return await self._query(collection, field, value, order_by, descending, limit)

    async def set(self, collection: str, doc_id: str, data: Document) -> None:
        async with self._translate_errors("set", collection):
            await self._set(collection, doc_id, data)

    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        async with self._translate_errors("update", collection):
            await self._update(collection, doc_id, fields)

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self._translate_errors("delete", collection):
            await self._delete(collection, doc_id)

    async def close(self) -> None:
        await self.engine.dispose()

    # Private helpers

    @transient_retry
    async def _get(self, collection: str, doc_id: str) -> Document | None:
        async with self.session_factory() as session:
            row = await session.get(DocumentRow, (collection, doc_id))
            return dict(row.data) if row is not None else None

    @transient_retry
    async def _query(
        self,
        collection: str,
        field: str,
        value: Any,
        order_by: str | None,
        descending: bool,
        limit: int | None,
    ) -> list[Document]:
        stmt = select(DocumentRow.data).where(
            DocumentRow.collection == collection,
            _json_field(field, value) == value,
        )
        if order_by is not None:
            order_column = DocumentRow.data[order_by].as_string()
            stmt = stmt.where(order_column.is_not(None))
            stmt = stmt.order_by(order_column.desc() if descending else order_column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [dict(data) for data in result.scalars().all()]

    @transient_retry
    async def _set(self, collection: str, doc_id: str, data: Document) -> None:
        async with self.session_factory() as session, session.begin():
            row = await session.get(DocumentRow, (collection, doc_id))
            if row is None:
                session.add(DocumentRow(collection=collection, doc_id=doc_id, data=dict(data)))
            else:
                row.data = dict(data)

    @transient_retry
    async def _update(self, collection: str, doc_id: str, fields: Document) -> None:
        async with self.session_factory() as session, session.begin():
            row = await session.get(DocumentRow, (collection, doc_id))
            if row is None:
                raise DocumentNotFoundError(f"No document {doc_id!r} in {collection!r}")
            row.data = {**row.data, **fields}

    @transient_retry
    async def _delete(self, collection: str, doc_id: str) -> None:
        async with self.session_factory() as session, session.begin():
            await session.execute(
                delete(DocumentRow).where(
                    DocumentRow.collection == collection,
                    DocumentRow.doc_id == doc_id,
                )
            )
