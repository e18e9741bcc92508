"""Document store construction from settings."""

from app.core.config import Settings, StoreBackendEnum
from app.store.base import DocumentStore
from app.store.memory import InMemoryDocumentStore


def create_document_store(config: Settings) -> DocumentStore:
    """Build the configured document store. One instance is shared process-wide."""
    if config.store_backend == StoreBackendEnum.memory:
        return InMemoryDocumentStore()

    from app.database import build_engine
    from app.store.sql import SQLAlchemyDocumentStore

    return SQLAlchemyDocumentStore(build_engine(config.effective_database_url))
