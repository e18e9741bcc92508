"""
Generic JSON document table backing the SQL document store.
"""

from sqlalchemy import JSON, Column, Index, String

from .base import TimestampedModel


class Document(TimestampedModel):
    """
    A schemaless document addressed by collection name and document id.
    """

    __tablename__ = "documents"

    collection = Column(String(64), primary_key=True)
    doc_id = Column(String(255), primary_key=True)
    data = Column(JSON, nullable=False)

    __table_args__ = (Index("idx_documents_collection", "collection"),)
