"""
Models package initialization.
"""

from .base import Base, TimestampedModel
from .document import Document

__all__ = [
    "Base",
    "TimestampedModel",
    "Document",
]
