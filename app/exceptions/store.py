# ruff: noqa: D107
"""Document store exceptions."""

from typing import Any

from .base import BaseAppException


class StoreError(BaseAppException):
    """Base exception for document store failures."""

    def __init__(
        self,
        message: str = "Document store error occurred",
        status_code: int = 503,
        error_code: str = "STORE_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, status_code, error_code, details)


class StoreUnavailableError(StoreError):
    """Exception raised when the store cannot complete a call. Safe to retry."""

    def __init__(
        self,
        message: str = "Document store is temporarily unavailable",
        error_code: str = "STORE_UNAVAILABLE",
        details: dict[str, Any] | None = None,
    ):
        details = dict(details or {})
        details.setdefault("retryable", True)
        super().__init__(message, 503, error_code, details)


class StoreTimeoutError(StoreUnavailableError):
    """Exception raised when a store call exceeds its timeout."""

    def __init__(
        self,
        message: str = "Document store request timed out",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "STORE_TIMEOUT", details)


class DocumentNotFoundError(StoreError):
    """Exception raised when a partial update targets a missing document."""

    def __init__(
        self,
        message: str = "Document not found",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, 404, "DOCUMENT_NOT_FOUND", details)


class MalformedRecordError(StoreError):
    """Exception raised when a stored document does not match its record shape."""

    def __init__(
        self,
        message: str = "Stored record is malformed",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, 500, "MALFORMED_RECORD", details)
