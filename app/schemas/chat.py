"""Chat records and request/response schemas.

``Chat`` is both the cached entity and the shape persisted in the ``chat``
collection. Document field names are camelCase (``userId``, ``createdAt``,
``sharePath``); Python attributes are snake_case.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import Field, ValidationError, field_serializer, field_validator

from app.exceptions.store import MalformedRecordError

from .base import BaseSchema

TITLE_MAX_LENGTH = 100
SHARE_PATH_PREFIX = "/share/"
CHAT_PATH_PREFIX = "/chat/"


class MessageRole(str, Enum):
    """Message role enumeration."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    FUNCTION = "function"
    DATA = "data"
    TOOL = "tool"


class ErrorMessage(str, Enum):
    """Error strings surfaced by mutating chat operations."""

    UNAUTHORIZED = "Unauthorized"
    SOMETHING_WENT_WRONG = "Something went wrong"


class Message(BaseSchema):
    """A single message inside a chat."""

    id: str
    role: MessageRole
    content: str
    name: str | None = None


class Chat(BaseSchema):
    """A conversation record owned by one user."""

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., alias="userId", min_length=1)
    title: str = ""
    created_at: datetime = Field(..., alias="createdAt")
    path: str
    messages: list[Message] = Field(default_factory=list)
    share_path: str | None = Field(None, alias="sharePath")

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)

    @field_serializer("created_at")
    def serialize_created_at(self, v: datetime) -> str:
        # Fixed width so that string ordering in the store matches time ordering
        return v.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")

    @staticmethod
    def share_path_for(chat_id: str) -> str:
        return f"{SHARE_PATH_PREFIX}{chat_id}"

    @property
    def is_shared(self) -> bool:
        return self.share_path is not None

    @classmethod
    def from_messages(
        cls,
        chat_id: str,
        user_id: str,
        messages: list[Message],
        created_at: datetime | None = None,
    ) -> Chat:
        """Build a chat record from the current conversation state."""
        title = messages[0].content[:TITLE_MAX_LENGTH] if messages else ""
        return cls(
            id=chat_id,
            user_id=user_id,
            title=title,
            created_at=created_at or datetime.now(UTC),
            path=f"{CHAT_PATH_PREFIX}{chat_id}",
            messages=messages,
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize for the store. ``sharePath`` is omitted until the chat is shared."""
        document = self.model_dump(by_alias=True, mode="json")
        if self.share_path is None:
            document.pop("sharePath", None)
        return document

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Chat:
        """Parse a stored document, failing with a typed error on bad shape."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise MalformedRecordError(
                f"Malformed chat record {data.get('id')!r}",
                details={"errors": e.errors(include_url=False, include_input=False)},
            ) from e


class ErrorResult(BaseSchema):
    """Structured error returned (not raised) by mutating chat operations."""

    error: str

    @classmethod
    def unauthorized(cls) -> ErrorResult:
        return cls(error=ErrorMessage.UNAUTHORIZED.value)

    @classmethod
    def something_went_wrong(cls) -> ErrorResult:
        return cls(error=ErrorMessage.SOMETHING_WENT_WRONG.value)

    @property
    def is_unauthorized(self) -> bool:
        return self.error == ErrorMessage.UNAUTHORIZED.value


class SaveChatRequest(BaseSchema):
    """Schema for persisting the current conversation state of a chat."""

    messages: list[Message] = Field(..., min_length=1, description="Conversation messages")


class ChatListResponse(BaseSchema):
    """Schema for a user's recent chats."""

    chats: list[Chat]
    total: int
