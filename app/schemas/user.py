"""User record schema."""

from typing import Any

from pydantic import Field, ValidationError

from app.exceptions.store import MalformedRecordError

from .base import BaseSchema


class User(BaseSchema):
    """A credentialed user stored in the ``user`` collection, keyed by email.

    The stored salt field is named ``slat``; it is kept as-is on disk and
    exposed as ``salt``.
    """

    id: str
    email: str
    password: str
    salt: str = Field(..., alias="slat")

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "User":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise MalformedRecordError(
                f"Malformed user record {data.get('email')!r}",
                details={"errors": e.errors(include_url=False, include_input=False)},
            ) from e


class UserResponse(BaseSchema):
    """Public view of a stored user, without credentials."""

    id: str
    email: str
