# app/domains/user/service.py
from typing import Optional

from app.schemas.user import User
from app.store.base import USER_COLLECTION, DocumentStore


class UserService:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_user(self, email: str) -> Optional[User]:
        """Get a credentialed user by email, the document id of the user collection."""
        if not email:
            return None
        document = await self.store.get(USER_COLLECTION, email)
        if document is None:
            return None
        return User.from_document(document)
