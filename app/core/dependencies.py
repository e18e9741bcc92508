# app/core/dependencies.py
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.auth import AuthGuard, BearerAuthGuard
from app.core.config import settings
from app.core.security import Session, SessionAuthenticator
from app.domains.chat.repository import ChatRepository
from app.domains.chat.revalidation import PathRevalidator
from app.domains.user.service import UserService
from app.shared.cache import EntityCache
from app.store.base import DocumentStore

logger = logging.getLogger(__name__)

# Anonymous requests are allowed through; operations decide what they need
security = HTTPBearer(auto_error=False)
auth = SessionAuthenticator()


def get_entity_cache(request: Request) -> EntityCache:
    """Process-wide entity cache created by the app factory."""
    return request.app.state.entity_cache


def get_document_store(request: Request) -> DocumentStore:
    """Process-wide document store created by the app factory."""
    return request.app.state.document_store


def get_path_revalidator(request: Request) -> PathRevalidator:
    return request.app.state.path_revalidator


async def get_auth_guard(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthGuard:
    """Guard resolving the bearer token of the current request, if any."""
    token = credentials.credentials if credentials else None
    guard = BearerAuthGuard(token, auth)
    session = await guard.get_session()
    if session is not None:
        request.state.user_id = session.user_id
    return guard


async def get_optional_session(guard: AuthGuard = Depends(get_auth_guard)) -> Session | None:
    """Get the current session if authenticated, otherwise None."""
    return await guard.get_session()


def get_user_service(store: DocumentStore = Depends(get_document_store)) -> UserService:
    return UserService(store)


def get_chat_repository(
    store: DocumentStore = Depends(get_document_store),
    cache: EntityCache = Depends(get_entity_cache),
    guard: AuthGuard = Depends(get_auth_guard),
    revalidator: PathRevalidator = Depends(get_path_revalidator),
) -> ChatRepository:
    """Per-request repository over the shared cache and store."""
    return ChatRepository(
        store=store,
        cache=cache,
        guard=guard,
        revalidator=revalidator,
        page_size=settings.chat_page_size,
        store_timeout=settings.store_request_timeout,
    )
