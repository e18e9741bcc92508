"""Chat history API controller with FastAPI endpoints."""

import logging

from fastapi import APIRouter, Body, Depends, Path, Query, status
from fastapi.responses import JSONResponse

from app.core.dependencies import get_chat_repository, get_optional_session
from app.core.security import Session
from app.domains.chat.repository import ChatRepository
from app.domains.chat.revalidation import ROOT_PATH
from app.exceptions.base import NotFoundError
from app.exceptions.store import StoreError
from app.schemas.base import ResponseSchema
from app.schemas.chat import Chat, ChatListResponse, ErrorResult, SaveChatRequest
from app.shared.citations import format_message_citations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chats", tags=["chats"])
share_router = APIRouter(prefix="/api/share", tags=["share"])


def _error_response(status_code: int, message: str, data: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ResponseSchema(status="error", message=message, data=data).model_dump(),
    )


def _error_result_response(result: ErrorResult) -> JSONResponse:
    status_code = status.HTTP_401_UNAUTHORIZED if result.is_unauthorized else status.HTTP_400_BAD_REQUEST
    return _error_response(status_code, result.error, result.model_dump())


def _store_error_response(error: StoreError) -> JSONResponse:
    return _error_response(
        error.status_code,
        error.message,
        {"error_code": error.error_code, "details": error.details},
    )


def _chat_data(chat: Chat) -> dict:
    return chat.model_dump(by_alias=True, mode="json")


@router.get("", response_model=ResponseSchema)
async def list_chats(
    limit: int | None = Query(None, ge=1, le=100, description="Maximum number of chats"),
    session: Session | None = Depends(get_optional_session),
    repository: ChatRepository = Depends(get_chat_repository),
):
    """Get the most recent chats of the current user.

    Args:
        limit: Maximum number of chats
        session: Current session, anonymous callers get an empty list
        repository: Chat repository

    Returns:
        Chats ordered newest first
    """
    chats = await repository.get_chats(session.user_id if session else None, limit=limit)
    result = ChatListResponse(chats=chats, total=len(chats))
    return ResponseSchema(
        status="success",
        message="Chats retrieved successfully",
        data=result.model_dump(by_alias=True, mode="json"),
    )


@router.get("/{chat_id}", response_model=ResponseSchema)
async def get_chat(
    chat_id: str = Path(..., description="Chat ID"),
    session: Session | None = Depends(get_optional_session),
    repository: ChatRepository = Depends(get_chat_repository),
):
    """Get a chat owned by the current user."""
    chat = await repository.get_chat(chat_id, session.user_id if session else None)
    if chat is None:
        raise NotFoundError("Chat not found")

    return ResponseSchema(status="success", message="Chat retrieved successfully", data=_chat_data(chat))


@router.put("/{chat_id}", response_model=ResponseSchema, status_code=status.HTTP_202_ACCEPTED)
async def save_chat(
    chat_id: str = Path(..., description="Chat ID"),
    save_request: SaveChatRequest = Body(...),
    session: Session | None = Depends(get_optional_session),
    repository: ChatRepository = Depends(get_chat_repository),
):
    """Persist the conversation state of a chat.

    Saving is fire-and-forget: anonymous requests, chats owned by another
    user and store failures are all accepted without error. Citation markers
    in assistant messages are normalised before the chat is stored.
    """
    if session is not None:
        messages = format_message_citations(save_request.messages)
        chat = Chat.from_messages(chat_id, session.user_id, messages)
        await repository.save_chat(chat)

    return ResponseSchema(status="success", message="Chat save accepted", data=None)


@router.delete("/{chat_id}", response_model=ResponseSchema)
async def delete_chat(
    chat_id: str = Path(..., description="Chat ID"),
    path: str | None = Query(None, description="Route of the chat view to revalidate"),
    repository: ChatRepository = Depends(get_chat_repository),
):
    """Delete a chat owned by the current user.

    Args:
        chat_id: Chat ID
        path: Route of the chat view, defaults to the chat's canonical path
        repository: Chat repository

    Returns:
        Success response, also when the chat did not exist
    """
    try:
        result = await repository.delete_chat(chat_id, path or f"/chat/{chat_id}")
    except StoreError as e:
        logger.error(f"Error deleting chat {chat_id}: {str(e.message)}")
        return _store_error_response(e)

    if result is not None:
        return _error_result_response(result)

    return ResponseSchema(status="success", message="Chat deleted successfully", data=None)


@router.delete("", response_model=ResponseSchema)
async def clear_chats(repository: ChatRepository = Depends(get_chat_repository)):
    """Forget all cached chat history and send the client back to the root view."""
    result = await repository.clear_chats()
    if result is not None:
        return _error_result_response(result)

    return ResponseSchema(status="success", message="Chats cleared", data={"redirect": ROOT_PATH})


@router.post("/{chat_id}/share", response_model=ResponseSchema)
async def share_chat(
    chat_id: str = Path(..., description="Chat ID"),
    repository: ChatRepository = Depends(get_chat_repository),
):
    """Publish a chat owned by the current user."""
    try:
        result = await repository.share_chat(chat_id)
    except StoreError as e:
        logger.error(f"Error sharing chat {chat_id}: {str(e.message)}")
        return _store_error_response(e)

    if isinstance(result, ErrorResult):
        return _error_result_response(result)

    return ResponseSchema(status="success", message="Chat shared successfully", data=_chat_data(result))


@share_router.get("/{chat_id}", response_model=ResponseSchema)
async def get_shared_chat(
    chat_id: str = Path(..., description="Chat ID"),
    repository: ChatRepository = Depends(get_chat_repository),
):
    """Get a shared chat. No ownership check applies once a chat is shared."""
    chat = await repository.get_shared_chat(chat_id)
    if chat is None:
        raise NotFoundError("Shared chat not found")

    return ResponseSchema(status="success", message="Shared chat retrieved successfully", data=_chat_data(chat))
