"""User profile controller endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_optional_session, get_user_service
from app.core.security import Session
from app.domains.user.service import UserService
from app.exceptions.base import NotFoundError
from app.schemas.user import UserResponse

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    session: Session | None = Depends(get_optional_session),
    user_service: UserService = Depends(get_user_service),
):
    """Get the stored profile of the current session user."""
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    user = await user_service.get_user(session.email or "")
    if user is None:
        raise NotFoundError("User not found")

    return UserResponse(id=user.id, email=user.email)
