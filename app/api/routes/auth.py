"""
Auth routes - session cookie login
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status

from app.api.deps import (
    get_current_user,
    get_session_id,
    is_admin_session,
    login_session,
    logout_session,
)
from app.core.config import settings
from app.core.rate_limit import limiter
from app.models.user import User
from app.schemas.user import LoginRequest, RegisterRequest, SessionInfo, UserResponse
from app.services.user_service import UserService
from app.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def register(
    request: Request,
    data: RegisterRequest,
    storage: Storage = Depends(get_storage),
):
    """Create a customer account and log it in."""
    user = await UserService(storage).register(data)
    login_session(request, user)
    return user


@router.post("/login", response_model=UserResponse)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def login(
    request: Request,
    credentials: LoginRequest,
    storage: Storage = Depends(get_storage),
):
    user = await UserService(storage).authenticate(credentials.username, credentials.password)
    login_session(request, user)
    logger.info(f"User {user.id} logged in (admin={user.is_admin})")
    return user


@router.post("/logout")
async def logout(request: Request):
    logout_session(request)
    return {"message": "Logged out"}


@router.get("/session", response_model=SessionInfo)
async def get_session(
    request: Request,
    user: Optional[User] = Depends(get_current_user),
):
    """Current session identity; issues a session id on first call."""
    return SessionInfo(
        session_id=get_session_id(request),
        is_logged_in=user is not None,
        is_admin=is_admin_session(request, user),
        user=UserResponse.model_validate(user) if user is not None else None,
    )
