"""
API dependencies

Identity is carried in the signed session cookie (Starlette
SessionMiddleware): an anonymous session_id is issued on first use, and
user_id / is_admin are added at login.
"""
from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from app.core.security import generate_session_token
from app.models.user import User
from app.storage import Storage, get_storage

SESSION_ID_KEY = "session_id"
USER_ID_KEY = "user_id"
IS_ADMIN_KEY = "is_admin"


def get_session_id(request: Request) -> str:
    """Opaque per-browser id scoping the cart and orders; created if absent."""
    session_id = request.session.get(SESSION_ID_KEY)
    if not session_id:
        session_id = generate_session_token()
        request.session[SESSION_ID_KEY] = session_id
    return session_id


async def get_current_user(
    request: Request,
    storage: Storage = Depends(get_storage),
) -> Optional[User]:
    """Logged-in user, or None for anonymous sessions."""
    user_id = request.session.get(USER_ID_KEY)
    if user_id is None:
        return None
    user = await storage.get_user(user_id)
    if user is None:
        # Account deleted since login
        request.session.pop(USER_ID_KEY, None)
        request.session.pop(IS_ADMIN_KEY, None)
    return user


async def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def is_admin_session(request: Request, user: Optional[User]) -> bool:
    """Session must carry the admin flag and the account must still be an admin."""
    return bool(user is not None and user.is_admin and request.session.get(IS_ADMIN_KEY))


async def require_admin(
    request: Request,
    user: Optional[User] = Depends(get_current_user),
) -> User:
    if not is_admin_session(request, user):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin access required",
        )
    return user


def login_session(request: Request, user: User) -> None:
    get_session_id(request)
    request.session[USER_ID_KEY] = user.id
    request.session[IS_ADMIN_KEY] = bool(user.is_admin)


def logout_session(request: Request) -> None:
    """Drop the login but keep the anonymous session (and its cart)."""
    request.session.pop(USER_ID_KEY, None)
    request.session.pop(IS_ADMIN_KEY, None)
