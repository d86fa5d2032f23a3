"""
Rate limiting for login/register and checkout

In-process SlowAPI limiter; each API instance counts on its own.
Auth endpoints are keyed by client IP, checkout by the cart session so
shoppers behind one NAT do not share a budget.
"""
import logging
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.config import settings

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop when proxied, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def get_session_key(request: Request) -> str:
    """Cart session id from the signed cookie; IP for a first-time visitor."""
    session = request.scope.get("session") or {}
    session_id = session.get("session_id")
    if session_id:
        return f"session:{session_id}"
    return get_client_ip(request)


limiter = Limiter(
    key_func=get_client_ip,
    enabled=settings.RATE_LIMIT_ENABLED,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the same {"detail", "code"} shape as the other API errors."""
    logger.warning(f"Rate limit exceeded: {get_session_key(request)} on {request.method} {request.url.path}")

    limit = exc.detail or "too many requests"

    return JSONResponse(
        status_code=429,
        content={
            "detail": f"Rate limit exceeded ({limit}). Please slow down.",
            "code": "RATE_LIMITED",
        },
        headers={"Retry-After": "60"},
    )
