"""
Matrasov Storefront Backend
FastAPI application entry point

- Session cookie identity (anonymous cart/orders, login, admin flag)
- Rate limiting with SlowAPI on auth and checkout
- Error sanitization middleware
- Request size limits
- Health endpoint with storage ping
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import JSONResponse

from app.api.routes import (
    admin,
    admin_orders,
    admin_reviews,
    admin_settings,
    admin_users,
    auth,
    cart,
    orders,
    products,
    reviews,
    users,
)
from app.core.config import settings
from app.core.database import create_tables, get_db_session
from app.core.error_handler import ErrorSanitizationMiddleware, register_exception_handlers
from app.core.rate_limit import limiter, rate_limit_exceeded_handler
from app.services.seed import seed_database
from app.storage import DatabaseStorage, MemStorage

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Pick the storage backend, create tables and seed on startup."""
    if settings.STORAGE_BACKEND == "memory":
        app.state.storage = MemStorage()
        await seed_database(app.state.storage)
        logger.info("Using in-memory storage")
    else:
        await create_tables()
        async with get_db_session() as db:
            await seed_database(DatabaseStorage(db))
        logger.info("Database tables ready")

    yield

    logger.info("Shutting down")


app = FastAPI(
    lifespan=lifespan,
    title="Matrasov Storefront API",
    description="Catalog, cart, checkout and back office for a bed and mattress shop",
    version=APP_VERSION,
    openapi_tags=[
        {"name": "Products", "description": "Catalog and configuration pricing"},
        {"name": "Cart", "description": "Session-scoped shopping cart"},
        {"name": "Orders", "description": "Checkout and order history"},
        {"name": "Auth", "description": "Session login"},
        {"name": "Admin", "description": "Back office"},
        {"name": "Health", "description": "Liveness and readiness"},
    ],
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

register_exception_handlers(app)


MAX_REQUEST_SIZE = settings.MAX_REQUEST_SIZE_MB * 1024 * 1024


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests that exceed the size limit."""

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > MAX_REQUEST_SIZE:
            client = request.client.host if request.client else "unknown"
            logger.warning(f"Request size limit exceeded: {content_length} bytes from {client}")
            return JSONResponse(
                status_code=413,
                content={
                    "error": "request_too_large",
                    "message": f"Request body exceeds maximum size of {settings.MAX_REQUEST_SIZE_MB}MB",
                },
            )
        return await call_next(request)


app.add_middleware(RequestSizeLimitMiddleware)

# Catches unhandled exceptions
app.add_middleware(ErrorSanitizationMiddleware)

# Signed cookie carrying session_id / user_id / is_admin
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE_NAME,
    max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
    same_site=settings.COOKIE_SAMESITE,
    https_only=settings.COOKIE_SECURE,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api", tags=["Auth"])
app.include_router(users.router, prefix="/api/user", tags=["Auth"])
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(reviews.router, prefix="/api/products", tags=["Products"])
app.include_router(cart.router, prefix="/api/cart", tags=["Cart"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(admin_settings.public_router, prefix="/api/settings", tags=["Settings"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(admin_orders.router, prefix="/api/admin/orders", tags=["Admin"])
app.include_router(admin_users.router, prefix="/api/admin/users", tags=["Admin"])
app.include_router(admin_reviews.router, prefix="/api/admin/reviews", tags=["Admin"])
app.include_router(admin_settings.router, prefix="/api/admin/settings", tags=["Admin"])


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": "Matrasov Storefront API",
        "version": APP_VERSION,
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Pings the active storage backend; 503 when it is unreachable."""
    health_status = {
        "status": "healthy",
        "storage": settings.STORAGE_BACKEND,
        "database": "unknown",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        storage = getattr(app.state, "storage", None)
        if storage is not None:
            await storage.ping()
        else:
            async with get_db_session() as db:
                await DatabaseStorage(db).ping()
        health_status["database"] = "connected"
    except Exception as e:
        health_status["database"] = f"error: {type(e).__name__}"
        health_status["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=health_status)

    return health_status
