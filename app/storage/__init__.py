"""
Storage backends and the request-scoped dependency that selects one.
"""
from typing import AsyncGenerator

from fastapi import Request

from app.core.database import AsyncSessionLocal
from app.storage.base import Storage
from app.storage.database import DatabaseStorage
from app.storage.memory import MemStorage


async def get_storage(request: Request) -> AsyncGenerator[Storage, None]:
    """
    Dependency for the active storage backend.

    MemStorage lives on app.state for the process lifetime; the database
    backend gets one session per request, committed on success.
    """
    storage = getattr(request.app.state, "storage", None)
    if storage is not None:
        yield storage
        return

    async with AsyncSessionLocal() as session:
        try:
            yield DatabaseStorage(session)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


__all__ = ["Storage", "MemStorage", "DatabaseStorage", "get_storage"]
