"""
Time helpers shared by models and services.
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Aware UTC now; column default for every created_at/updated_at."""
    return datetime.now(timezone.utc)
