"""
Storefront Exception Hierarchy

Structured exception classes raised by the service and storage layers.
All exceptions include code, message, and details for logging and for the
JSON error body, plus the HTTP status the API layer maps them to.

Exception Hierarchy:
    StoreError
    ├── NotFoundError
    ├── StoreValidationError
    ├── UnauthorizedError
    ├── ConflictError
    └── StorageError
"""
import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """
    Base exception for all storefront errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging
        status_code: HTTP status used when the error reaches the API layer
    """

    default_code: str = "STORE_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class NotFoundError(StoreError):
    """Unknown id, or a record owned by another session."""
    default_code = "NOT_FOUND"
    status_code = 404

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        entity_id: Optional[Any] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        details.update({
            "entity": entity,
            "entity_id": entity_id,
        })
        super().__init__(message, details=details, **kwargs)


class StoreValidationError(StoreError):
    """Malformed input that the defaulting policy does not cover."""
    default_code = "VALIDATION_ERROR"
    status_code = 400


class UnauthorizedError(StoreError):
    """Missing login or admin session."""
    default_code = "UNAUTHORIZED"
    status_code = 401


class ConflictError(StoreError):
    """Unique field already taken (username, email)."""
    default_code = "CONFLICT"
    status_code = 409

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        details["field"] = field
        super().__init__(message, details=details, **kwargs)


class StorageError(StoreError):
    """A storage backend rejected a write (constraint violation, driver error)."""
    default_code = "STORAGE_ERROR"
    status_code = 500
