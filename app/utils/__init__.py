"""
Utility modules for the storefront backend.

All loosely-typed request input should pass through the sanitizer before
reaching storage.
"""
from app.utils.sanitizer import (
    is_missing,
    sanitize_string,
    sanitize_integer,
    sanitize_decimal,
    sanitize_boolean,
    coerce_flag,
    SanitizationError,
)

__all__ = [
    "is_missing",
    "sanitize_string",
    "sanitize_integer",
    "sanitize_decimal",
    "sanitize_boolean",
    "coerce_flag",
    "SanitizationError",
]
