"""
Input Sanitizer

Centralized coercion layer between loosely-typed request payloads (browser
forms, CSV imports, legacy clients) and storage writes. Values may arrive as
booleans, numbers, strings, or the literal strings "null"/"undefined".
"""
import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Literal strings some clients send instead of omitting a field
MISSING_LITERALS = ("null", "undefined")

TRUE_STRINGS = ("true", "yes", "1", "t", "y", "on")
FALSE_STRINGS = ("false", "no", "0", "f", "n", "off")

CENTS = Decimal("0.01")


class SanitizationError(Exception):
    """Raised when sanitization fails and cannot recover."""
    pass


def is_missing(value: Any) -> bool:
    """
    True for None, blank strings, and the literals "null"/"undefined".

    Zero, False and empty collections are values, not missing.
    """
    if value is None:
        return True
    if isinstance(value, str):
        stripped = value.strip()
        return stripped == "" or stripped.lower() in MISSING_LITERALS
    return False


def sanitize_string(
    value: Any,
    field_name: str = "string",
    max_length: Optional[int] = None,
) -> Optional[str]:
    """Strip and stringify; missing values become None."""
    if is_missing(value):
        return None

    result = str(value).strip()

    if max_length and len(result) > max_length:
        logger.debug(f"Truncating {field_name} from {len(result)} to {max_length} chars")
        result = result[:max_length]

    return result


def sanitize_integer(
    value: Any,
    field_name: str = "integer",
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
    strict: bool = False
) -> Optional[int]:
    """
    Sanitize value for an INTEGER column.

    Returns None for missing or out-of-range values unless strict, in which
    case SanitizationError is raised.
    """
    if is_missing(value):
        return None

    try:
        if isinstance(value, bool):
            result = 1 if value else 0
        elif isinstance(value, int):
            result = value
        elif isinstance(value, (float, Decimal)):
            result = int(value)
        elif isinstance(value, str):
            # Handle decimal strings
            result = int(float(value.strip()))
        else:
            if strict:
                raise SanitizationError(f"Unexpected type for {field_name}: {type(value)}")
            return None
    except (ValueError, TypeError, OverflowError) as e:
        if strict:
            raise SanitizationError(f"Cannot parse {field_name}: '{value}' - {e}")
        return None

    if min_value is not None and result < min_value:
        if strict:
            raise SanitizationError(f"{field_name} below minimum: {result} < {min_value}")
        return None

    if max_value is not None and result > max_value:
        if strict:
            raise SanitizationError(f"{field_name} above maximum: {result} > {max_value}")
        return None

    return result


def sanitize_decimal(
    value: Any,
    field_name: str = "decimal",
    min_value: Optional[float] = None,
    max_value: Optional[Decimal] = None,
    strict: bool = False
) -> Optional[Decimal]:
    """
    Sanitize value for a NUMERIC(10, 2) money column.

    Accepts numbers and strings ("30000", "30 000", "1,500.50"); the result
    is quantized to cents.
    """
    if is_missing(value):
        return None

    try:
        if isinstance(value, bool):
            raise SanitizationError(f"Boolean is not a decimal for {field_name}")
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, (int, float)):
            result = Decimal(str(value))
        elif isinstance(value, str):
            result = Decimal(re.sub(r"[\s,$₽]", "", value))
        else:
            raise SanitizationError(f"Unexpected type for {field_name}: {type(value)}")
        if not result.is_finite():
            raise SanitizationError(f"Non-finite {field_name}: {value!r}")
    except (InvalidOperation, ValueError, SanitizationError) as e:
        if strict:
            raise SanitizationError(f"Cannot parse {field_name}: '{value}' - {e}")
        logger.debug(f"Could not parse decimal for {field_name}: '{value}', returning None")
        return None

    if min_value is not None and result < Decimal(str(min_value)):
        if strict:
            raise SanitizationError(f"{field_name} below minimum: {result} < {min_value}")
        return None

    if max_value is not None and result > Decimal(str(max_value)):
        if strict:
            raise SanitizationError(f"{field_name} above maximum: {result} > {max_value}")
        return None

    return result.quantize(CENTS, rounding=ROUND_HALF_UP)


def sanitize_boolean(
    value: Any,
    field_name: str = "boolean"
) -> Optional[bool]:
    """
    Sanitize value for a BOOLEAN column.

    Returns None when the value carries no boolean meaning.
    """
    if is_missing(value):
        return None

    if isinstance(value, bool):
        return value

    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
        logger.debug(f"Unrecognized boolean for {field_name}: {value!r}")
        return None

    if isinstance(value, (int, float, Decimal)):
        return bool(value)

    return None


def coerce_flag(value: Any) -> bool:
    """
    Strict boolean for equality checks: anything without a true meaning is False.

    Both sides of a flag comparison must go through this, since one side may be
    a stored bool and the other a raw "true"/None from a request.
    """
    return sanitize_boolean(value) is True
