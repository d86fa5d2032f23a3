"""
Tests for the input sanitizer
"""
import pytest
from decimal import Decimal

from app.utils.sanitizer import (
    coerce_flag,
    is_missing,
    sanitize_boolean,
    sanitize_decimal,
    sanitize_integer,
    sanitize_string,
    SanitizationError,
)


class TestIsMissing:

    @pytest.mark.parametrize("value", [None, "", "   ", "null", "undefined", "NULL", " Undefined "])
    def test_missing_values(self, value):
        assert is_missing(value) is True

    @pytest.mark.parametrize("value", [0, False, "0", "false", [], "Guest", "None", "none"])
    def test_present_values(self, value):
        assert is_missing(value) is False


class TestSanitizeBoolean:

    @pytest.mark.parametrize("value", [True, "true", "TRUE", "1", "yes", "on", 1])
    def test_truthy(self, value):
        assert sanitize_boolean(value) is True

    @pytest.mark.parametrize("value", [False, "false", "0", "no", "off", 0])
    def test_falsy(self, value):
        assert sanitize_boolean(value) is False

    @pytest.mark.parametrize("value", [None, "", "null", "undefined", "maybe"])
    def test_no_meaning_returns_none(self, value):
        assert sanitize_boolean(value) is None


class TestCoerceFlag:
    """Both sides of a flag comparison must agree whatever shape they arrive in."""

    @pytest.mark.parametrize("value", [None, "", "false", "0", "null", "undefined", False, "garbage"])
    def test_everything_without_true_meaning_is_false(self, value):
        assert coerce_flag(value) is False

    @pytest.mark.parametrize("value", [True, "true", "1", "yes", "on"])
    def test_true_values(self, value):
        assert coerce_flag(value) is True

    def test_stored_false_equals_missing_request_value(self):
        assert coerce_flag(False) == coerce_flag(None)


class TestSanitizeDecimal:

    def test_number_and_string(self):
        assert sanitize_decimal(30000) == Decimal("30000.00")
        assert sanitize_decimal("30000") == Decimal("30000.00")
        assert sanitize_decimal(1.3) == Decimal("1.30")

    def test_formatted_string(self):
        assert sanitize_decimal("30 000") == Decimal("30000.00")
        assert sanitize_decimal("1,500.50") == Decimal("1500.50")

    def test_missing_returns_none(self):
        assert sanitize_decimal(None) is None
        assert sanitize_decimal("null") is None

    def test_garbage_returns_none_non_strict(self):
        assert sanitize_decimal("abc") is None
        assert sanitize_decimal(True) is None
        assert sanitize_decimal("NaN") is None

    def test_garbage_raises_strict(self):
        with pytest.raises(SanitizationError):
            sanitize_decimal("abc", strict=True)

    def test_min_value(self):
        assert sanitize_decimal("-5", min_value=0) is None
        with pytest.raises(SanitizationError):
            sanitize_decimal("-5", min_value=0, strict=True)

    def test_max_value(self):
        limit = Decimal("99999999.99")
        assert sanitize_decimal("99999999.99", max_value=limit) == limit
        assert sanitize_decimal("100000000", max_value=limit) is None
        with pytest.raises(SanitizationError):
            sanitize_decimal("100000000", max_value=limit, strict=True)


class TestSanitizeInteger:

    def test_valid(self):
        assert sanitize_integer("3") == 3
        assert sanitize_integer("3.0") == 3
        assert sanitize_integer(7) == 7

    def test_invalid_returns_none(self):
        assert sanitize_integer("three") is None
        assert sanitize_integer("undefined") is None
        assert sanitize_integer("1e400") is None

    def test_range(self):
        assert sanitize_integer(0, min_value=1) is None
        assert sanitize_integer(101, max_value=100) is None
        with pytest.raises(SanitizationError):
            sanitize_integer(0, min_value=1, strict=True)


class TestSanitizeString:

    def test_strips(self):
        assert sanitize_string("  beige ") == "beige"

    def test_missing(self):
        assert sanitize_string("undefined") is None
        assert sanitize_string("") is None

    def test_truncates(self):
        assert sanitize_string("abcdef", max_length=3) == "abc"

    def test_non_string_is_stringified(self):
        assert sanitize_string(12345) == "12345"
