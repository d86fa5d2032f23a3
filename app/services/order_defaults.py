"""
Order defaults

Checkout must never hard-fail on a partially malformed request: a degraded
but recorded order beats a lost sale. Every order and order item field has
exactly one fallback, listed here. A value counts as missing when it is
None, blank, or the literal "null"/"undefined".

Values are also fitted to their columns before they reach storage: strings
are truncated to the column length, and money or integer values the column
cannot hold are treated as missing.
"""
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Union

from app.core.security import generate_session_token
from app.models.order import ORDER_STATUSES, Order, OrderItem
from app.utils.sanitizer import (
    coerce_flag,
    is_missing,
    sanitize_decimal,
    sanitize_integer,
    sanitize_string,
)

logger = logging.getLogger(__name__)

DELIVERY_METHOD_TEXTS = {"courier": "Courier"}
DEFAULT_DELIVERY_METHOD_TEXT = "Pickup"
PAYMENT_METHOD_TEXTS = {"card": "Bank card"}
DEFAULT_PAYMENT_METHOD_TEXT = "Cash"

UNKNOWN_PRODUCT_NAME = "Unknown product"

# Largest value a NUMERIC(10, 2) column holds
MAX_MONEY = Decimal("99999999.99")
# Largest value an INTEGER column holds
MAX_INT = 2 ** 31 - 1


def column_lengths(model) -> Dict[str, int]:
    """VARCHAR lengths of a model's columns; TEXT columns are unbounded and left out."""
    return {
        column.key: column.type.length
        for column in model.__table__.columns
        if getattr(column.type, "length", None)
    }


ORDER_LENGTHS = column_lengths(Order)
ORDER_ITEM_LENGTHS = column_lengths(OrderItem)


def _delivery_text(record: Mapping[str, Any]) -> str:
    return DELIVERY_METHOD_TEXTS.get(record.get("delivery_method"), DEFAULT_DELIVERY_METHOD_TEXT)


def _payment_text(record: Mapping[str, Any]) -> str:
    return PAYMENT_METHOD_TEXTS.get(record.get("payment_method"), DEFAULT_PAYMENT_METHOD_TEXT)


def _money(field: str) -> Callable[[Any], Optional[Decimal]]:
    return lambda v: sanitize_decimal(v, field, min_value=0, max_value=MAX_MONEY)


def _count(field: str, min_value: int = 1) -> Callable[[Any], Optional[int]]:
    return lambda v: sanitize_integer(v, field, min_value=min_value, max_value=MAX_INT)


Default = Union[Any, Callable[[Mapping[str, Any]], Any]]

# field -> fallback; callables receive the partially defaulted record.
# Order matters: the text fields read the already-defaulted method.
# total_amount is replaced by the computed items-plus-delivery total when
# apply_order_defaults is given the order's items.
ORDER_DEFAULTS: Dict[str, Default] = {
    "session_id": lambda record: f"default-session-{generate_session_token()}",
    "customer_name": "Guest",
    "customer_email": "guest@example.com",
    "customer_phone": "0000000000",
    "address": "",
    "delivery_method": "pickup",
    "delivery_method_text": _delivery_text,
    "delivery_price": Decimal("0"),
    "payment_method": "cash",
    "payment_method_text": _payment_text,
    "comment": "",
    "total_amount": Decimal("0"),
    "status": "pending",
}

ORDER_ITEM_DEFAULTS: Dict[str, Default] = {
    "product_id": None,
    "product_name": UNKNOWN_PRODUCT_NAME,
    "quantity": 1,
    "selected_size": "single",
    "custom_width": None,
    "custom_length": None,
    "selected_fabric_category": "standard",
    "selected_fabric": "beige",
    "fabric_name": lambda record: record["selected_fabric"],
    "has_lifting_mechanism": False,
    "price": Decimal("0"),
}

# Per-field coercion applied before the missing check
_ORDER_COERCE: Dict[str, Callable[[Any], Any]] = {
    "delivery_price": _money("delivery_price"),
    "total_amount": _money("total_amount"),
    "status": lambda v: sanitize_string(v) if sanitize_string(v) in ORDER_STATUSES else None,
}

_ORDER_ITEM_COERCE: Dict[str, Callable[[Any], Any]] = {
    "product_id": _count("product_id"),
    "quantity": _count("quantity"),
    "custom_width": _count("custom_width"),
    "custom_length": _count("custom_length"),
    "has_lifting_mechanism": coerce_flag,
    "price": _money("price"),
}


def _snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def raw_value(source: Mapping[str, Any], field: str) -> Any:
    """Read a field by its snake_case or camelCase key."""
    if field in source:
        return source[field]
    return source.get(_snake_to_camel(field))


def _apply(
    source: Mapping[str, Any],
    defaults: Dict[str, Default],
    coercers: Dict[str, Callable[[Any], Any]],
    lengths: Mapping[str, int],
) -> Dict[str, Any]:
    record: Dict[str, Any] = {}
    for field, default in defaults.items():
        value = raw_value(source, field)
        if field in coercers and not is_missing(value):
            value = coercers[field](value)
        else:
            value = sanitize_string(value, field, max_length=lengths.get(field))
        if is_missing(value):
            value = default(record) if callable(default) else default
        record[field] = value
    return record


def apply_order_defaults(
    draft: Mapping[str, Any],
    items: Optional[Iterable[Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Fill every order field from the draft or its fallback.

    An unknown status falls back to "pending" like a missing one. When
    items are given, a missing or unusable total_amount (negative, not a
    number, too large) becomes the sum of the items plus delivery.
    """
    defaults = ORDER_DEFAULTS
    if items is not None:
        priced = [apply_order_item_defaults(item) for item in items]
        defaults = dict(ORDER_DEFAULTS)
        defaults["total_amount"] = lambda record: order_total(priced, record["delivery_price"])
    return _apply(draft, defaults, _ORDER_COERCE, ORDER_LENGTHS)


def apply_order_item_defaults(
    item: Mapping[str, Any],
    product_name: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Fill every order item field. product_name, when given, is the live
    catalog name and wins over whatever the caller sent.
    """
    record = _apply(item, ORDER_ITEM_DEFAULTS, _ORDER_ITEM_COERCE, ORDER_ITEM_LENGTHS)
    if not is_missing(product_name):
        record["product_name"] = sanitize_string(
            product_name, "product_name", max_length=ORDER_ITEM_LENGTHS.get("product_name")
        )
    return record


def order_total(items: Sequence[Mapping[str, Any]], delivery_price: Optional[Decimal]) -> Decimal:
    """
    Sum of price * quantity over defaulted items, plus delivery.

    Capped at what the total_amount column can store.
    """
    total = sum((Decimal(i["price"]) * i["quantity"] for i in items), Decimal("0"))
    total = (total + (delivery_price or Decimal("0"))).quantize(Decimal("0.01"))
    if total > MAX_MONEY:
        logger.warning(f"Order total {total} exceeds column range, capped at {MAX_MONEY}")
        return MAX_MONEY
    return total
