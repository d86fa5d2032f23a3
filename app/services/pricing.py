"""
Configuration pricing

Unit price of a product for a chosen size, fabric category and lifting
mechanism. Custom sizes are priced from the double size plus 10 per
100 cm^2 of area over (or under) a 140x200 bed.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from app.utils.sanitizer import coerce_flag, sanitize_decimal, sanitize_integer

CUSTOM_SIZE_ID = "custom"
CUSTOM_BASE_SIZE_ID = "double"
CUSTOM_BASE_AREA = 140 * 200
CUSTOM_PRICE_PER_100_CM2 = Decimal("10")
STANDARD_FABRIC_CATEGORY = "standard"


def _option(options, option_id: Optional[str]) -> Optional[dict]:
    for option in options or []:
        if option.get("id") == option_id:
            return option
    return None


def size_delta(
    product,
    selected_size: Optional[str],
    custom_width: Any = None,
    custom_length: Any = None,
) -> Decimal:
    if selected_size == CUSTOM_SIZE_ID:
        base = _option(product.sizes, CUSTOM_BASE_SIZE_ID)
        delta = sanitize_decimal(base.get("priceDelta")) if base else None
        delta = delta or Decimal("0")
        width = sanitize_integer(custom_width)
        length = sanitize_integer(custom_length)
        if width and length:
            area_diff = Decimal(width * length - CUSTOM_BASE_AREA)
            delta += area_diff / Decimal(100) * CUSTOM_PRICE_PER_100_CM2
        return delta

    size = _option(product.sizes, selected_size)
    if size is None:
        return Decimal("0")
    return sanitize_decimal(size.get("priceDelta")) or Decimal("0")


def fabric_delta(product, selected_fabric_category: Optional[str]) -> Decimal:
    if not selected_fabric_category or selected_fabric_category == STANDARD_FABRIC_CATEGORY:
        return Decimal("0")
    category = _option(product.fabric_categories, selected_fabric_category)
    if category is None:
        return Decimal("0")
    multiplier = sanitize_decimal(category.get("priceMultiplier")) or Decimal("1")
    return Decimal(product.base_price) * (multiplier - 1)


def calculate_unit_price(
    product,
    selected_size: Optional[str] = None,
    selected_fabric_category: Optional[str] = None,
    has_lifting_mechanism: Any = False,
    custom_width: Any = None,
    custom_length: Any = None,
) -> Decimal:
    """
    Price of one unit of the configured product, discount applied.

    Never negative; rounded to cents.
    """
    subtotal = Decimal(product.base_price)
    subtotal += size_delta(product, selected_size, custom_width, custom_length)
    subtotal += fabric_delta(product, selected_fabric_category)

    if coerce_flag(has_lifting_mechanism) and product.has_lifting_mechanism:
        subtotal += Decimal(product.lifting_mechanism_price or 0)

    discount = product.discount or 0
    if discount:
        subtotal = subtotal * (Decimal(100) - Decimal(discount)) / Decimal(100)

    return max(subtotal, Decimal("0")).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
