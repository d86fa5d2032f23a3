"""
CartService - cart lines scoped to a browser session

A cart line is identified by product plus configuration. Adding a
configuration that already has a line bumps that line's quantity and keeps
its original price snapshot; anything else becomes a new line.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from app.core.config import settings
from app.core.exceptions import NotFoundError, StoreValidationError
from app.models import CartItem, Product
from app.services.pricing import calculate_unit_price
from app.storage.base import Storage
from app.utils.sanitizer import coerce_flag, sanitize_integer, sanitize_string

logger = logging.getLogger(__name__)

# Fields a client may change on an existing line
UPDATABLE_FIELDS = (
    "quantity",
    "selected_size",
    "selected_fabric_category",
    "selected_fabric",
    "custom_width",
    "custom_length",
    "has_lifting_mechanism",
    "price",
)


class CartLineKey(NamedTuple):
    session_id: str
    product_id: int
    selected_size: Optional[str]
    selected_fabric_category: Optional[str]
    selected_fabric: Optional[str]
    has_lifting_mechanism: bool
    # Only populated when dimensions take part in the identity
    custom_width: Optional[int] = None
    custom_length: Optional[int] = None


def line_key(
    session_id: str,
    product_id: int,
    selected_size: Any = None,
    selected_fabric_category: Any = None,
    selected_fabric: Any = None,
    has_lifting_mechanism: Any = False,
    custom_width: Any = None,
    custom_length: Any = None,
    include_dimensions: bool = False,
) -> CartLineKey:
    """
    Normalized identity of a cart line.

    The lifting flag may be a stored bool on one side and a raw request
    value ("true", "on", None) on the other; both go through coerce_flag.
    """
    return CartLineKey(
        session_id=session_id,
        product_id=int(product_id),
        selected_size=sanitize_string(selected_size),
        selected_fabric_category=sanitize_string(selected_fabric_category),
        selected_fabric=sanitize_string(selected_fabric),
        has_lifting_mechanism=coerce_flag(has_lifting_mechanism),
        custom_width=sanitize_integer(custom_width) if include_dimensions else None,
        custom_length=sanitize_integer(custom_length) if include_dimensions else None,
    )


def key_for_item(item: CartItem, include_dimensions: bool = False) -> CartLineKey:
    return line_key(
        item.session_id,
        item.product_id,
        item.selected_size,
        item.selected_fabric_category,
        item.selected_fabric,
        item.has_lifting_mechanism,
        item.custom_width,
        item.custom_length,
        include_dimensions=include_dimensions,
    )


class CartService:
    """Cart operations over the storage port."""

    def __init__(self, storage: Storage, merge_custom_dimensions: Optional[bool] = None):
        self.storage = storage
        if merge_custom_dimensions is None:
            merge_custom_dimensions = settings.CART_MERGE_CUSTOM_DIMENSIONS
        # True: custom width/length are part of the line identity
        self.merge_custom_dimensions = merge_custom_dimensions

    async def add_to_cart(
        self,
        session_id: str,
        product_id: int,
        configuration: Dict[str, Any],
        quantity: int = 1,
        price: Optional[Decimal] = None,
    ) -> CartItem:
        """
        Add a configured product to the session cart, merging with an
        identical line when one exists.

        Raises NotFoundError when the product does not exist.
        """
        if quantity < 1:
            raise StoreValidationError("Quantity must be at least 1", details={"quantity": quantity})

        product = await self.storage.get_product(product_id)
        if product is None:
            raise NotFoundError("Product not found", entity="product", entity_id=product_id)

        key = line_key(
            session_id,
            product_id,
            configuration.get("selected_size"),
            configuration.get("selected_fabric_category"),
            configuration.get("selected_fabric"),
            configuration.get("has_lifting_mechanism"),
            configuration.get("custom_width"),
            configuration.get("custom_length"),
            include_dimensions=self.merge_custom_dimensions,
        )

        for item in await self.storage.get_cart_items(session_id):
            if key_for_item(item, self.merge_custom_dimensions) == key:
                # Price snapshot from the first add is kept
                merged = await self.storage.update_cart_item(
                    item.id, {"quantity": item.quantity + quantity}
                )
                logger.debug(f"Merged cart line {item.id} for session {session_id}, qty now {merged.quantity}")
                return merged

        if price is None:
            price = calculate_unit_price(
                product,
                selected_size=key.selected_size,
                selected_fabric_category=key.selected_fabric_category,
                has_lifting_mechanism=key.has_lifting_mechanism,
                custom_width=configuration.get("custom_width"),
                custom_length=configuration.get("custom_length"),
            )

        item = await self.storage.create_cart_item({
            "session_id": session_id,
            "product_id": product.id,
            "quantity": quantity,
            "selected_size": key.selected_size,
            "selected_fabric_category": key.selected_fabric_category,
            "selected_fabric": key.selected_fabric,
            "custom_width": sanitize_integer(configuration.get("custom_width")),
            "custom_length": sanitize_integer(configuration.get("custom_length")),
            "has_lifting_mechanism": key.has_lifting_mechanism,
            "price": price,
        })
        logger.debug(f"New cart line {item.id} for session {session_id}")
        return item

    async def get_cart_items(self, session_id: str) -> List[Tuple[CartItem, Optional[Product]]]:
        """Every line with its live product, or None for a deleted product."""
        lines = []
        for item in await self.storage.get_cart_items(session_id):
            product = await self.storage.get_product(item.product_id)
            lines.append((item, product))
        return lines

    async def _owned_item(self, session_id: str, item_id: int) -> CartItem:
        item = await self.storage.get_cart_item(item_id)
        if item is None or item.session_id != session_id:
            raise NotFoundError("Cart item not found", entity="cart_item", entity_id=item_id)
        return item

    async def update_cart_item(self, session_id: str, item_id: int, changes: Dict[str, Any]) -> CartItem:
        item = await self._owned_item(session_id, item_id)

        data = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS and v is not None}
        if "quantity" in data and data["quantity"] < 1:
            raise StoreValidationError("Quantity must be at least 1", details={"quantity": data["quantity"]})
        if "has_lifting_mechanism" in data:
            data["has_lifting_mechanism"] = coerce_flag(data["has_lifting_mechanism"])

        if not data:
            return item
        return await self.storage.update_cart_item(item.id, data)

    async def remove_cart_item(self, session_id: str, item_id: int) -> None:
        """
        Idempotent: an absent id is a success. A line owned by another
        session is left alone and reported as not found.
        """
        item = await self.storage.get_cart_item(item_id)
        if item is None:
            return
        if item.session_id != session_id:
            raise NotFoundError("Cart item not found", entity="cart_item", entity_id=item_id)
        await self.storage.delete_cart_item(item_id)

    async def clear_cart(self, session_id: str) -> int:
        return await self.storage.clear_cart(session_id)

    async def summary(self, session_id: str) -> Dict[str, Any]:
        item_count = 0
        subtotal = Decimal("0")
        unavailable = 0
        for item, product in await self.get_cart_items(session_id):
            if product is None:
                unavailable += 1
                continue
            item_count += item.quantity
            subtotal += Decimal(item.price) * item.quantity
        return {
            "item_count": item_count,
            "subtotal": subtotal.quantize(Decimal("0.01")),
            "unavailable_count": unavailable,
        }
