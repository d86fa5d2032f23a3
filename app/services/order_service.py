"""
OrderService - order creation and admin status changes

Order creation is best-effort: the order row is made durable first, then
each item is written on its own. An item the storage rejects is logged and
counted; it never undoes the order or stops the remaining items.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from app.core.config import settings
from app.core.exceptions import NotFoundError, StorageError, StoreValidationError
from app.models import Order, OrderItem
from app.models.order import ORDER_STATUSES
from app.services.cart_service import CartService
from app.services.order_defaults import (
    apply_order_defaults,
    apply_order_item_defaults,
    raw_value,
)
from app.storage.base import Storage
from app.utils.sanitizer import sanitize_integer, sanitize_string

logger = logging.getLogger(__name__)

COURIER_DELIVERY_METHOD = "courier"


class OrderCreationResult:
    """Result of order creation attempt."""

    def __init__(
        self,
        order: Order,
        items: List[OrderItem],
        failed_items: int = 0,
    ):
        self.order = order
        self.items = items
        self.failed_items = failed_items

    @property
    def complete(self) -> bool:
        return self.failed_items == 0


def delivery_price_for(delivery_method: Optional[str]) -> Decimal:
    if delivery_method == COURIER_DELIVERY_METHOD:
        return Decimal(settings.COURIER_DELIVERY_PRICE)
    return Decimal("0")


def cart_line_to_order_item(item, product) -> Dict[str, Any]:
    return {
        "product_id": item.product_id,
        "product_name": product.name if product is not None else None,
        "quantity": item.quantity,
        "selected_size": item.selected_size,
        "custom_width": item.custom_width,
        "custom_length": item.custom_length,
        "selected_fabric_category": item.selected_fabric_category,
        "selected_fabric": item.selected_fabric,
        "has_lifting_mechanism": item.has_lifting_mechanism,
        "price": item.price,
    }


class OrderService:
    """Order creation, lookup and status updates over the storage port."""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def _live_product_name(self, item: Mapping[str, Any]) -> Optional[str]:
        product_id = sanitize_integer(raw_value(item, "product_id"))
        if not product_id:
            return None
        product = await self.storage.get_product(product_id)
        return product.name if product is not None else None

    async def create_order(
        self,
        draft: Mapping[str, Any],
        items: Sequence[Mapping[str, Any]],
    ) -> OrderCreationResult:
        """
        Create an order and its items with the defaults policy applied.

        Args:
            draft: order fields, snake_case or camelCase, possibly incomplete
            items: line items in the same loose shape

        Returns:
            OrderCreationResult with the stored order, the items that were
            written, and how many were rejected.
        """
        record = apply_order_defaults(draft, items)

        order = await self.storage.create_order(record)
        order_id = order.id
        logger.info(f"Order {order_id} created for session {record['session_id']} with {len(items)} item(s)")

        failed = 0
        for position, item in enumerate(items, start=1):
            item_record = apply_order_item_defaults(item, product_name=await self._live_product_name(item))
            item_record["order_id"] = order_id
            try:
                await self.storage.create_order_item(item_record)
            except StorageError as e:
                failed += 1
                logger.error(
                    f"Order {order_id}: item {position} ({item_record['product_name']}) not saved: {e.message}",
                    exc_info=True,
                )

        if failed:
            logger.warning(f"Order {order_id} saved with {failed} of {len(items)} item(s) missing")

        order, saved_items = await self.get_order_detail(order_id)
        return OrderCreationResult(order, saved_items, failed_items=failed)

    async def checkout(
        self,
        session_id: str,
        draft: Dict[str, Any],
        items: Optional[List[Dict[str, Any]]] = None,
    ) -> OrderCreationResult:
        """
        Place an order for the session.

        Items come from the request when given, else from the session cart
        (lines whose product was deleted are left out). The cart is cleared
        afterwards; a failure there is logged, the order stands.
        """
        if not items:
            items = [
                cart_line_to_order_item(item, product)
                for item, product in await self._cart_lines(session_id)
                if product is not None
            ]
        if not items:
            raise StoreValidationError("Cart is empty")

        draft = dict(draft)
        draft["session_id"] = session_id
        draft["delivery_price"] = delivery_price_for(sanitize_string(raw_value(draft, "delivery_method")))

        result = await self.create_order(draft, items)

        try:
            await self.storage.clear_cart(session_id)
        except Exception as e:
            logger.error(f"Order {result.order.id}: could not clear cart for session {session_id}: {e}")

        return result

    async def _cart_lines(self, session_id: str):
        return await CartService(self.storage).get_cart_items(session_id)

    async def get_order_detail(self, order_id: int) -> Tuple[Order, List[OrderItem]]:
        order = await self.storage.get_order(order_id)
        if order is None:
            raise NotFoundError("Order not found", entity="order", entity_id=order_id)
        return order, await self.storage.get_order_items(order_id)

    async def list_orders(
        self,
        status: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> List[Order]:
        return await self.storage.list_orders(status=status, session_id=session_id)

    async def update_order_status(self, order_id: int, status: str) -> Order:
        """Any status in the fixed set may replace any other."""
        if status not in ORDER_STATUSES:
            raise StoreValidationError(
                f"Invalid status '{status}'",
                details={"allowed": list(ORDER_STATUSES)},
            )
        order = await self.storage.update_order(order_id, {"status": status})
        if order is None:
            raise NotFoundError("Order not found", entity="order", entity_id=order_id)
        return order

    async def import_orders(self, records: Sequence[Mapping[str, Any]]) -> Dict[str, int]:
        """Orders without items are skipped; everything else goes through create_order."""
        imported = skipped = failed_items = 0
        for record in records:
            items = raw_value(record, "items")
            if not isinstance(items, list) or not items:
                skipped += 1
                continue
            draft = {k: v for k, v in record.items() if k not in ("id", "items", "createdAt", "created_at")}
            result = await self.create_order(draft, items)
            imported += 1
            failed_items += result.failed_items
        logger.info(f"Order import: {imported} imported, {skipped} skipped, {failed_items} item(s) failed")
        return {"imported": imported, "skipped": skipped, "failed_items": failed_items}
