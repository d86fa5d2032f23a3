"""
In-memory storage backend

Keeps ORM instances in per-table dicts keyed by auto-incrementing ids.
Used by the test suite and by STORAGE_BACKEND=memory. Mirrors the
database's referential behaviour where the services depend on it:
order items need an existing product, deleting a product nulls order
item references and drops its reviews, cart lines are left orphaned.
"""
import logging
from itertools import count
from typing import Any, Dict, List, Optional

from app.core.exceptions import StorageError
from app.core.utils import utcnow
from app.models import CartItem, Order, OrderItem, Product, Review, User
from app.storage.base import Storage

logger = logging.getLogger(__name__)


def column_values(model, data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys that are not columns of the model."""
    columns = model.__table__.columns.keys()
    return {k: v for k, v in data.items() if k in columns}


def apply_column_defaults(obj) -> None:
    """Fill Python-side column defaults the way an INSERT would."""
    for column in obj.__table__.columns:
        if column.primary_key or column.default is None:
            continue
        if getattr(obj, column.key) is not None:
            continue
        default = column.default
        if default.is_callable:
            setattr(obj, column.key, default.arg(None))
        elif default.is_scalar:
            setattr(obj, column.key, default.arg)


class MemStorage(Storage):

    def __init__(self):
        self.users: Dict[int, User] = {}
        self.products: Dict[int, Product] = {}
        self.cart_items: Dict[int, CartItem] = {}
        self.orders: Dict[int, Order] = {}
        self.order_items: Dict[int, OrderItem] = {}
        self.reviews: Dict[int, Review] = {}
        self.settings: Dict[str, Any] = {}
        self._ids = {
            name: count(1)
            for name in ("users", "products", "cart_items", "orders", "order_items", "reviews")
        }

    def _insert(self, table: str, model, data: Dict[str, Any]):
        obj = model(**column_values(model, data))
        apply_column_defaults(obj)
        obj.id = next(self._ids[table])
        getattr(self, table)[obj.id] = obj
        return obj

    @staticmethod
    def _update(obj, model, data: Dict[str, Any]):
        for key, value in column_values(model, data).items():
            if key != "id":
                setattr(obj, key, value)
        if "updated_at" in model.__table__.columns.keys():
            obj.updated_at = utcnow()
        return obj

    @staticmethod
    def _newest_first(rows):
        return sorted(rows, key=lambda r: r.id, reverse=True)

    # Users

    async def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    async def list_users(self) -> List[User]:
        return sorted(self.users.values(), key=lambda u: u.id)

    async def create_user(self, data: Dict[str, Any]) -> User:
        for field in ("username", "email"):
            if any(getattr(u, field) == data.get(field) for u in self.users.values()):
                raise StorageError(f"Duplicate {field}", details={"field": field})
        return self._insert("users", User, data)

    async def update_user(self, user_id: int, data: Dict[str, Any]) -> Optional[User]:
        user = self.users.get(user_id)
        if user is None:
            return None
        return self._update(user, User, data)

    async def delete_user(self, user_id: int) -> bool:
        return self.users.pop(user_id, None) is not None

    # Products

    async def list_products(self, category: Optional[str] = None) -> List[Product]:
        products = sorted(self.products.values(), key=lambda p: p.id)
        if category:
            products = [p for p in products if p.category == category]
        return products

    async def get_product(self, product_id: int) -> Optional[Product]:
        return self.products.get(product_id)

    async def create_product(self, data: Dict[str, Any]) -> Product:
        return self._insert("products", Product, data)

    async def update_product(self, product_id: int, data: Dict[str, Any]) -> Optional[Product]:
        product = self.products.get(product_id)
        if product is None:
            return None
        return self._update(product, Product, data)

    async def delete_product(self, product_id: int) -> bool:
        if self.products.pop(product_id, None) is None:
            return False
        # ON DELETE SET NULL
        for item in self.order_items.values():
            if item.product_id == product_id:
                item.product_id = None
        # ON DELETE CASCADE
        for review_id in [r.id for r in self.reviews.values() if r.product_id == product_id]:
            del self.reviews[review_id]
        return True

    # Cart

    async def get_cart_items(self, session_id: str) -> List[CartItem]:
        return [i for i in sorted(self.cart_items.values(), key=lambda i: i.id) if i.session_id == session_id]

    async def get_cart_item(self, item_id: int) -> Optional[CartItem]:
        return self.cart_items.get(item_id)

    async def create_cart_item(self, data: Dict[str, Any]) -> CartItem:
        return self._insert("cart_items", CartItem, data)

    async def update_cart_item(self, item_id: int, data: Dict[str, Any]) -> Optional[CartItem]:
        item = self.cart_items.get(item_id)
        if item is None:
            return None
        return self._update(item, CartItem, data)

    async def delete_cart_item(self, item_id: int) -> bool:
        return self.cart_items.pop(item_id, None) is not None

    async def clear_cart(self, session_id: str) -> int:
        ids = [i.id for i in self.cart_items.values() if i.session_id == session_id]
        for item_id in ids:
            del self.cart_items[item_id]
        return len(ids)

    # Orders

    async def list_orders(
        self,
        status: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> List[Order]:
        orders = self.orders.values()
        if status:
            orders = [o for o in orders if o.status == status]
        if session_id:
            orders = [o for o in orders if o.session_id == session_id]
        return self._newest_first(orders)

    async def get_order(self, order_id: int) -> Optional[Order]:
        return self.orders.get(order_id)

    async def get_order_items(self, order_id: int) -> List[OrderItem]:
        return [i for i in sorted(self.order_items.values(), key=lambda i: i.id) if i.order_id == order_id]

    async def create_order(self, data: Dict[str, Any]) -> Order:
        return self._insert("orders", Order, data)

    async def create_order_item(self, data: Dict[str, Any]) -> OrderItem:
        if data.get("order_id") not in self.orders:
            raise StorageError("Order item references a missing order", details={"order_id": data.get("order_id")})
        product_id = data.get("product_id")
        if product_id is not None and product_id not in self.products:
            raise StorageError(
                "Order item references a missing product",
                details={"product_id": product_id},
            )
        return self._insert("order_items", OrderItem, data)

    async def update_order(self, order_id: int, data: Dict[str, Any]) -> Optional[Order]:
        order = self.orders.get(order_id)
        if order is None:
            return None
        return self._update(order, Order, data)

    # Reviews

    async def list_reviews(self, product_id: Optional[int] = None) -> List[Review]:
        reviews = self.reviews.values()
        if product_id is not None:
            reviews = [r for r in reviews if r.product_id == product_id]
        return self._newest_first(reviews)

    async def get_review(self, review_id: int) -> Optional[Review]:
        return self.reviews.get(review_id)

    async def create_review(self, data: Dict[str, Any]) -> Review:
        if data.get("product_id") not in self.products:
            raise StorageError("Review references a missing product", details={"product_id": data.get("product_id")})
        return self._insert("reviews", Review, data)

    async def delete_review(self, review_id: int) -> bool:
        return self.reviews.pop(review_id, None) is not None

    # Settings

    async def get_settings(self) -> Dict[str, Any]:
        return dict(self.settings)

    async def save_settings(self, values: Dict[str, Any]) -> Dict[str, Any]:
        self.settings.update(values)
        return dict(self.settings)
