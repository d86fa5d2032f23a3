"""
Storage port

Every service talks to persistence through this interface. Two backends
implement it: MemStorage (dict arena, tests and demo mode) and
DatabaseStorage (SQLAlchemy async session).

Write methods take plain dicts of column values and return ORM instances.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from app.models import CartItem, Order, OrderItem, Product, Review, User


class Storage(ABC):

    # Users
    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    async def list_users(self) -> List[User]: ...

    @abstractmethod
    async def create_user(self, data: Dict[str, Any]) -> User: ...

    @abstractmethod
    async def update_user(self, user_id: int, data: Dict[str, Any]) -> Optional[User]: ...

    @abstractmethod
    async def delete_user(self, user_id: int) -> bool: ...

    # Products
    @abstractmethod
    async def list_products(self, category: Optional[str] = None) -> List[Product]: ...

    @abstractmethod
    async def get_product(self, product_id: int) -> Optional[Product]: ...

    @abstractmethod
    async def create_product(self, data: Dict[str, Any]) -> Product: ...

    @abstractmethod
    async def update_product(self, product_id: int, data: Dict[str, Any]) -> Optional[Product]: ...

    @abstractmethod
    async def delete_product(self, product_id: int) -> bool:
        """Hard delete. Order items keep their snapshot with product_id nulled."""

    # Cart
    @abstractmethod
    async def get_cart_items(self, session_id: str) -> List[CartItem]: ...

    @abstractmethod
    async def get_cart_item(self, item_id: int) -> Optional[CartItem]: ...

    @abstractmethod
    async def create_cart_item(self, data: Dict[str, Any]) -> CartItem: ...

    @abstractmethod
    async def update_cart_item(self, item_id: int, data: Dict[str, Any]) -> Optional[CartItem]: ...

    @abstractmethod
    async def delete_cart_item(self, item_id: int) -> bool: ...

    @abstractmethod
    async def clear_cart(self, session_id: str) -> int:
        """Remove every line for the session; returns the number removed."""

    # Orders
    @abstractmethod
    async def list_orders(
        self,
        status: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> List[Order]:
        """Newest first."""

    @abstractmethod
    async def get_order(self, order_id: int) -> Optional[Order]: ...

    @abstractmethod
    async def get_order_items(self, order_id: int) -> List[OrderItem]: ...

    @abstractmethod
    async def create_order(self, data: Dict[str, Any]) -> Order:
        """Insert and make the order durable before any item is written."""

    @abstractmethod
    async def create_order_item(self, data: Dict[str, Any]) -> OrderItem:
        """
        Insert one item on its own.

        Raises StorageError when the backend rejects the row; the failure
        must not affect the order or previously written items.
        """

    @abstractmethod
    async def update_order(self, order_id: int, data: Dict[str, Any]) -> Optional[Order]: ...

    # Reviews
    @abstractmethod
    async def list_reviews(self, product_id: Optional[int] = None) -> List[Review]:
        """Newest first."""

    @abstractmethod
    async def get_review(self, review_id: int) -> Optional[Review]: ...

    @abstractmethod
    async def create_review(self, data: Dict[str, Any]) -> Review: ...

    @abstractmethod
    async def delete_review(self, review_id: int) -> bool: ...

    # Settings
    @abstractmethod
    async def get_settings(self) -> Dict[str, Any]:
        """Stored settings as a flat dict (empty when nothing saved)."""

    @abstractmethod
    async def save_settings(self, values: Dict[str, Any]) -> Dict[str, Any]: ...

    # Health
    async def ping(self) -> bool:
        return True
