"""
SQLAlchemy storage backend

Runs on the request's AsyncSession. Regular writes are flushed and left
for the request scope to commit; order creation commits the order and
each of its items separately so one bad item cannot take the order down.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageError
from app.models import CartItem, Order, OrderItem, Product, Review, SiteSetting, User
from app.storage.base import Storage
from app.storage.memory import column_values

logger = logging.getLogger(__name__)


class DatabaseStorage(Storage):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch_one(self, stmt):
        # populate_existing refreshes rows expired by an earlier rollback
        result = await self.db.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def _fetch_all(self, stmt) -> list:
        result = await self.db.execute(stmt.execution_options(populate_existing=True))
        return list(result.scalars().all())

    async def _get(self, model, obj_id: int):
        return await self._fetch_one(select(model).where(model.id == obj_id))

    async def _add(self, model, data: Dict[str, Any]):
        obj = model(**column_values(model, data))
        self.db.add(obj)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not write {model.__tablename__} row", details={"error": str(e)}) from e
        await self.db.refresh(obj)
        return obj

    async def _update(self, model, obj_id: int, data: Dict[str, Any]):
        obj = await self._get(model, obj_id)
        if obj is None:
            return None
        for key, value in column_values(model, data).items():
            if key != "id":
                setattr(obj, key, value)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not update {model.__tablename__} row", details={"error": str(e)}) from e
        await self.db.refresh(obj)
        return obj

    async def _delete(self, model, obj_id: int) -> bool:
        result = await self.db.execute(delete(model).where(model.id == obj_id))
        return result.rowcount > 0

    # Users

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self._get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self._fetch_one(select(User).where(User.username == username))

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self._fetch_one(select(User).where(User.email == email))

    async def list_users(self) -> List[User]:
        return await self._fetch_all(select(User).order_by(User.id))

    async def create_user(self, data: Dict[str, Any]) -> User:
        return await self._add(User, data)

    async def update_user(self, user_id: int, data: Dict[str, Any]) -> Optional[User]:
        return await self._update(User, user_id, data)

    async def delete_user(self, user_id: int) -> bool:
        return await self._delete(User, user_id)

    # Products

    async def list_products(self, category: Optional[str] = None) -> List[Product]:
        stmt = select(Product).order_by(Product.id)
        if category:
            stmt = stmt.where(Product.category == category)
        return await self._fetch_all(stmt)

    async def get_product(self, product_id: int) -> Optional[Product]:
        return await self._get(Product, product_id)

    async def create_product(self, data: Dict[str, Any]) -> Product:
        return await self._add(Product, data)

    async def update_product(self, product_id: int, data: Dict[str, Any]) -> Optional[Product]:
        return await self._update(Product, product_id, data)

    async def delete_product(self, product_id: int) -> bool:
        # Core DELETE so the FK actions (SET NULL / CASCADE) run in the database;
        # reads use populate_existing, so stale identity-map rows get refreshed
        return await self._delete(Product, product_id)

    # Cart

    async def get_cart_items(self, session_id: str) -> List[CartItem]:
        return await self._fetch_all(
            select(CartItem).where(CartItem.session_id == session_id).order_by(CartItem.id)
        )

    async def get_cart_item(self, item_id: int) -> Optional[CartItem]:
        return await self._get(CartItem, item_id)

    async def create_cart_item(self, data: Dict[str, Any]) -> CartItem:
        return await self._add(CartItem, data)

    async def update_cart_item(self, item_id: int, data: Dict[str, Any]) -> Optional[CartItem]:
        return await self._update(CartItem, item_id, data)

    async def delete_cart_item(self, item_id: int) -> bool:
        return await self._delete(CartItem, item_id)

    async def clear_cart(self, session_id: str) -> int:
        result = await self.db.execute(delete(CartItem).where(CartItem.session_id == session_id))
        return result.rowcount

    # Orders

    async def list_orders(
        self,
        status: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> List[Order]:
        stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
        if status:
            stmt = stmt.where(Order.status == status)
        if session_id:
            stmt = stmt.where(Order.session_id == session_id)
        return await self._fetch_all(stmt)

    async def get_order(self, order_id: int) -> Optional[Order]:
        return await self._get(Order, order_id)

    async def get_order_items(self, order_id: int) -> List[OrderItem]:
        return await self._fetch_all(
            select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
        )

    async def create_order(self, data: Dict[str, Any]) -> Order:
        order = Order(**column_values(Order, data))
        self.db.add(order)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError("Could not write order", details={"error": str(e)}) from e
        await self.db.refresh(order)
        return order

    async def create_order_item(self, data: Dict[str, Any]) -> OrderItem:
        item = OrderItem(**column_values(OrderItem, data))
        self.db.add(item)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(
                "Could not write order item",
                details={"order_id": data.get("order_id"), "product_id": data.get("product_id"), "error": str(e)},
            ) from e
        await self.db.refresh(item)
        return item

    async def update_order(self, order_id: int, data: Dict[str, Any]) -> Optional[Order]:
        return await self._update(Order, order_id, data)

    # Reviews

    async def list_reviews(self, product_id: Optional[int] = None) -> List[Review]:
        stmt = select(Review).order_by(Review.created_at.desc(), Review.id.desc())
        if product_id is not None:
            stmt = stmt.where(Review.product_id == product_id)
        return await self._fetch_all(stmt)

    async def get_review(self, review_id: int) -> Optional[Review]:
        return await self._get(Review, review_id)

    async def create_review(self, data: Dict[str, Any]) -> Review:
        return await self._add(Review, data)

    async def delete_review(self, review_id: int) -> bool:
        return await self._delete(Review, review_id)

    # Settings

    async def get_settings(self) -> Dict[str, Any]:
        rows = await self._fetch_all(select(SiteSetting))
        values = {}
        for row in rows:
            try:
                values[row.key] = json.loads(row.value) if row.value is not None else None
            except json.JSONDecodeError:
                logger.warning(f"Unreadable value for setting {row.key}, ignoring")
        return values

    async def save_settings(self, values: Dict[str, Any]) -> Dict[str, Any]:
        rows = {row.key: row for row in await self._fetch_all(select(SiteSetting))}
        for key, value in values.items():
            encoded = json.dumps(value)
            if key in rows:
                rows[key].value = encoded
            else:
                self.db.add(SiteSetting(key=key, value=encoded, value_type="json"))
        await self.db.flush()
        return await self.get_settings()

    async def ping(self) -> bool:
        await self.db.execute(text("SELECT 1"))
        return True
