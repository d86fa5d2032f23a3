"""
DatabaseStorage tests against SQLite with foreign keys enforced
"""
import pytest
from decimal import Decimal

from app.core.exceptions import StorageError
from app.services.cart_service import CartService
from app.services.order_service import OrderService
from app.services.order_defaults import apply_order_defaults, apply_order_item_defaults
from tests.conftest import add_product


def item_record(order_id: int, product_id, **overrides) -> dict:
    record = apply_order_item_defaults({"productId": product_id, "price": "30000", **overrides})
    record["order_id"] = order_id
    return record


class TestProducts:

    @pytest.mark.asyncio
    async def test_configuration_round_trip(self, db_storage):
        created = await add_product(db_storage)

        product = await db_storage.get_product(created.id)
        assert product.base_price == Decimal("30000")
        assert [s["id"] for s in product.sizes] == ["single", "double", "king", "custom"]
        assert product.sizes[0]["priceDelta"] == -5000
        assert product.fabric_categories[2]["priceMultiplier"] == 1.3
        assert product.fabrics[2]["categoryId"] == "premium"
        assert product.specifications == [{"key": "Frame", "value": "Pine"}]

    @pytest.mark.asyncio
    async def test_list_by_category(self, db_storage):
        await add_product(db_storage)
        await add_product(db_storage, name="Mattress", category="mattress")

        assert [p.name for p in await db_storage.list_products(category="mattress")] == ["Mattress"]
        assert len(await db_storage.list_products()) == 2


class TestOrderItems:

    @pytest.mark.asyncio
    async def test_bad_item_leaves_order_and_next_item(self, db_storage):
        product_id = (await add_product(db_storage)).id
        order = await db_storage.create_order(apply_order_defaults({"customerName": "Ivan"}))
        order_id = order.id

        with pytest.raises(StorageError):
            await db_storage.create_order_item(item_record(order_id, 999))

        saved = await db_storage.create_order_item(item_record(order_id, product_id))
        assert saved.order_id == order_id
        assert (await db_storage.get_order(order_id)).customer_name == "Ivan"
        assert len(await db_storage.get_order_items(order_id)) == 1

    @pytest.mark.asyncio
    async def test_checkout_with_partial_failure(self, db_storage):
        product = await add_product(db_storage)
        orders = OrderService(db_storage)

        result = await orders.create_order({}, [
            {"productId": product.id, "price": "30000"},
            {"productId": 999, "price": "1000"},
            {"productId": product.id, "price": "30000", "quantity": 2},
        ])

        assert result.failed_items == 1
        assert result.order.status == "pending"
        assert len(result.items) == 2
        assert result.order.total_amount == Decimal("91000.00")

    @pytest.mark.asyncio
    async def test_product_delete_keeps_history(self, db_storage):
        product = await add_product(db_storage)
        product_id = product.id
        cart = CartService(db_storage)
        await cart.add_to_cart("s1", product_id, {}, price=Decimal("30000"))
        await db_storage.create_review({
            "product_id": product_id,
            "customer_name": "Olga",
            "rating": 5,
            "comment": "Great",
        })
        result = await OrderService(db_storage).create_order({}, [{"productId": product_id, "price": "30000"}])

        assert await db_storage.delete_product(product_id)

        items = await db_storage.get_order_items(result.order.id)
        assert items[0].product_id is None
        assert items[0].product_name == 'Bed "Morpheus"'
        assert await db_storage.list_reviews(product_id=product_id) == []

        lines = await cart.get_cart_items("s1")
        assert len(lines) == 1
        assert lines[0][1] is None

    @pytest.mark.asyncio
    async def test_list_orders_newest_first(self, db_storage):
        first = await db_storage.create_order(apply_order_defaults({"sessionId": "s1"}))
        second = await db_storage.create_order(apply_order_defaults({"sessionId": "s2", "status": "shipped"}))

        assert [o.id for o in await db_storage.list_orders()] == [second.id, first.id]
        assert [o.id for o in await db_storage.list_orders(status="shipped")] == [second.id]
        assert [o.id for o in await db_storage.list_orders(session_id="s1")] == [first.id]


class TestReviews:

    @pytest.mark.asyncio
    async def test_rating_out_of_range_rejected(self, db_storage):
        product = await add_product(db_storage)
        with pytest.raises(StorageError):
            await db_storage.create_review({
                "product_id": product.id,
                "customer_name": "Olga",
                "rating": 6,
                "comment": "Too good",
            })


class TestSettings:

    @pytest.mark.asyncio
    async def test_round_trip(self, db_storage):
        assert await db_storage.get_settings() == {}

        await db_storage.save_settings({"shopName": "Matrasov", "freeDeliveryThreshold": "20000"})
        saved = await db_storage.save_settings({"shopName": "Matrasov Plus", "enableSmsNotifications": False})

        assert saved == {
            "shopName": "Matrasov Plus",
            "freeDeliveryThreshold": "20000",
            "enableSmsNotifications": False,
        }

    @pytest.mark.asyncio
    async def test_ping(self, db_storage):
        assert await db_storage.ping()
