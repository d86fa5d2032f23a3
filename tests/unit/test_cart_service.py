"""
Tests for cart line identity and merging
"""
import pytest
from decimal import Decimal

from app.core.exceptions import NotFoundError, StoreValidationError
from app.services.cart_service import CartService, line_key

SESSION = "session-a"
OTHER_SESSION = "session-b"

DOUBLE_BEIGE = {
    "selected_size": "double",
    "selected_fabric_category": "standard",
    "selected_fabric": "beige",
    "has_lifting_mechanism": False,
}


def config(**overrides) -> dict:
    data = dict(DOUBLE_BEIGE)
    data.update(overrides)
    return data


class TestLineKey:

    def test_lifting_flag_normalized(self):
        assert line_key(SESSION, 1, "double", "standard", "beige", False) == \
            line_key(SESSION, 1, "double", "standard", "beige", None)
        assert line_key(SESSION, 1, "double", "standard", "beige", True) == \
            line_key(SESSION, 1, "double", "standard", "beige", "on")

    def test_dimensions_ignored_by_default(self):
        assert line_key(SESSION, 1, "custom", "standard", "beige", False, 160, 200) == \
            line_key(SESSION, 1, "custom", "standard", "beige", False, 180, 200)

    def test_dimensions_included_when_enabled(self):
        assert line_key(SESSION, 1, "custom", "standard", "beige", False, 160, 200, include_dimensions=True) != \
            line_key(SESSION, 1, "custom", "standard", "beige", False, 180, 200, include_dimensions=True)


class TestAddToCart:

    @pytest.fixture
    def cart(self, storage):
        return CartService(storage, merge_custom_dimensions=False)

    @pytest.mark.asyncio
    async def test_identical_configuration_merges(self, cart, storage):
        first = await cart.add_to_cart(SESSION, 1, config(), quantity=1, price=Decimal("30000"))
        second = await cart.add_to_cart(SESSION, 1, config(), quantity=2, price=Decimal("35000"))

        items = await storage.get_cart_items(SESSION)
        assert len(items) == 1
        assert second.id == first.id
        assert items[0].quantity == 3
        # First-add price wins
        assert items[0].price == Decimal("30000")

    @pytest.mark.asyncio
    async def test_different_configuration_is_new_line(self, cart, storage):
        await cart.add_to_cart(SESSION, 1, config(), quantity=1)
        await cart.add_to_cart(SESSION, 1, config(selected_fabric="velvet_blue", selected_fabric_category="premium"))
        await cart.add_to_cart(SESSION, 1, config(selected_size="king"))

        assert len(await storage.get_cart_items(SESSION)) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stored,incoming", [
        (False, None),
        (False, "false"),
        (None, "undefined"),
        ("", "0"),
        (True, "true"),
        ("on", True),
    ])
    async def test_lifting_flag_shapes_merge(self, cart, storage, stored, incoming):
        await cart.add_to_cart(SESSION, 1, config(has_lifting_mechanism=stored))
        await cart.add_to_cart(SESSION, 1, config(has_lifting_mechanism=incoming))

        items = await storage.get_cart_items(SESSION)
        assert len(items) == 1
        assert items[0].quantity == 2

    @pytest.mark.asyncio
    async def test_lifting_true_and_false_are_different_lines(self, cart, storage):
        await cart.add_to_cart(SESSION, 1, config(has_lifting_mechanism=True))
        await cart.add_to_cart(SESSION, 1, config(has_lifting_mechanism=False))

        items = await storage.get_cart_items(SESSION)
        assert sorted(i.has_lifting_mechanism for i in items) == [False, True]

    @pytest.mark.asyncio
    async def test_custom_dimensions_merge_by_default(self, cart, storage):
        await cart.add_to_cart(SESSION, 1, config(selected_size="custom", custom_width=160, custom_length=200))
        await cart.add_to_cart(SESSION, 1, config(selected_size="custom", custom_width=180, custom_length=210))

        items = await storage.get_cart_items(SESSION)
        assert len(items) == 1
        assert items[0].quantity == 2
        # The first line's dimensions are kept
        assert (items[0].custom_width, items[0].custom_length) == (160, 200)

    @pytest.mark.asyncio
    async def test_custom_dimensions_split_when_enabled(self, storage):
        cart = CartService(storage, merge_custom_dimensions=True)
        await cart.add_to_cart(SESSION, 1, config(selected_size="custom", custom_width=160, custom_length=200))
        await cart.add_to_cart(SESSION, 1, config(selected_size="custom", custom_width=180, custom_length=210))
        await cart.add_to_cart(SESSION, 1, config(selected_size="custom", custom_width=160, custom_length=200))

        items = await storage.get_cart_items(SESSION)
        assert [(i.custom_width, i.quantity) for i in items] == [(160, 2), (180, 1)]

    @pytest.mark.asyncio
    async def test_sessions_never_share_lines(self, cart, storage):
        await cart.add_to_cart(SESSION, 1, config())
        await cart.add_to_cart(OTHER_SESSION, 1, config())

        assert len(await storage.get_cart_items(SESSION)) == 1
        assert len(await storage.get_cart_items(OTHER_SESSION)) == 1

    @pytest.mark.asyncio
    async def test_unknown_product(self, cart):
        with pytest.raises(NotFoundError):
            await cart.add_to_cart(SESSION, 999, config())

    @pytest.mark.asyncio
    async def test_price_computed_when_omitted(self, cart):
        item = await cart.add_to_cart(SESSION, 1, config(selected_size="king", has_lifting_mechanism="on"))
        assert item.price == Decimal("44500.00")

    @pytest.mark.asyncio
    async def test_quantity_below_one_rejected(self, cart):
        with pytest.raises(StoreValidationError):
            await cart.add_to_cart(SESSION, 1, config(), quantity=0)


class TestCartOwnership:

    @pytest.fixture
    def cart(self, storage):
        return CartService(storage, merge_custom_dimensions=False)

    @pytest.mark.asyncio
    async def test_update_quantity(self, cart):
        item = await cart.add_to_cart(SESSION, 1, config())
        updated = await cart.update_cart_item(SESSION, item.id, {"quantity": 5})
        assert updated.quantity == 5

    @pytest.mark.asyncio
    async def test_update_rejects_quantity_below_one(self, cart):
        item = await cart.add_to_cart(SESSION, 1, config())
        with pytest.raises(StoreValidationError):
            await cart.update_cart_item(SESSION, item.id, {"quantity": 0})

    @pytest.mark.asyncio
    async def test_update_other_sessions_line_is_not_found(self, cart, storage):
        item = await cart.add_to_cart(SESSION, 1, config())
        with pytest.raises(NotFoundError):
            await cart.update_cart_item(OTHER_SESSION, item.id, {"quantity": 5})
        assert (await storage.get_cart_item(item.id)).quantity == 1

    @pytest.mark.asyncio
    async def test_remove_other_sessions_line_leaves_it(self, cart, storage):
        item = await cart.add_to_cart(SESSION, 1, config())
        with pytest.raises(NotFoundError):
            await cart.remove_cart_item(OTHER_SESSION, item.id)
        assert await storage.get_cart_item(item.id) is not None

    @pytest.mark.asyncio
    async def test_remove_is_idempotent(self, cart, storage):
        item = await cart.add_to_cart(SESSION, 1, config())
        await cart.remove_cart_item(SESSION, item.id)
        await cart.remove_cart_item(SESSION, item.id)
        assert await storage.get_cart_items(SESSION) == []

    @pytest.mark.asyncio
    async def test_clear_only_touches_own_session(self, cart, storage):
        await cart.add_to_cart(SESSION, 1, config())
        await cart.add_to_cart(OTHER_SESSION, 1, config())

        assert await cart.clear_cart(SESSION) == 1
        assert await cart.clear_cart(SESSION) == 0
        assert len(await storage.get_cart_items(OTHER_SESSION)) == 1


class TestCartEnrichment:

    @pytest.mark.asyncio
    async def test_deleted_product_leaves_orphan_line(self, storage):
        cart = CartService(storage)
        await cart.add_to_cart(SESSION, 1, config(), price=Decimal("30000"))
        await storage.delete_product(1)

        lines = await cart.get_cart_items(SESSION)
        assert len(lines) == 1
        item, product = lines[0]
        assert item.product_id == 1
        assert product is None

    @pytest.mark.asyncio
    async def test_summary_skips_unavailable_lines(self, storage):
        from tests.conftest import add_product

        cart = CartService(storage)
        second = await add_product(storage, name="Mattress", category="mattress", basePrice="10000")
        await cart.add_to_cart(SESSION, 1, config(), quantity=2, price=Decimal("30000"))
        await cart.add_to_cart(SESSION, second.id, config(), quantity=1, price=Decimal("10000"))
        await storage.delete_product(second.id)

        summary = await cart.summary(SESSION)
        assert summary["item_count"] == 2
        assert summary["subtotal"] == Decimal("60000.00")
        assert summary["unavailable_count"] == 1
