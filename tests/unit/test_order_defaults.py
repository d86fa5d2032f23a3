"""
Tests for the order defaults table
"""
import pytest
from decimal import Decimal

from app.services.order_defaults import (
    MAX_MONEY,
    ORDER_DEFAULTS,
    apply_order_defaults,
    apply_order_item_defaults,
    order_total,
)


class TestApplyOrderDefaults:

    def test_empty_draft_gets_every_default(self):
        record = apply_order_defaults({})
        assert set(record) == set(ORDER_DEFAULTS)
        assert record["customer_name"] == "Guest"
        assert record["customer_email"] == "guest@example.com"
        assert record["customer_phone"] == "0000000000"
        assert record["address"] == ""
        assert record["delivery_method"] == "pickup"
        assert record["delivery_method_text"] == "Pickup"
        assert record["payment_method"] == "cash"
        assert record["payment_method_text"] == "Cash"
        assert record["status"] == "pending"
        assert record["total_amount"] == Decimal("0")
        assert record["session_id"].startswith("default-session-")

    def test_generated_session_ids_are_unique(self):
        assert apply_order_defaults({})["session_id"] != apply_order_defaults({})["session_id"]

    @pytest.mark.parametrize("value", [None, "", "   ", "null", "undefined"])
    def test_missing_literals_are_defaulted(self, value):
        record = apply_order_defaults({"customer_name": value, "session_id": value})
        assert record["customer_name"] == "Guest"
        assert record["session_id"].startswith("default-session-")

    def test_present_values_kept_and_stripped(self):
        record = apply_order_defaults({"customer_name": "  Ivan Petrov ", "session_id": "abc"})
        assert record["customer_name"] == "Ivan Petrov"
        assert record["session_id"] == "abc"

    def test_camel_case_keys(self):
        record = apply_order_defaults({"customerName": "Anna", "deliveryMethod": "courier"})
        assert record["customer_name"] == "Anna"
        assert record["delivery_method_text"] == "Courier"

    def test_method_texts_derive_from_methods(self):
        record = apply_order_defaults({"delivery_method": "courier", "payment_method": "card"})
        assert record["delivery_method_text"] == "Courier"
        assert record["payment_method_text"] == "Bank card"

    def test_explicit_texts_win(self):
        record = apply_order_defaults({"delivery_method": "courier", "delivery_method_text": "By van"})
        assert record["delivery_method_text"] == "By van"

    def test_unknown_status_falls_back_to_pending(self):
        assert apply_order_defaults({"status": "lost"})["status"] == "pending"
        assert apply_order_defaults({"status": "shipped"})["status"] == "shipped"

    def test_unparseable_total_is_defaulted(self):
        assert apply_order_defaults({"total_amount": "lots"})["total_amount"] == Decimal("0")
        assert apply_order_defaults({"total_amount": "90500"})["total_amount"] == Decimal("90500.00")

    def test_long_strings_truncated_to_column_length(self):
        record = apply_order_defaults({"customerName": "N" * 300, "deliveryMethod": "x" * 80, "comment": "c" * 5000})
        assert record["customer_name"] == "N" * 255
        assert record["delivery_method"] == "x" * 50
        assert record["delivery_method_text"] == "Pickup"
        # TEXT columns are unbounded
        assert len(record["comment"]) == 5000

    def test_money_beyond_column_range_is_defaulted(self):
        record = apply_order_defaults({"deliveryPrice": "100000000", "totalAmount": "1e12"})
        assert record["delivery_price"] == Decimal("0")
        assert record["total_amount"] == Decimal("0")
        assert apply_order_defaults({"totalAmount": str(MAX_MONEY)})["total_amount"] == MAX_MONEY

    @pytest.mark.parametrize("total", [None, "-5", "lots", "100000000"])
    def test_unusable_total_computed_from_items(self, total):
        items = [{"price": "30000", "quantity": 3}]
        record = apply_order_defaults({"totalAmount": total, "deliveryPrice": "500"}, items)
        assert record["total_amount"] == Decimal("90500.00")

    def test_usable_total_wins_over_items(self):
        record = apply_order_defaults({"totalAmount": "12345"}, [{"price": "30000"}])
        assert record["total_amount"] == Decimal("12345.00")


class TestApplyOrderItemDefaults:

    def test_empty_item(self):
        record = apply_order_item_defaults({})
        assert record["product_id"] is None
        assert record["product_name"] == "Unknown product"
        assert record["quantity"] == 1
        assert record["selected_size"] == "single"
        assert record["selected_fabric_category"] == "standard"
        assert record["selected_fabric"] == "beige"
        assert record["fabric_name"] == "beige"
        assert record["has_lifting_mechanism"] is False
        assert record["price"] == Decimal("0")

    def test_fabric_name_follows_fabric_code(self):
        record = apply_order_item_defaults({"selectedFabric": "velvet_blue"})
        assert record["fabric_name"] == "velvet_blue"

    def test_live_product_name_wins(self):
        record = apply_order_item_defaults({"productName": "From client"}, product_name="Bed")
        assert record["product_name"] == "Bed"

    def test_caller_name_used_without_live_product(self):
        record = apply_order_item_defaults({"productName": "From client"}, product_name=None)
        assert record["product_name"] == "From client"

    def test_bad_quantity_defaults_to_one(self):
        assert apply_order_item_defaults({"quantity": "0"})["quantity"] == 1
        assert apply_order_item_defaults({"quantity": "x"})["quantity"] == 1
        assert apply_order_item_defaults({"quantity": "3"})["quantity"] == 3

    def test_lifting_flag_coerced(self):
        assert apply_order_item_defaults({"hasLiftingMechanism": "true"})["has_lifting_mechanism"] is True
        assert apply_order_item_defaults({"hasLiftingMechanism": "undefined"})["has_lifting_mechanism"] is False

    def test_long_strings_truncated_to_column_length(self):
        record = apply_order_item_defaults({"selectedSize": "s" * 60, "selectedFabric": "f" * 300})
        assert record["selected_size"] == "s" * 50
        assert record["selected_fabric"] == "f" * 100
        assert record["fabric_name"] == "f" * 100

    def test_live_product_name_truncated(self):
        record = apply_order_item_defaults({}, product_name="B" * 600)
        assert record["product_name"] == "B" * 500

    def test_numbers_beyond_column_range_are_defaulted(self):
        record = apply_order_item_defaults({"quantity": str(2 ** 31), "price": "123456789", "customWidth": 2 ** 40})
        assert record["quantity"] == 1
        assert record["price"] == Decimal("0")
        assert record["custom_width"] is None


def test_order_total():
    items = [
        apply_order_item_defaults({"price": "30000", "quantity": 3}),
        apply_order_item_defaults({"price": "1500.50"}),
    ]
    assert order_total(items, Decimal("500")) == Decimal("92000.50")
    assert order_total([], None) == Decimal("0.00")


def test_order_total_capped_at_column_range():
    items = [apply_order_item_defaults({"price": "99999999", "quantity": 5})]
    assert order_total(items, Decimal("500")) == MAX_MONEY
