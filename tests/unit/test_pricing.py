"""
Tests for configuration pricing
"""
import pytest
from decimal import Decimal

from app.models import Product
from app.schemas.product import ProductCreate
from app.services.pricing import calculate_unit_price
from tests.conftest import bed_payload


def make_product(**overrides) -> Product:
    return Product(**ProductCreate.model_validate(bed_payload(**overrides)).to_record())


class TestCalculateUnitPrice:

    def test_base_configuration(self):
        product = make_product()
        assert calculate_unit_price(product, "double", "standard") == Decimal("30000.00")

    @pytest.mark.parametrize("size,expected", [
        ("single", Decimal("25000.00")),
        ("king", Decimal("36000.00")),
        ("unknown", Decimal("30000.00")),
        (None, Decimal("30000.00")),
    ])
    def test_size_delta(self, size, expected):
        assert calculate_unit_price(make_product(), size, "standard") == expected

    def test_fabric_category_multiplier(self):
        product = make_product()
        assert calculate_unit_price(product, "double", "premium") == Decimal("39000.00")
        assert calculate_unit_price(product, "double", "economy") == Decimal("24000.00")

    def test_unknown_fabric_category_adds_nothing(self):
        assert calculate_unit_price(make_product(), "double", "gold") == Decimal("30000.00")

    @pytest.mark.parametrize("flag", [True, "true", "on", "1"])
    def test_lifting_mechanism(self, flag):
        product = make_product()
        assert calculate_unit_price(product, "double", "standard", has_lifting_mechanism=flag) == Decimal("38500.00")

    def test_lifting_ignored_when_product_has_none(self):
        product = make_product(hasLiftingMechanism=False)
        assert calculate_unit_price(product, "double", "standard", has_lifting_mechanism=True) == Decimal("30000.00")

    def test_custom_size_area_difference(self):
        product = make_product()
        # 160x200 is 4000 cm^2 over 140x200: +400
        price = calculate_unit_price(product, "custom", "standard", custom_width=160, custom_length=200)
        assert price == Decimal("30400.00")
        # 120x200 is 4000 cm^2 under: -400
        price = calculate_unit_price(product, "custom", "standard", custom_width=120, custom_length=200)
        assert price == Decimal("29600.00")

    def test_custom_size_without_dimensions_prices_as_double(self):
        assert calculate_unit_price(make_product(), "custom", "standard") == Decimal("30000.00")

    def test_discount_applies_to_full_configuration(self):
        product = make_product(discount=10)
        # (30000 + 6000 + 9000 + 8500) * 0.9
        price = calculate_unit_price(product, "king", "premium", has_lifting_mechanism=True)
        assert price == Decimal("48150.00")
