"""Tests for the cart pricing policy."""

import pytest
from storefront.pricing.policy import (
    CartTotals,
    LineItem,
    PricingPolicy,
    amount_to_free_delivery,
    calculate_delivery_fee,
    calculate_item_count,
    calculate_savings,
    calculate_subtotal,
    discount_percentage,
    price_cart,
)


def _item(product_id="prod-001", unit_price=100.0, quantity=1, discount_price=None):
    return LineItem(product_id=product_id, unit_price=unit_price, quantity=quantity, discount_price=discount_price)


class TestLineItem:
    def test_effective_price_without_discount(self):
        assert _item(unit_price=120.0).effective_price == 120.0

    def test_effective_price_uses_discount_below_price(self):
        item = _item(unit_price=300.0, discount_price=250.0)
        assert item.is_discounted
        assert item.effective_price == 250.0

    def test_discount_not_below_price_is_ignored(self):
        item = _item(unit_price=300.0, discount_price=300.0)
        assert not item.is_discounted
        assert item.effective_price == 300.0

    def test_zero_discount_is_ignored(self):
        assert _item(unit_price=80.0, discount_price=0.0).effective_price == 80.0

    def test_line_total(self):
        assert _item(unit_price=250.0, quantity=3).line_total == 750.0

    def test_from_dict(self):
        item = LineItem.from_dict({"product_id": "prod-9", "unit_price": "45", "quantity": "2"})
        assert item.product_id == "prod-9"
        assert item.unit_price == 45.0
        assert item.quantity == 2
        assert item.discount_price is None
        assert item.name == ""

    def test_is_immutable(self):
        item = _item()
        with pytest.raises(AttributeError):
            item.quantity = 5


class TestCalculations:
    def test_subtotal_uses_effective_prices(self):
        items = [_item("a", 300.0, 2, 250.0), _item("b", 40.0, 1)]
        assert calculate_subtotal(items) == 540.0

    def test_savings_only_counts_real_discounts(self):
        items = [_item("a", 300.0, 2, 250.0), _item("b", 40.0, 1, 45.0)]
        assert calculate_savings(items) == 100.0

    def test_item_count_sums_quantities(self):
        items = [_item("a", quantity=2), _item("b", quantity=3)]
        assert calculate_item_count(items) == 5

    def test_delivery_fee_below_threshold(self):
        assert calculate_delivery_fee(499.99, 1, PricingPolicy()) == 50.0

    def test_delivery_free_at_threshold(self):
        assert calculate_delivery_fee(500.0, 1, PricingPolicy()) == 0.0

    def test_delivery_free_for_empty_cart(self):
        assert calculate_delivery_fee(0.0, 0, PricingPolicy()) == 0.0

    def test_amount_to_free_delivery(self):
        assert amount_to_free_delivery(320.0, PricingPolicy()) == 180.0
        assert amount_to_free_delivery(800.0, PricingPolicy()) == 0.0

    def test_discount_percentage(self):
        assert discount_percentage(300.0, 250.0) == 17
        assert discount_percentage(100.0, 50.0) == 50
        assert discount_percentage(100.0, None) == 0
        assert discount_percentage(100.0, 120.0) == 0


class TestPriceCart:
    def test_empty_cart_is_all_zero(self):
        totals = price_cart([])
        assert totals.subtotal == 0.0
        assert totals.savings == 0.0
        assert totals.delivery_fee == 0.0
        assert totals.total == 0.0
        assert totals.item_count == 0

    def test_small_order_pays_delivery(self):
        totals = price_cart([_item(unit_price=300.0)])
        assert totals.subtotal == 300.0
        assert totals.savings == 0.0
        assert totals.delivery_fee == 50.0
        assert totals.total == 350.0
        assert totals.item_count == 1

    def test_discounted_order_reaching_threshold_ships_free(self):
        totals = price_cart([_item(unit_price=300.0, quantity=2, discount_price=250.0)])
        assert totals.subtotal == 500.0
        assert totals.savings == 100.0
        assert totals.delivery_fee == 0.0
        assert totals.total == 500.0
        assert totals.item_count == 2

    def test_total_is_subtotal_plus_delivery(self):
        items = [_item("a", 120.0, 1), _item("b", 35.5, 2, 30.0)]
        totals = price_cart(items)
        assert totals.total == totals.subtotal + totals.delivery_fee

    def test_returns_cart_totals_value_object(self):
        assert isinstance(price_cart([_item()]), CartTotals)

    def test_custom_policy(self):
        policy = PricingPolicy(free_delivery_threshold=100.0, flat_delivery_fee=20.0)
        assert price_cart([_item(unit_price=60.0)], policy).delivery_fee == 20.0
        assert price_cart([_item(unit_price=60.0, quantity=2)], policy).delivery_fee == 0.0


class TestPolicyConfiguration:
    def test_current_policy_reads_domain_config(self):
        policy = PricingPolicy.current()
        assert policy.free_delivery_threshold == 500.0
        assert policy.flat_delivery_fee == 50.0
        assert policy.min_order_amount == 10.0
        assert policy.currency == "NPR"
