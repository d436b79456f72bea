"""Tests for cart checkout."""

import json
import re
from datetime import UTC, datetime

import pytest
from protean.exceptions import ValidationError
from storefront.cart.cart import CheckoutReceipt, ShoppingCart, generate_order_number
from storefront.cart.events import CartCheckedOut, CartCleared

ADDRESS = {"full_name": "Asha Gurung", "phone": "9800000000", "street": "Milanchowk", "city": "Butwal"}


def _cart_with_items():
    cart = ShoppingCart.create(customer_id="cust-001")
    cart.add_item("prod-001", 300.0, 2, discount_price=250.0, name="Basmati Rice 5kg")
    cart.add_item("prod-002", 40.0, 1, name="Milk 1L")
    return cart


def _checked_out_event(cart):
    events = [e for e in cart._events if isinstance(e, CartCheckedOut)]
    assert len(events) == 1
    return events[0]


class TestCheckout:
    def test_checkout_returns_receipt(self):
        cart = _cart_with_items()
        receipt = cart.checkout(ADDRESS, "cod")
        assert isinstance(receipt, CheckoutReceipt)
        assert receipt.order_id
        assert receipt.snapshot.totals.subtotal == 540.0
        assert receipt.snapshot.totals.total == 540.0

    def test_checkout_empties_cart(self):
        cart = _cart_with_items()
        cart.checkout(ADDRESS, "cod")
        assert len(cart.items) == 0
        assert cart.totals().total == 0.0

    def test_checkout_does_not_raise_cleared_event(self):
        cart = _cart_with_items()
        cart.checkout(ADDRESS, "cod")
        assert not any(isinstance(e, CartCleared) for e in cart._events)

    def test_checkout_raises_event_with_order_document(self):
        cart = _cart_with_items()
        receipt = cart.checkout(ADDRESS, "esewa", delivery_instructions="Ring twice")
        event = _checked_out_event(cart)

        assert event.order_id == receipt.order_id
        assert event.order_number == receipt.order_number
        assert event.customer_id == "cust-001"
        assert event.subtotal == 540.0
        assert event.savings == 100.0
        assert event.delivery_fee == 0.0
        assert event.total == 540.0
        assert event.currency == "NPR"
        assert event.payment_method == "esewa"
        assert event.delivery_instructions == "Ring twice"
        assert json.loads(event.delivery_address) == ADDRESS

        items = json.loads(event.items)
        assert len(items) == 2
        rice = next(i for i in items if i["product_id"] == "prod-001")
        assert rice["price"] == 250.0
        assert rice["total"] == 500.0
        assert rice["quantity"] == 2

    def test_estimated_delivery_is_an_hour_out(self):
        cart = _cart_with_items()
        cart.checkout(ADDRESS, "cod")
        event = _checked_out_event(cart)
        assert (event.estimated_delivery - event.placed_at).total_seconds() == 60 * 60

    def test_small_order_includes_delivery_fee(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        cart.add_item("prod-001", 300.0, 1)
        receipt = cart.checkout(ADDRESS, "cod")
        assert receipt.snapshot.totals.delivery_fee == 50.0
        assert receipt.snapshot.totals.total == 350.0

    def test_cannot_checkout_empty_cart(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        with pytest.raises(ValidationError):
            cart.checkout(ADDRESS, "cod")

    def test_cannot_checkout_below_minimum_order(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        cart.add_item("prod-001", 5.0, 1)
        with pytest.raises(ValidationError):
            cart.checkout(ADDRESS, "cod")
        assert cart.contains("prod-001")


class TestOrderNumber:
    def test_order_number_format(self):
        cart = _cart_with_items()
        receipt = cart.checkout(ADDRESS, "cod")
        assert re.fullmatch(r"QC-\d{8}-\d{3}", receipt.order_number)

    def test_order_number_carries_the_date(self):
        number = generate_order_number(datetime(2024, 3, 9, tzinfo=UTC))
        assert number.startswith("QC-20240309-")
