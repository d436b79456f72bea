"""Shared BDD fixtures and step definitions for the Storefront domain."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.cart.cart import ShoppingCart
from storefront.cart.events import (
    CartCheckedOut,
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)

# Map event name strings to classes for dynamic lookup in Then steps
_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartQuantityUpdated": CartQuantityUpdated,
    "CartItemRemoved": CartItemRemoved,
    "CartCleared": CartCleared,
    "CartCheckedOut": CartCheckedOut,
}


@pytest.fixture()
def product_id():
    return "prod-bdd-001"


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@given("an empty cart", target_fixture="cart")
def empty_cart():
    return ShoppingCart.create(customer_id="cust-bdd-001")


@given(
    parsers.cfparse("the cart holds a product priced {price:g} with quantity {qty:d}"),
    target_fixture="cart",
)
def cart_with_product(cart, product_id, price, qty):
    cart.add_item(product_id, float(price), qty)
    cart._events.clear()
    return cart


@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(cart, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in cart._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in cart._events]}"
