"""Cart view — current cart contents and totals for UI rendering.

Totals are recomputed through the pricing policy every time the cart
changes, so the view always agrees with ``ShoppingCart.totals()``.
"""

import json
from datetime import UTC, datetime

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.events import (
    CartCheckedOut,
    CartCleared,
    CartCreated,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from storefront.domain import storefront
from storefront.pricing.policy import LineItem, price_cart


@storefront.projection
class CartView:
    cart_id = Identifier(identifier=True, required=True)
    customer_id = Identifier()
    session_id = String()
    items = Text()  # JSON: list of {product_id, name, image, unit_price, discount_price, quantity}
    item_count = Integer(default=0)
    subtotal = Float(default=0.0)
    savings = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    total = Float(default=0.0)
    last_order_id = Identifier()
    updated_at = DateTime()


@storefront.projector(projector_for=CartView, aggregates=[ShoppingCart])
class CartViewProjector:
    @on(CartCreated)
    def on_cart_created(self, event):
        current_domain.repository_for(CartView).add(
            CartView(
                cart_id=event.cart_id,
                customer_id=event.customer_id,
                session_id=event.session_id,
                items="[]",
                updated_at=event.created_at,
            )
        )

    @on(CartItemAdded)
    def on_item_added(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        items = json.loads(view.items) if view.items else []

        existing = next((i for i in items if i.get("product_id") == str(event.product_id)), None)
        if existing:
            existing["quantity"] = event.new_quantity
        else:
            items.append(
                LineItem(
                    product_id=str(event.product_id),
                    unit_price=event.unit_price,
                    quantity=event.new_quantity,
                    discount_price=event.discount_price,
                    name=event.name or "",
                    image=event.image,
                ).to_dict()
            )

        self._reprice(view, items)
        repo.add(view)

    @on(CartQuantityUpdated)
    def on_quantity_updated(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        items = json.loads(view.items) if view.items else []
        for item in items:
            if item.get("product_id") == str(event.product_id):
                item["quantity"] = event.new_quantity
                break
        self._reprice(view, items)
        repo.add(view)

    @on(CartItemRemoved)
    def on_item_removed(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        items = json.loads(view.items) if view.items else []
        items = [i for i in items if i.get("product_id") != str(event.product_id)]
        self._reprice(view, items)
        repo.add(view)

    @on(CartCleared)
    def on_cart_cleared(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        self._reprice(view, [])
        repo.add(view)

    @on(CartCheckedOut)
    def on_cart_checked_out(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        view.last_order_id = event.order_id
        self._reprice(view, [])
        repo.add(view)

    @staticmethod
    def _reprice(view, items):
        totals = price_cart(LineItem.from_dict(item) for item in items)
        view.items = json.dumps(items)
        view.item_count = totals.item_count
        view.subtotal = totals.subtotal
        view.savings = totals.savings
        view.delivery_fee = totals.delivery_fee
        view.total = totals.total
        view.updated_at = datetime.now(UTC)

    @staticmethod
    def _get_or_create_view(repo, cart_id):
        try:
            return repo.get(cart_id)
        except ObjectNotFoundError:
            return CartView(cart_id=cart_id, items="[]")
