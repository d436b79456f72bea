"""Shopping Cart aggregate (CQRS) — the customer's cart store.

The cart is a standard CQRS aggregate (not event sourced). It holds one line
per product, keeps quantities within ``1..MAX_QUANTITY`` and removes a line
as soon as its quantity drops to zero. Every mutation returns a fresh,
immutable ``CartSnapshot`` priced by the pricing policy, so callers never
hold on to live aggregate state.
"""

import json
import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.cart.events import (
    CartCheckedOut,
    CartCleared,
    CartCreated,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from storefront.domain import storefront
from storefront.pricing.policy import CartTotals, LineItem, PricingPolicy, price_cart
from storefront.utils.settings import custom_setting


@dataclass(frozen=True)
class CartSnapshot:
    """Point-in-time, read-only view of a cart and its totals."""

    cart_id: str
    items: tuple[LineItem, ...]
    totals: CartTotals

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> dict[str, Any]:
        return {
            "cart_id": self.cart_id,
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.totals.subtotal,
            "savings": self.totals.savings,
            "delivery_fee": self.totals.delivery_fee,
            "total": self.totals.total,
            "item_count": self.totals.item_count,
        }


@dataclass(frozen=True)
class CheckoutReceipt:
    """Outcome of a successful checkout: the placed order and what was submitted."""

    order_id: str
    order_number: str
    snapshot: CartSnapshot


def generate_order_number(now: datetime) -> str:
    """Human-facing order number: ``<PREFIX>-YYYYMMDD-NNN``."""
    prefix = custom_setting("ORDER_NUMBER_PREFIX")
    return f"{prefix}-{now:%Y%m%d}-{random.randint(0, 999):03d}"


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    image = String(max_length=1024)
    unit_price = Float(required=True, min_value=0.0)
    discount_price = Float()
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class ShoppingCart:
    customer_id = Identifier()  # Nullable for guest carts
    session_id = String(max_length=255)  # For guest cart identification
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id=None, session_id=None):
        now = datetime.now(UTC)
        cart = cls(
            customer_id=customer_id,
            session_id=session_id,
            created_at=now,
            updated_at=now,
        )
        cart.raise_(
            CartCreated(
                cart_id=str(cart.id),
                customer_id=str(customer_id) if customer_id else None,
                session_id=session_id,
                created_at=now,
            )
        )
        return cart

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def _find(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _require(self, product_id):
        item = self._find(product_id)
        if item is None:
            raise ValidationError({"product_id": [f"Product {product_id} is not in the cart"]})
        return item

    def contains(self, product_id) -> bool:
        return self._find(product_id) is not None

    def quantity_of(self, product_id) -> int:
        item = self._find(product_id)
        return item.quantity if item else 0

    def line_items(self) -> tuple[LineItem, ...]:
        return tuple(LineItem.from_entity(item) for item in self.items)

    def totals(self, policy: PricingPolicy | None = None) -> CartTotals:
        return price_cart(self.line_items(), policy)

    def snapshot(self, policy: PricingPolicy | None = None) -> CartSnapshot:
        items = self.line_items()
        return CartSnapshot(cart_id=str(self.id), items=items, totals=price_cart(items, policy))

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    @staticmethod
    def _check_quantity(quantity):
        max_quantity = custom_setting("MAX_QUANTITY")
        if quantity > max_quantity:
            raise ValidationError({"quantity": [f"Quantity cannot exceed {max_quantity}"]})

    def add_item(self, product_id, unit_price, quantity=1, discount_price=None, name=None, image=None):
        """Add a product to the cart, or increase its quantity if already present."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if discount_price is not None and not 0 < discount_price < unit_price:
            raise ValidationError({"discount_price": ["Discount price must be positive and below the unit price"]})

        existing = self._find(product_id)
        new_quantity = (existing.quantity if existing else 0) + quantity
        self._check_quantity(new_quantity)

        now = datetime.now(UTC)
        if existing:
            existing.quantity = new_quantity
        else:
            self.add_items(
                CartItem(
                    product_id=product_id,
                    name=name,
                    image=image,
                    unit_price=unit_price,
                    discount_price=discount_price,
                    quantity=quantity,
                    added_at=now,
                )
            )
            existing = self._find(product_id)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                name=existing.name,
                image=existing.image,
                unit_price=existing.unit_price,
                discount_price=existing.discount_price,
                quantity=quantity,
                new_quantity=new_quantity,
            )
        )
        return self.snapshot()

    def update_quantity(self, product_id, quantity):
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            return self.remove_item(product_id)

        item = self._require(product_id)
        self._check_quantity(quantity)

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )
        return self.snapshot()

    def remove_item(self, product_id):
        """Remove a product from the cart."""
        item = self._require(product_id)

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
            )
        )
        return self.snapshot()

    def _empty(self):
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

    def clear(self):
        """Empty the cart."""
        removed = len(self.items)
        self._empty()

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                items_removed_count=removed,
            )
        )
        return self.snapshot()

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def checkout(self, delivery_address, payment_method, delivery_instructions=None):
        """Submit the cart as an order and clear it."""
        if not self.items:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        policy = PricingPolicy.current()
        submitted = self.snapshot(policy)
        if submitted.totals.subtotal < policy.min_order_amount:
            raise ValidationError({"subtotal": [f"Minimum order amount is {policy.min_order_amount:g}"]})

        now = datetime.now(UTC)
        order_id = str(uuid4())
        order_number = generate_order_number(now)

        order_items = [
            {
                "product_id": item.product_id,
                "name": item.name,
                "image": item.image,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "discount_price": item.discount_price,
                "price": item.effective_price,
                "total": item.line_total,
            }
            for item in submitted.items
        ]

        self.raise_(
            CartCheckedOut(
                cart_id=str(self.id),
                order_id=order_id,
                order_number=order_number,
                customer_id=str(self.customer_id) if self.customer_id else None,
                items=json.dumps(order_items),
                subtotal=submitted.totals.subtotal,
                savings=submitted.totals.savings,
                delivery_fee=submitted.totals.delivery_fee,
                total=submitted.totals.total,
                currency=policy.currency,
                delivery_address=json.dumps(delivery_address),
                delivery_instructions=delivery_instructions,
                payment_method=payment_method,
                placed_at=now,
                estimated_delivery=now + timedelta(minutes=custom_setting("DELIVERY_MINUTES")),
            )
        )

        self._empty()
        return CheckoutReceipt(order_id=order_id, order_number=order_number, snapshot=submitted)
