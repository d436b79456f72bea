"""Order card — the order document as the storefront renders it.

Cards are seeded at checkout (status ``placed``) and afterwards replaced by
whatever snapshot the external backend pushes through the order feed.
"""

import json

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.events import CartCheckedOut
from storefront.domain import storefront
from storefront.order.status import OrderStatus


@storefront.projection
class OrderCard:
    order_id = Identifier(identifier=True, required=True)
    order_number = String(max_length=50)
    customer_id = Identifier()
    status = Text(required=True)  # Stored as given by the backend
    items = Text()  # JSON: list of {name, quantity, price, total, ...}
    subtotal = Float(default=0.0)
    savings = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    total = Float(default=0.0)
    currency = String(max_length=3)
    delivery_address = Text()  # JSON object
    delivery_instructions = String(max_length=500)
    payment_method = String(max_length=50)
    delivery_person = Text()  # JSON object: {name, phone, ...}
    rating = Float()
    review = Text()
    reviewed_at = DateTime()
    delivered_at = DateTime()
    status_history = Text()  # JSON: list of {status, timestamp, note}
    estimated_delivery = DateTime()
    created_at = DateTime()
    updated_at = DateTime()


@storefront.projector(projector_for=OrderCard, aggregates=[ShoppingCart])
class OrderCardProjector:
    @on(CartCheckedOut)
    def on_cart_checked_out(self, event):
        repo = current_domain.repository_for(OrderCard)
        try:
            repo.get(event.order_id)
            return  # The external feed already delivered this order
        except ObjectNotFoundError:
            pass

        history = [
            {
                "status": OrderStatus.PLACED.value,
                "timestamp": event.placed_at.isoformat(),
                "note": "Order placed successfully",
            }
        ]
        repo.add(
            OrderCard(
                order_id=event.order_id,
                order_number=event.order_number,
                customer_id=event.customer_id,
                status=OrderStatus.PLACED.value,
                items=event.items,
                subtotal=event.subtotal,
                savings=event.savings,
                delivery_fee=event.delivery_fee,
                total=event.total,
                currency=event.currency,
                delivery_address=event.delivery_address,
                delivery_instructions=event.delivery_instructions,
                payment_method=event.payment_method,
                status_history=json.dumps(history),
                estimated_delivery=event.estimated_delivery,
                created_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )
