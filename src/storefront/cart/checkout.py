"""Cart checkout — command and handler.

Submits the cart as an order document (status ``placed``) and clears it.
The order itself lives outside this domain; the storefront only keeps the
OrderCard read model, which the CartCheckedOut event seeds.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="ShoppingCart")
class CheckoutCart:
    cart_id = Identifier(required=True)
    delivery_address = Text(required=True)  # JSON object
    payment_method = String(required=True, max_length=50)
    delivery_instructions = String(max_length=500)


@storefront.command_handler(part_of=ShoppingCart)
class CheckoutCartHandler:
    @handle(CheckoutCart)
    def checkout_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)

        address = (
            json.loads(command.delivery_address)
            if isinstance(command.delivery_address, str)
            else command.delivery_address
        )

        receipt = cart.checkout(
            delivery_address=address,
            payment_method=command.payment_method,
            delivery_instructions=command.delivery_instructions,
        )
        repo.add(cart)

        logger.info(
            "Cart checked out",
            cart_id=str(cart.id),
            order_id=receipt.order_id,
            order_number=receipt.order_number,
            total=receipt.snapshot.totals.total,
        )
        return receipt
