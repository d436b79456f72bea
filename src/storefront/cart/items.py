"""Cart item management — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    name = String(max_length=255)
    image = String(max_length=1024)
    unit_price = Float(required=True, min_value=0.0)
    discount_price = Float()
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    """Set a line's quantity. Zero removes the product from the cart."""

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        snapshot = cart.add_item(
            product_id=command.product_id,
            unit_price=command.unit_price,
            quantity=command.quantity,
            discount_price=command.discount_price,
            name=command.name,
            image=command.image,
        )
        repo.add(cart)
        return snapshot

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        snapshot = cart.update_quantity(
            product_id=command.product_id,
            quantity=command.quantity,
        )
        repo.add(cart)
        return snapshot

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        snapshot = cart.remove_item(product_id=command.product_id)
        repo.add(cart)
        return snapshot
