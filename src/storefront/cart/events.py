"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartCreated:
    """A new, empty shopping cart was started for a customer or guest session."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier()
    session_id = String()
    created_at = DateTime(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the shopping cart (or its quantity increased)."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    name = String(max_length=255)
    image = String(max_length=1024)
    unit_price = Float(required=True)
    discount_price = Float()
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A product was removed from the shopping cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.event(part_of="ShoppingCart")
class CartCleared:
    """All items were removed from the shopping cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed_count = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartCheckedOut:
    """The shopping cart was submitted at checkout and an order document was placed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=50)
    customer_id = Identifier()
    items = Text(required=True)  # JSON: list of {product_id, name, quantity, price, total, ...}
    subtotal = Float(required=True)
    savings = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    total = Float(required=True)
    currency = String(max_length=3)
    delivery_address = Text()  # JSON object
    delivery_instructions = String(max_length=500)
    payment_method = String(max_length=50)
    placed_at = DateTime(required=True)
    estimated_delivery = DateTime()
