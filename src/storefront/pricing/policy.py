"""Pricing policy — pure computation of cart aggregates.

Every function here is side-effect free and recomputed on each read:

    subtotal     = Σ (discount_price or unit_price) × quantity
    savings      = Σ (unit_price − discount_price) × quantity   (discounted lines only)
    delivery_fee = 0 if subtotal ≥ FREE_DELIVERY_THRESHOLD else FLAT_DELIVERY_FEE
    total        = subtotal + delivery_fee

An empty cart prices to zero across the board; the flat fee is never charged
on nothing.
"""

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from protean.fields import Float, Integer

from storefront.domain import storefront
from storefront.utils.settings import custom_setting


@dataclass(frozen=True)
class LineItem:
    """Immutable copy of a single cart line."""

    product_id: str
    unit_price: float
    quantity: int
    discount_price: float | None = None
    name: str = ""
    image: str | None = None

    @property
    def is_discounted(self) -> bool:
        return bool(self.discount_price) and self.discount_price < self.unit_price

    @property
    def effective_price(self) -> float:
        return self.discount_price if self.is_discounted else self.unit_price

    @property
    def line_total(self) -> float:
        return self.effective_price * self.quantity

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineItem":
        return cls(
            product_id=str(data["product_id"]),
            unit_price=float(data["unit_price"]),
            quantity=int(data["quantity"]),
            discount_price=data.get("discount_price"),
            name=data.get("name") or "",
            image=data.get("image"),
        )

    @classmethod
    def from_entity(cls, item: Any) -> "LineItem":
        return cls(
            product_id=str(item.product_id),
            unit_price=item.unit_price,
            quantity=item.quantity,
            discount_price=item.discount_price,
            name=item.name or "",
            image=item.image,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PricingPolicy:
    """Business constants that drive cart pricing."""

    free_delivery_threshold: float = 500.0
    flat_delivery_fee: float = 50.0
    min_order_amount: float = 10.0
    currency: str = "NPR"

    @classmethod
    def current(cls) -> "PricingPolicy":
        """Build the policy from the active domain's configuration."""
        return cls(
            free_delivery_threshold=float(custom_setting("FREE_DELIVERY_THRESHOLD")),
            flat_delivery_fee=float(custom_setting("FLAT_DELIVERY_FEE")),
            min_order_amount=float(custom_setting("MIN_ORDER_AMOUNT")),
            currency=custom_setting("CURRENCY"),
        )


@storefront.value_object
class CartTotals:
    """Derived cart-level amounts."""

    subtotal = Float(default=0.0)
    savings = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    total = Float(default=0.0)
    item_count = Integer(default=0)


def calculate_subtotal(items: Iterable[LineItem]) -> float:
    return round(sum(item.line_total for item in items), 2)


def calculate_savings(items: Iterable[LineItem]) -> float:
    return round(
        sum((item.unit_price - item.discount_price) * item.quantity for item in items if item.is_discounted),
        2,
    )


def calculate_item_count(items: Iterable[LineItem]) -> int:
    return sum(item.quantity for item in items)


def calculate_delivery_fee(subtotal: float, item_count: int, policy: PricingPolicy) -> float:
    """Flat fee below the free-delivery threshold; nothing for an empty cart."""
    if item_count == 0:
        return 0.0
    if subtotal >= policy.free_delivery_threshold:
        return 0.0
    return policy.flat_delivery_fee


def amount_to_free_delivery(subtotal: float, policy: PricingPolicy) -> float:
    """How much more the customer must spend to get free delivery."""
    return round(max(0.0, policy.free_delivery_threshold - subtotal), 2)


def discount_percentage(unit_price: float, discount_price: float | None) -> int:
    if not unit_price or not discount_price or discount_price >= unit_price:
        return 0
    return round((unit_price - discount_price) / unit_price * 100)


def price_cart(items: Iterable[LineItem], policy: PricingPolicy | None = None) -> CartTotals:
    """Compute every cart aggregate for the given line items."""
    policy = policy or PricingPolicy.current()
    items = list(items)

    subtotal = calculate_subtotal(items)
    item_count = calculate_item_count(items)
    delivery_fee = calculate_delivery_fee(subtotal, item_count, policy)

    return CartTotals(
        subtotal=subtotal,
        savings=calculate_savings(items),
        delivery_fee=delivery_fee,
        total=subtotal + delivery_fee,
        item_count=item_count,
    )
