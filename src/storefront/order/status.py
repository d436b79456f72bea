"""Order status descriptors — display metadata for each order status.

This is a lookup table, not a state machine. The storefront renders whatever
status value an order document carries; unknown or missing values render as
``placed``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from protean.fields import String

from storefront.domain import storefront


class OrderStatus(Enum):
    PLACED = "placed"
    CONFIRMED = "confirmed"
    PICKING = "picking"
    PACKING = "packing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value) -> "OrderStatus":
        """Look up a raw status value, falling back to PLACED. Matching is exact."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.PLACED


# Happy-path progression, in display order
PROGRESSION = (
    OrderStatus.PLACED,
    OrderStatus.CONFIRMED,
    OrderStatus.PICKING,
    OrderStatus.PACKING,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


@storefront.value_object
class StatusDescriptor:
    """How an order status is rendered: label, badge color, icon and a short description."""

    status = String(required=True, max_length=30)
    label = String(required=True, max_length=50)
    color = String(required=True, max_length=100)
    icon = String(required=True, max_length=30)
    description = String(max_length=255)


_DESCRIPTORS = {
    OrderStatus.PLACED: {
        "label": "Order Placed",
        "color": "bg-blue-100 text-blue-700",
        "icon": "clock",
        "description": "Your order has been received",
    },
    OrderStatus.CONFIRMED: {
        "label": "Confirmed",
        "color": "bg-purple-100 text-purple-700",
        "icon": "check-circle",
        "description": "Supplier has confirmed your order",
    },
    OrderStatus.PICKING: {
        "label": "Picking Items",
        "color": "bg-yellow-100 text-yellow-700",
        "icon": "package",
        "description": "Items are being picked from store",
    },
    OrderStatus.PACKING: {
        "label": "Packing",
        "color": "bg-orange-100 text-orange-700",
        "icon": "package",
        "description": "Your items are being packed",
    },
    OrderStatus.OUT_FOR_DELIVERY: {
        "label": "Out for Delivery",
        "color": "bg-blue-100 text-blue-700",
        "icon": "truck",
        "description": "Your order is on the way",
    },
    OrderStatus.DELIVERED: {
        "label": "Delivered",
        "color": "bg-green-100 text-green-700",
        "icon": "check-circle",
        "description": "Order has been delivered",
    },
    OrderStatus.CANCELLED: {
        "label": "Cancelled",
        "color": "bg-red-100 text-red-700",
        "icon": "x-circle",
        "description": "Order was cancelled",
    },
}


def describe_status(status) -> StatusDescriptor:
    """Return the display descriptor for a status value."""
    parsed = OrderStatus.parse(status)
    return StatusDescriptor(status=parsed.value, **_DESCRIPTORS[parsed])


def all_descriptors() -> list[StatusDescriptor]:
    return [describe_status(status) for status in OrderStatus]


@dataclass(frozen=True)
class TimelineStep:
    status: str
    label: str
    icon: str
    description: str
    completed: bool
    current: bool
    timestamp: str | None = None
    note: str | None = None


def build_timeline(current_status, status_history: list[dict[str, Any]] | None = None) -> list[TimelineStep]:
    """Lay out an order's progress for display.

    Regular orders show the full placed → delivered progression, marking the
    steps up to the current status as completed. Cancelled orders show only
    the recorded history, up to and including the cancellation.
    """
    history = status_history or []
    current = OrderStatus.parse(current_status)

    if current == OrderStatus.CANCELLED:
        cancelled_at = next(
            (i for i, entry in enumerate(history) if OrderStatus.parse(entry.get("status")) == current),
            None,
        )
        if cancelled_at is None:
            recorded = [*history, {"status": current.value}]
        else:
            recorded = history[: cancelled_at + 1]

        steps = []
        for entry in recorded:
            status = OrderStatus.parse(entry.get("status"))
            descriptor = describe_status(status)
            is_cancellation = status == OrderStatus.CANCELLED
            steps.append(
                TimelineStep(
                    status=status.value,
                    label="Order Cancelled" if is_cancellation else descriptor.label,
                    icon=descriptor.icon,
                    description=descriptor.description,
                    completed=True,
                    current=is_cancellation,
                    timestamp=entry.get("timestamp"),
                    note=entry.get("note"),
                )
            )
        return steps

    current_index = PROGRESSION.index(current)
    steps = []
    for index, status in enumerate(PROGRESSION):
        descriptor = describe_status(status)
        recorded = next((e for e in history if OrderStatus.parse(e.get("status")) == status), {})
        steps.append(
            TimelineStep(
                status=status.value,
                label=descriptor.label,
                icon=descriptor.icon,
                description=descriptor.description,
                completed=index <= current_index,
                current=index == current_index,
                timestamp=recorded.get("timestamp"),
                note=recorded.get("note"),
            )
        )
    return steps
