"""Order feed — applies order documents pushed by the external backend.

The backend's real-time listener delivers a full document snapshot whenever
an order changes. Snapshots are applied last-write-wins: every field present
in the incoming document overwrites the stored card, fields the document
leaves out are kept. Snapshots enforce no ordering or transition rules; the
storefront renders whatever status it is given.

The storefront also owns three customer-side updates: appending a status
change to the history, cancelling within the cancel window, and reviewing a
delivered order.
"""

import json
from datetime import UTC, datetime, timedelta
from typing import Any

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.order.status import TERMINAL_STATUSES, OrderStatus
from storefront.projections.order_card import OrderCard
from storefront.utils.logging import get_logger
from storefront.utils.settings import custom_setting

logger = get_logger(__name__)

# Document keys stored as JSON text on the card
_JSON_FIELDS = ("items", "delivery_address", "delivery_person", "status_history")

_SCALAR_FIELDS = (
    "order_number",
    "customer_id",
    "status",
    "subtotal",
    "savings",
    "delivery_fee",
    "total",
    "currency",
    "delivery_instructions",
    "payment_method",
    "rating",
    "review",
    "reviewed_at",
    "delivered_at",
    "estimated_delivery",
    "created_at",
)


class OrderFeed:
    """Read/write access to order cards for the storefront."""

    def __init__(self):
        self.repo = current_domain.repository_for(OrderCard)

    def apply_snapshot(self, order_id: str, document: dict[str, Any]) -> OrderCard:
        """Store the latest snapshot of an order document."""
        try:
            card = self.repo.get(order_id)
        except ObjectNotFoundError:
            card = OrderCard(order_id=order_id, status=document.get("status") or "placed")

        for field in _SCALAR_FIELDS:
            if field in document and document[field] is not None:
                setattr(card, field, document[field])

        for field in _JSON_FIELDS:
            if field in document and document[field] is not None:
                setattr(card, field, json.dumps(document[field]))

        card.updated_at = document.get("updated_at") or datetime.now(UTC)
        self.repo.add(card)

        logger.info("Order snapshot applied", order_id=order_id, status=card.status)
        return card

    def record_status(self, order_id: str, status: str, note: str | None = None) -> OrderCard:
        """Move an order to ``status`` and append the change to its history."""
        card = self.repo.get(order_id)
        now = datetime.now(UTC)

        history = json.loads(card.status_history) if card.status_history else []
        history.append(
            {
                "status": status,
                "timestamp": now.isoformat(),
                "note": note or f"Order status updated to {status}",
            }
        )

        card.status = status
        card.status_history = json.dumps(history)
        if status == OrderStatus.DELIVERED.value:
            card.delivered_at = now
        card.updated_at = now
        self.repo.add(card)

        logger.info("Order status recorded", order_id=order_id, status=status)
        return card

    def cancel(self, order_id: str, reason: str) -> OrderCard:
        """Cancel an order on the customer's behalf.

        Allowed while the order is still ``placed``, or within the cancel
        window after it was created. Delivered or cancelled orders stay as
        they are.
        """
        card = self.repo.get(order_id)

        if card.status in {s.value for s in TERMINAL_STATUSES}:
            raise ValidationError({"status": [f"Order is already {card.status}"]})

        window = custom_setting("CANCEL_WINDOW_MINUTES")
        if card.status != OrderStatus.PLACED.value and not self._within(card.created_at, window):
            raise ValidationError(
                {"status": [f"Order cannot be cancelled after {window} minutes or once confirmed"]}
            )

        return self.record_status(order_id, OrderStatus.CANCELLED.value, f"Cancelled by customer: {reason}")

    def review(self, order_id: str, rating: int, review: str | None = None) -> OrderCard:
        """Attach the customer's rating and review to a delivered order."""
        card = self.repo.get(order_id)

        if card.status != OrderStatus.DELIVERED.value:
            raise ValidationError({"status": ["Only delivered orders can be reviewed"]})
        if not 1 <= rating <= 5:
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})

        now = datetime.now(UTC)
        card.rating = rating
        card.review = review
        card.reviewed_at = now
        card.updated_at = now
        self.repo.add(card)

        logger.info("Order reviewed", order_id=order_id, rating=rating)
        return card

    @staticmethod
    def _within(created_at: datetime | None, minutes: int) -> bool:
        if created_at is None:
            return False
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return datetime.now(UTC) - created_at <= timedelta(minutes=minutes)

    def discard(self, order_id: str) -> bool:
        """Drop an order the backend reports as deleted. Returns False if unknown."""
        try:
            card = self.repo.get(order_id)
        except ObjectNotFoundError:
            return False

        self.repo._dao.delete(card)
        logger.info("Order discarded", order_id=order_id)
        return True

    def get(self, order_id: str) -> OrderCard:
        return self.repo.get(order_id)

    def list(self, customer_id: str | None = None, status: str | None = None, limit: int | None = None):
        """Orders, newest first, optionally narrowed to a customer and/or a status."""
        filters = {}
        if customer_id:
            filters["customer_id"] = customer_id
        if status:
            filters["status"] = status

        query = self.repo._dao.query
        cards = query.filter(**filters).all().items if filters else query.all().items
        cards = sorted(cards, key=lambda c: c.created_at.timestamp() if c.created_at else 0.0, reverse=True)
        return cards[:limit] if limit else cards
