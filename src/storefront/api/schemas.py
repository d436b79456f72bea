"""Pydantic request/response schemas for the Storefront API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class DeliveryAddressSchema(BaseModel):
    full_name: str
    phone: str
    street: str
    city: str
    ward: str | None = None
    landmark: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class LineItemSchema(BaseModel):
    product_id: str
    name: str = ""
    image: str | None = None
    unit_price: float
    discount_price: float | None = None
    quantity: int


class StatusDescriptorSchema(BaseModel):
    status: str
    label: str
    color: str
    icon: str
    description: str | None = None


class TimelineStepSchema(BaseModel):
    status: str
    label: str
    icon: str
    description: str
    completed: bool
    current: bool
    timestamp: str | None = None
    note: str | None = None


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    customer_id: str | None = None
    session_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": None,
                    "session_id": "sess-7f3a",
                }
            ]
        }
    }


class AddToCartRequest(BaseModel):
    product_id: str
    name: str | None = None
    image: str | None = None
    unit_price: float = Field(ge=0)
    discount_price: float | None = Field(default=None, gt=0)
    quantity: int = Field(ge=1, default=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-basmati-5kg",
                    "name": "Basmati Rice 5kg",
                    "image": "https://cdn.example.com/rice.jpg",
                    "unit_price": 300.0,
                    "discount_price": 250.0,
                    "quantity": 2,
                }
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class CheckoutRequest(BaseModel):
    delivery_address: DeliveryAddressSchema
    payment_method: str = "cod"
    delivery_instructions: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "delivery_address": {
                        "full_name": "Asha Gurung",
                        "phone": "9800000000",
                        "street": "Milanchowk",
                        "city": "Butwal",
                        "ward": "6",
                    },
                    "payment_method": "cod",
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class OrderDocumentRequest(BaseModel):
    """An order document snapshot pushed by the backend listener."""

    order_number: str | None = None
    customer_id: str | None = None
    status: str | None = None
    items: list[dict[str, Any]] | None = None
    subtotal: float | None = None
    savings: float | None = None
    delivery_fee: float | None = None
    total: float | None = None
    currency: str | None = None
    delivery_address: dict[str, Any] | None = None
    delivery_instructions: str | None = None
    payment_method: str | None = None
    delivery_person: dict[str, Any] | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    review: str | None = None
    reviewed_at: datetime | None = None
    delivered_at: datetime | None = None
    status_history: list[dict[str, Any]] | None = None
    estimated_delivery: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderStatusUpdateRequest(BaseModel):
    status: str
    note: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str


class ReviewOrderRequest(BaseModel):
    rating: int
    review: str | None = None


# ---------------------------------------------------------------------------
# Search Request Schemas
# ---------------------------------------------------------------------------
class RecordSearchRequest(BaseModel):
    term: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class CartResponse(BaseModel):
    cart_id: str
    items: list[LineItemSchema]
    item_count: int
    subtotal: float
    savings: float
    delivery_fee: float
    total: float
    amount_to_free_delivery: float | None = None


class CheckoutResponse(BaseModel):
    order_id: str
    order_number: str
    total: float


class OrderResponse(BaseModel):
    order_id: str
    order_number: str | None = None
    customer_id: str | None = None
    status: str
    descriptor: StatusDescriptorSchema
    items: list[dict[str, Any]] = []
    subtotal: float | None = None
    savings: float | None = None
    delivery_fee: float | None = None
    total: float | None = None
    currency: str | None = None
    delivery_address: dict[str, Any] | None = None
    delivery_person: dict[str, Any] | None = None
    payment_method: str | None = None
    rating: float | None = None
    review: str | None = None
    estimated_delivery: datetime | None = None
    delivered_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    timeline: list[TimelineStepSchema] = []


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    count: int


class SearchHistoryResponse(BaseModel):
    session_id: str
    recent: list[str]
    suggestions: list[str] = []


class StatusResponse(BaseModel):
    status: str = "ok"
