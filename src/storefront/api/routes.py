"""FastAPI routes for the Storefront domain — carts, orders and searches."""

import json
from dataclasses import asdict

from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CartIdResponse,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    CreateCartRequest,
    LineItemSchema,
    OrderDocumentRequest,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdateRequest,
    RecordSearchRequest,
    ReviewOrderRequest,
    SearchHistoryResponse,
    StatusDescriptorSchema,
    StatusResponse,
    TimelineStepSchema,
    UpdateCartQuantityRequest,
)
from storefront.cart.cart import ShoppingCart
from storefront.cart.checkout import CheckoutCart
from storefront.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.management import ClearCart, CreateCart
from storefront.order.feed import OrderFeed
from storefront.order.status import all_descriptors, build_timeline, describe_status
from storefront.pricing.policy import PricingPolicy, amount_to_free_delivery
from storefront.search.history import SearchHistory
from storefront.search.management import ClearSearchHistory, RecordSearch, history_for_session


def _cart_response(snapshot) -> CartResponse:
    totals = snapshot.totals
    return CartResponse(
        cart_id=snapshot.cart_id,
        items=[LineItemSchema(**item.to_dict()) for item in snapshot.items],
        item_count=totals.item_count,
        subtotal=totals.subtotal,
        savings=totals.savings,
        delivery_fee=totals.delivery_fee,
        total=totals.total,
        amount_to_free_delivery=amount_to_free_delivery(totals.subtotal, PricingPolicy.current()),
    )


def _loads(value, default):
    return json.loads(value) if value else default


def _descriptor_schema(status) -> StatusDescriptorSchema:
    descriptor = describe_status(status)
    return StatusDescriptorSchema(
        status=descriptor.status,
        label=descriptor.label,
        color=descriptor.color,
        icon=descriptor.icon,
        description=descriptor.description,
    )


def _order_response(card) -> OrderResponse:
    history = _loads(card.status_history, [])
    return OrderResponse(
        order_id=str(card.order_id),
        order_number=card.order_number,
        customer_id=str(card.customer_id) if card.customer_id else None,
        status=card.status,
        descriptor=_descriptor_schema(card.status),
        items=_loads(card.items, []),
        subtotal=card.subtotal,
        savings=card.savings,
        delivery_fee=card.delivery_fee,
        total=card.total,
        currency=card.currency,
        delivery_address=_loads(card.delivery_address, None),
        delivery_person=_loads(card.delivery_person, None),
        payment_method=card.payment_method,
        rating=card.rating,
        review=card.review,
        estimated_delivery=card.estimated_delivery,
        delivered_at=card.delivered_at,
        created_at=card.created_at,
        updated_at=card.updated_at,
        timeline=[TimelineStepSchema(**asdict(step)) for step in build_timeline(card.status, history)],
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(
        customer_id=body.customer_id,
        session_id=body.session_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    return _cart_response(cart.snapshot())


@cart_router.post("/{cart_id}/items", response_model=CartResponse)
async def add_cart_item(cart_id: str, body: AddToCartRequest) -> CartResponse:
    command = AddToCart(
        cart_id=cart_id,
        product_id=body.product_id,
        name=body.name,
        image=body.image,
        unit_price=body.unit_price,
        discount_price=body.discount_price,
        quantity=body.quantity,
    )
    snapshot = current_domain.process(command, asynchronous=False)
    return _cart_response(snapshot)


@cart_router.put("/{cart_id}/items/{product_id}", response_model=CartResponse)
async def update_cart_item_quantity(cart_id: str, product_id: str, body: UpdateCartQuantityRequest) -> CartResponse:
    command = UpdateCartQuantity(
        cart_id=cart_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    snapshot = current_domain.process(command, asynchronous=False)
    return _cart_response(snapshot)


@cart_router.delete("/{cart_id}/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(cart_id: str, product_id: str) -> CartResponse:
    command = RemoveFromCart(
        cart_id=cart_id,
        product_id=product_id,
    )
    snapshot = current_domain.process(command, asynchronous=False)
    return _cart_response(snapshot)


@cart_router.delete("/{cart_id}/items", response_model=CartResponse)
async def clear_cart(cart_id: str) -> CartResponse:
    snapshot = current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return _cart_response(snapshot)


@cart_router.post("/{cart_id}/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout_cart(cart_id: str, body: CheckoutRequest) -> CheckoutResponse:
    command = CheckoutCart(
        cart_id=cart_id,
        delivery_address=json.dumps(body.delivery_address.model_dump(exclude_none=True)),
        payment_method=body.payment_method,
        delivery_instructions=body.delivery_instructions,
    )
    receipt = current_domain.process(command, asynchronous=False)
    return CheckoutResponse(
        order_id=receipt.order_id,
        order_number=receipt.order_number,
        total=receipt.snapshot.totals.total,
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    customer_id: str | None = None,
    status: str | None = None,
    limit: int | None = None,
) -> OrderListResponse:
    cards = OrderFeed().list(customer_id=customer_id, status=status, limit=limit)
    orders = [_order_response(card) for card in cards]
    return OrderListResponse(orders=orders, count=len(orders))


@order_router.get("/statuses", response_model=list[StatusDescriptorSchema])
async def list_statuses() -> list[StatusDescriptorSchema]:
    return [_descriptor_schema(descriptor.status) for descriptor in all_descriptors()]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _order_response(OrderFeed().get(order_id))


@order_router.put("/{order_id}", response_model=OrderResponse)
async def push_order_snapshot(order_id: str, body: OrderDocumentRequest) -> OrderResponse:
    """Apply the latest order document delivered by the backend listener."""
    card = OrderFeed().apply_snapshot(order_id, body.model_dump(exclude_unset=True))
    return _order_response(card)


@order_router.post("/{order_id}/status", response_model=OrderResponse)
async def record_order_status(order_id: str, body: OrderStatusUpdateRequest) -> OrderResponse:
    card = OrderFeed().record_status(order_id, body.status, body.note)
    return _order_response(card)


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> OrderResponse:
    return _order_response(OrderFeed().cancel(order_id, body.reason))


@order_router.post("/{order_id}/review", response_model=OrderResponse)
async def review_order(order_id: str, body: ReviewOrderRequest) -> OrderResponse:
    return _order_response(OrderFeed().review(order_id, body.rating, body.review))


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def discard_order(order_id: str) -> StatusResponse:
    if not OrderFeed().discard(order_id):
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return StatusResponse()


# ---------------------------------------------------------------------------
# Search Router
# ---------------------------------------------------------------------------
search_router = APIRouter(prefix="/searches", tags=["searches"])


@search_router.get("/{session_id}", response_model=SearchHistoryResponse)
async def get_search_history(session_id: str, q: str | None = None) -> SearchHistoryResponse:
    history = history_for_session(session_id) or SearchHistory.create(session_id=session_id)
    return SearchHistoryResponse(
        session_id=session_id,
        recent=history.recent,
        suggestions=history.suggestions(q) if q else [],
    )


@search_router.post("/{session_id}", response_model=SearchHistoryResponse)
async def record_search(session_id: str, body: RecordSearchRequest) -> SearchHistoryResponse:
    terms = current_domain.process(RecordSearch(session_id=session_id, term=body.term), asynchronous=False)
    return SearchHistoryResponse(session_id=session_id, recent=terms)


@search_router.delete("/{session_id}", response_model=StatusResponse)
async def clear_search_history(session_id: str) -> StatusResponse:
    current_domain.process(ClearSearchHistory(session_id=session_id), asynchronous=False)
    return StatusResponse()
