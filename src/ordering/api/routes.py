"""FastAPI routes for the Ordering domain: carts and orders.

Handlers are plain functions and run in the FastAPI threadpool, since storage
calls and the per-owner cart locks block.
"""

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddToCartRequest,
    CartResponse,
    CreateOrderRequest,
    OrderResponse,
    QuoteResponse,
    StatusResponse,
    UpdateCartItemRequest,
    UpdateOrderRequest,
)
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import ClearCart
from ordering.cart.presentation import present_cart
from ordering.cart.store import dispatch, get_or_create_cart, quote_cart
from ordering.checkout.saga import place_direct_order
from ordering.order.lifecycle import SetTrackingNumber, UpdateOrderStatus
from ordering.order.order import Order
from ordering.pricing.engine import resolve_delivery_option
from shared.principal import Principal, get_principal, require_admin

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_response(owner_id) -> CartResponse:
    return CartResponse.model_validate(present_cart(get_or_create_cart(owner_id)))


@cart_router.get("", response_model=CartResponse)
def get_cart(principal: Principal = Depends(get_principal)) -> CartResponse:
    return _cart_response(principal.user_id)


@cart_router.get("/quote", response_model=QuoteResponse)
def get_cart_quote(
    delivery_option: str | None = Query(default=None, alias="deliveryOption"),
    principal: Principal = Depends(get_principal),
) -> QuoteResponse:
    """Authoritative totals for the current cart."""
    option = resolve_delivery_option(delivery_option, principal.is_wholesale_buyer)
    quote = quote_cart(principal.user_id, option, principal.is_wholesale_buyer)
    return QuoteResponse(**quote.to_dict(), delivery_option=option.value)


@cart_router.post("", response_model=CartResponse)
def add_to_cart(body: AddToCartRequest, principal: Principal = Depends(get_principal)) -> CartResponse:
    command = AddToCart(
        owner_id=principal.user_id,
        product_id=body.product_id,
        quantity=body.quantity,
        wants_wholesale=body.is_wholesale,
    )
    dispatch(principal.user_id, command)
    return _cart_response(principal.user_id)


@cart_router.put("/items/{item_id}", response_model=CartResponse)
def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    principal: Principal = Depends(get_principal),
) -> CartResponse:
    command = UpdateCartQuantity(
        owner_id=principal.user_id,
        item_id=item_id,
        new_quantity=body.quantity,
    )
    dispatch(principal.user_id, command)
    return _cart_response(principal.user_id)


@cart_router.delete("/items/{item_id}", response_model=CartResponse)
def remove_cart_item(item_id: str, principal: Principal = Depends(get_principal)) -> CartResponse:
    command = RemoveFromCart(owner_id=principal.user_id, item_id=item_id)
    dispatch(principal.user_id, command)
    return _cart_response(principal.user_id)


@cart_router.delete("", response_model=StatusResponse)
def clear_cart(principal: Principal = Depends(get_principal)) -> StatusResponse:
    dispatch(principal.user_id, ClearCart(owner_id=principal.user_id))
    return StatusResponse(status="cleared")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
def create_order(body: CreateOrderRequest, principal: Principal = Depends(get_principal)) -> OrderResponse:
    """Place an order without online payment. It starts out pending."""
    order = place_direct_order(
        principal.user_id,
        body.model_dump(),
        is_wholesale_buyer=principal.is_wholesale_buyer,
    )
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
def list_my_orders(principal: Principal = Depends(get_principal)) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).for_owner(principal.user_id)
    return [OrderResponse.from_order(order) for order in orders]


# Admin routes are registered before /{order_id} so "admin" is not taken for an id
@order_router.get("/admin", response_model=list[OrderResponse])
def list_all_orders(_: Principal = Depends(require_admin)) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).list_all()
    return [OrderResponse.from_order(order) for order in orders]


@order_router.get("/admin/{order_id}", response_model=OrderResponse)
def get_any_order(order_id: str, _: Principal = Depends(require_admin)) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    return OrderResponse.from_order(order)


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_my_order(order_id: str, principal: Principal = Depends(get_principal)) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    if str(order.owner_id) != principal.user_id:
        raise ObjectNotFoundError(f"Order {order_id} not found")
    return OrderResponse.from_order(order)


@order_router.put("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: str,
    body: UpdateOrderRequest,
    _: Principal = Depends(require_admin),
) -> OrderResponse:
    """Admin update of status and/or tracking number."""
    if body.status:
        current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    if body.tracking_number is not None:
        current_domain.process(
            SetTrackingNumber(order_id=order_id, tracking_number=body.tracking_number),
            asynchronous=False,
        )
    order = current_domain.repository_for(Order).get(order_id)
    return OrderResponse.from_order(order)
