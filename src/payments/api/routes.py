"""FastAPI routes for the Payments domain: payment intents and confirmations.

Handlers are plain functions and run in the FastAPI threadpool, since the
gateway call and the settlement locks block.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from ordering.api.schemas import OrderResponse
from ordering.checkout.saga import open_payment_intent, settle_verified_payment
from payments.api.schemas import CreatePaymentOrderRequest, PaymentOrderResponse, VerifyPaymentRequest
from shared.errors import InvalidSignature, PaymentProviderError
from shared.principal import Principal, get_principal

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/create-order", response_model=PaymentOrderResponse)
def create_payment_order(
    body: CreatePaymentOrderRequest,
    principal: Principal = Depends(get_principal),
) -> PaymentOrderResponse:
    """Open a gateway order for the total of the caller's cart.

    The requested amount must match the cart quote; the gateway is never asked
    to charge anything else.
    """
    try:
        gateway_order = open_payment_intent(
            principal.user_id,
            body.amount,
            currency=body.currency,
            receipt=body.receipt,
            delivery_option=body.delivery_option,
            is_wholesale_buyer=principal.is_wholesale_buyer,
        )
    except PaymentProviderError as exc:
        logger.error("Payment intent failed", owner_id=principal.user_id, error=str(exc))
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return PaymentOrderResponse(
        gateway_order_id=gateway_order.gateway_order_id,
        amount=gateway_order.amount,
        currency=gateway_order.currency,
        receipt=gateway_order.receipt,
    )


@payment_router.post("/verify-payment", response_model=OrderResponse)
def verify_payment(
    body: VerifyPaymentRequest,
    principal: Principal = Depends(get_principal),
) -> OrderResponse:
    """Verify a payment confirmation and turn it into an order.

    Safe to call more than once for the same payment: the order created the
    first time is returned.
    """
    try:
        order = settle_verified_payment(
            principal.user_id,
            gateway_order_id=body.gateway_order_id,
            gateway_payment_id=body.gateway_payment_id,
            signature=body.signature,
            order_data=body.order_data.model_dump(),
            is_wholesale_buyer=principal.is_wholesale_buyer,
        )
    except InvalidSignature as exc:
        logger.warning(
            "Payment verification rejected",
            owner_id=principal.user_id,
            gateway_order_id=body.gateway_order_id,
            reason=str(exc),
        )
        raise HTTPException(status_code=400, detail="Payment verification failed") from exc

    return OrderResponse.from_order(order)
