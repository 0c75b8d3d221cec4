"""Pydantic request/response schemas for the Payments API.

These are external contracts (anti-corruption layer), separate from the
checkout services. Field names are camelCase on the wire.
"""

from decimal import Decimal

from pydantic import AliasChoices, Field

from ordering.api.schemas import CamelModel, OrderDataSchema


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreatePaymentOrderRequest(CamelModel):
    amount: Decimal | None = None
    currency: str | None = None
    receipt: str | None = None
    delivery_option: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "amount": 670,
                    "currency": "INR",
                    "receipt": "order_1718000000000",
                    "deliveryOption": "normal",
                }
            ]
        }
    }


class VerifyPaymentRequest(CamelModel):
    """Payment confirmation relayed by the browser after checkout.

    The gateway's own callback field names (``razorpay_order_id`` and so on)
    are accepted too.
    """

    gateway_order_id: str = Field(
        default="",
        validation_alias=AliasChoices("gatewayOrderId", "gateway_order_id", "razorpay_order_id"),
    )
    gateway_payment_id: str = Field(
        default="",
        validation_alias=AliasChoices("gatewayPaymentId", "gateway_payment_id", "razorpay_payment_id"),
    )
    signature: str = Field(
        default="",
        validation_alias=AliasChoices("signature", "razorpay_signature"),
    )
    order_data: OrderDataSchema


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class PaymentOrderResponse(CamelModel):
    gateway_order_id: str
    amount: int
    currency: str
    receipt: str | None = None
