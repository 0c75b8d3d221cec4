"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Field names are camelCase on the wire; the
snake_case names are accepted on input as well.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingDetailsSchema(CamelModel):
    name: str
    phone: str
    address: str
    city: str
    state: str
    pincode: str


class OrderItemSchema(CamelModel):
    product_id: str
    name: str | None = None
    quantity: int
    unit_price: int
    is_wholesale: bool = False


class OrderDataSchema(CamelModel):
    """Frozen cart contents and the totals the shopper was shown."""

    items: list[OrderItemSchema]
    subtotal: int | None = None
    shipping_cost: int | None = None
    tax: int | None = None
    total: int | None = None
    shipping_details: ShippingDetailsSchema
    delivery_option: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "items": [{"productId": "prod-001", "name": "Brass Lamp", "quantity": 1, "unitPrice": 500}],
                    "subtotal": 500,
                    "shippingCost": 80,
                    "tax": 90,
                    "total": 670,
                    "shippingDetails": {
                        "name": "Asha Rao",
                        "phone": "9876543210",
                        "address": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "pincode": "560001",
                    },
                    "deliveryOption": "normal",
                }
            ]
        },
    )


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = 1
    is_wholesale: bool = False


class UpdateCartItemRequest(CamelModel):
    quantity: int


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(OrderDataSchema):
    pass


class UpdateOrderRequest(CamelModel):
    status: str | None = None
    tracking_number: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartItemResponse(CamelModel):
    id: str
    product_id: str
    quantity: int
    unit_price: int
    is_wholesale: bool
    line_total: int
    added_at: datetime | None = None
    name: str | None = None
    image: str | None = None
    stock: int = 0
    in_stock: bool = False


class CartResponse(CamelModel):
    id: str
    owner_id: str
    items: list[CartItemResponse]
    total_amount: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QuoteResponse(CamelModel):
    subtotal: int
    shipping_cost: int
    tax: int
    total: int
    delivery_option: str


class OrderItemResponse(CamelModel):
    id: str
    product_id: str
    name: str | None = None
    quantity: int
    unit_price: int
    is_wholesale: bool


class OrderResponse(CamelModel):
    id: str
    owner_id: str
    items: list[OrderItemResponse]
    subtotal: int
    shipping_cost: int
    tax: int
    total: int
    is_wholesale_order: bool
    delivery_option: str
    shipping_details: ShippingDetailsSchema
    status: str
    payment_status: str
    gateway_order_id: str | None = None
    gateway_payment_id: str | None = None
    tracking_number: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        details = order.shipping_details
        return cls(
            id=str(order.id),
            owner_id=str(order.owner_id),
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    name=item.name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    is_wholesale=bool(item.is_wholesale),
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            tax=order.tax,
            total=order.total,
            is_wholesale_order=bool(order.is_wholesale_order),
            delivery_option=order.delivery_option,
            shipping_details=ShippingDetailsSchema(
                name=details.name,
                phone=details.phone,
                address=details.address,
                city=details.city,
                state=details.state,
                pincode=details.pincode,
            ),
            status=order.status,
            payment_status=order.payment_status,
            gateway_order_id=order.gateway_order_id,
            gateway_payment_id=order.gateway_payment_id,
            tracking_number=order.tracking_number,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class StatusResponse(CamelModel):
    status: str = "ok"
