"""Order materialization: commands and handler.

Both commands carry the frozen line items and the totals the client saw at
checkout. The handler re-derives the totals with the pricing engine, rejects
any mismatch, re-checks the wholesale minimum and only then persists the
order. A verified order must also total exactly the amount the gateway
charged for it. Settlement of verified payments is serialized per gateway
order by the checkout saga, which holds the lock across the whole dispatch.
"""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus, PaymentStatus
from ordering.pricing.engine import buyer_context, reconcile
from payments.intents import MINOR_UNITS_PER_MAJOR
from shared.errors import InvalidInput, PaymentMismatch

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class MaterializeVerifiedOrder:
    owner_id = Identifier(required=True)
    gateway_order_id = String(required=True, max_length=255)
    gateway_payment_id = String(required=True, max_length=255)
    charged_amount = Integer(required=True, min_value=1)  # minor units
    items = Text(required=True)  # JSON: list of item dicts
    shipping_details = Text(required=True)  # JSON: shipping details dict
    subtotal = Integer()
    shipping_cost = Integer()
    tax = Integer()
    total = Integer()
    delivery_option = String(max_length=20)
    is_wholesale_buyer = Boolean(default=False)


@ordering.command(part_of="Order")
class PlaceDirectOrder:
    owner_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of item dicts
    shipping_details = Text(required=True)  # JSON: shipping details dict
    subtotal = Integer()
    shipping_cost = Integer()
    tax = Integer()
    total = Integer()
    delivery_option = String(max_length=20)
    is_wholesale_buyer = Boolean(default=False)


def _load(value):
    return json.loads(value) if isinstance(value, str) else value


def _frozen_order(command, status, payment_status, gateway_order_id=None, gateway_payment_id=None):
    items_data = _load(command.items) or []
    if not items_data:
        raise InvalidInput("items", "An order needs at least one item")

    buyer = buyer_context(bool(command.is_wholesale_buyer), command.delivery_option)
    totals = reconcile(
        [(item["unit_price"], item["quantity"]) for item in items_data],
        buyer,
        {
            "subtotal": command.subtotal,
            "shipping_cost": command.shipping_cost,
            "tax": command.tax,
            "total": command.total,
        },
    )

    return Order.place(
        owner_id=command.owner_id,
        items_data=items_data,
        totals=totals,
        shipping_details=_load(command.shipping_details),
        delivery_option=buyer.delivery_option.value,
        is_wholesale_order=buyer.is_wholesale_buyer,
        status=status,
        payment_status=payment_status,
        gateway_order_id=gateway_order_id,
        gateway_payment_id=gateway_payment_id,
    )


@ordering.command_handler(part_of=Order)
class MaterializeOrderHandler:
    @handle(MaterializeVerifiedOrder)
    def materialize_verified_order(self, command):
        repo = current_domain.repository_for(Order)
        existing = repo.find_settled(command.gateway_order_id, command.gateway_payment_id)
        if existing is not None:
            if str(existing.owner_id) != str(command.owner_id):
                raise PaymentMismatch("Payment was settled for another owner")
            logger.info(
                "Payment already settled",
                gateway_order_id=command.gateway_order_id,
                order_id=str(existing.id),
            )
            return str(existing.id)

        order = _frozen_order(
            command,
            status=OrderStatus.CONFIRMED,
            payment_status=PaymentStatus.PAID,
            gateway_order_id=command.gateway_order_id,
            gateway_payment_id=command.gateway_payment_id,
        )
        if order.total * MINOR_UNITS_PER_MAJOR != command.charged_amount:
            raise PaymentMismatch(
                f"Order total {order.total} does not match the charged amount {command.charged_amount}"
            )
        repo.add(order)
        logger.info(
            "Order materialized from verified payment",
            order_id=str(order.id),
            owner_id=str(command.owner_id),
            gateway_order_id=command.gateway_order_id,
            total=order.total,
        )
        return str(order.id)

    @handle(PlaceDirectOrder)
    def place_direct_order(self, command):
        order = _frozen_order(
            command,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
        )
        current_domain.repository_for(Order).add(order)
        logger.info(
            "Direct order placed",
            order_id=str(order.id),
            owner_id=str(command.owner_id),
            total=order.total,
        )
        return str(order.id)
