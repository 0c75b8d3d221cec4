"""Domain events for the Order aggregate.

All events are versioned, immutable facts. Gateway identifiers travel on
OrderPlaced so that downstream reconciliation can match orders to payments.
"""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """An order was persisted, either from a verified payment or directly."""

    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    item_count = Integer(required=True)
    subtotal = Integer(required=True)
    shipping_cost = Integer(required=True)
    tax = Integer(required=True)
    total = Integer(required=True)
    is_wholesale_order = Boolean(default=False)
    delivery_option = String(required=True)
    status = String(required=True)
    payment_status = String(required=True)
    gateway_order_id = String()
    gateway_payment_id = String()
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved the order along its lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class TrackingNumberUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    tracking_number = String()
    updated_at = DateTime(required=True)
