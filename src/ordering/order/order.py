"""Order aggregate: the persisted result of a checkout.

Items and totals are frozen copies taken at checkout and never re-read from
the catalogue. After creation only the lifecycle status and the tracking
number change, and only through administrative commands.

Lifecycle (forward only, skips allowed):
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    CANCELLED from any state before DELIVERED
DELIVERED and CANCELLED are terminal.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderStatusChanged, TrackingNumberUpdated
from ordering.pricing.engine import DeliveryOption
from shared.errors import InvalidInput, InvalidTransition


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


_PROGRESSION = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]

_TERMINAL_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    if current in _TERMINAL_STATES:
        return False
    if target == OrderStatus.CANCELLED:
        return True
    return _PROGRESSION.index(target) > _PROGRESSION.index(current)


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidInput("status", f"Unknown order status {value!r}") from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
_PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")
_PINCODE_PATTERN = re.compile(r"^[1-9][0-9]{5}$")


@ordering.value_object(part_of="Order")
class ShippingDetails:
    """Where and to whom the order ships, captured at checkout.

    Immutable once recorded on an order.
    """

    name = String(required=True, max_length=100)
    phone = String(required=True, max_length=10)
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=6)

    @invariant.post
    def fields_are_not_blank(self):
        blank = [
            field
            for field in ("name", "phone", "address", "city", "state", "pincode")
            if not (getattr(self, field) or "").strip()
        ]
        if blank:
            raise ValidationError({field: ["Must not be blank"] for field in blank})

    @invariant.post
    def phone_is_a_mobile_number(self):
        if self.phone and not _PHONE_PATTERN.match(self.phone):
            raise ValidationError({"phone": ["Phone must be a 10 digit mobile number"]})

    @invariant.post
    def pincode_is_valid(self):
        if self.pincode and not _PINCODE_PATTERN.match(self.pincode):
            raise ValidationError({"pincode": ["Pincode must be 6 digits and not start with 0"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A frozen copy of a cart line at purchase time."""

    product_id = Identifier(required=True)
    name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Integer(required=True, min_value=1)
    is_wholesale = Boolean(default=False)

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    owner_id = Identifier(required=True)
    items = HasMany(OrderItem)
    subtotal = Integer(required=True, min_value=0)
    shipping_cost = Integer(default=0, min_value=0)
    tax = Integer(default=0, min_value=0)
    total = Integer(required=True, min_value=0)
    is_wholesale_order = Boolean(default=False)
    delivery_option = String(choices=DeliveryOption, default=DeliveryOption.NORMAL.value)
    shipping_details = ValueObject(ShippingDetails, required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    gateway_order_id = String(max_length=255, unique=True)
    gateway_payment_id = String(max_length=255, unique=True)
    tracking_number = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_is_sum_of_parts(self):
        if self.total != self.subtotal + self.shipping_cost + self.tax:
            raise ValidationError(
                {"total": [f"Total {self.total} must equal subtotal + shipping + tax"]}
            )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        owner_id,
        items_data,
        totals,
        shipping_details,
        delivery_option,
        is_wholesale_order=False,
        status=OrderStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        gateway_order_id=None,
        gateway_payment_id=None,
    ):
        """Create an order from frozen lines and already reconciled totals.

        Args:
            items_data: List of dicts with product_id, name, quantity,
                        unit_price and is_wholesale.
            totals: A pricing Quote.
            shipping_details: Dict with name, phone, address, city, state, pincode.
        """
        now = datetime.now(UTC)
        order = cls(
            owner_id=owner_id,
            items=[
                OrderItem(
                    product_id=item["product_id"],
                    name=item.get("name"),
                    quantity=item["quantity"],
                    unit_price=item["unit_price"],
                    is_wholesale=bool(item.get("is_wholesale", False)),
                )
                for item in items_data
            ],
            subtotal=totals.subtotal,
            shipping_cost=totals.shipping_cost,
            tax=totals.tax,
            total=totals.total,
            is_wholesale_order=is_wholesale_order,
            delivery_option=DeliveryOption(delivery_option).value,
            shipping_details=ShippingDetails(**shipping_details),
            status=status.value,
            payment_status=payment_status.value,
            gateway_order_id=gateway_order_id,
            gateway_payment_id=gateway_payment_id,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                owner_id=str(owner_id),
                item_count=len(order.items),
                subtotal=order.subtotal,
                shipping_cost=order.shipping_cost,
                tax=order.tax,
                total=order.total,
                is_wholesale_order=order.is_wholesale_order,
                delivery_option=order.delivery_option,
                status=order.status,
                payment_status=order.payment_status,
                gateway_order_id=gateway_order_id,
                gateway_payment_id=gateway_payment_id,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Administrative changes
    # -------------------------------------------------------------------
    def change_status(self, new_status: OrderStatus) -> bool:
        """Move the order to ``new_status``. Returns False when already there."""
        current = OrderStatus(self.status)
        if new_status == current:
            return False
        if not can_transition(current, new_status):
            raise InvalidTransition(current.value, new_status.value)

        now = datetime.now(UTC)
        self.status = new_status.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=new_status.value,
                changed_at=now,
            )
        )
        return True

    def set_tracking_number(self, tracking_number) -> None:
        """Record the carrier tracking number. Blank clears it."""
        value = (tracking_number or "").strip() or None
        now = datetime.now(UTC)
        self.tracking_number = value
        self.updated_at = now
        self.raise_(
            TrackingNumberUpdated(
                order_id=str(self.id),
                tracking_number=value,
                updated_at=now,
            )
        )
