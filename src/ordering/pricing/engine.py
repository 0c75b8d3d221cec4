"""Pricing engine: authoritative checkout totals.

Pure functions, no persistence and no catalogue access: everything is derived
from the (unit_price, quantity) pairs already frozen on a cart or order plus
the buyer context. All amounts are integer major currency units.

    subtotal = sum(unit_price * quantity)
    tax      = 18% of subtotal, rounded half-up to a whole unit
    shipping = 0 for wholesale buyers (negotiated separately);
               retail express: 200 flat;
               retail normal: free from 1000, otherwise 80
    total    = subtotal + shipping + tax

Wholesale buyers must reach a minimum subtotal of 10000 before checkout.
"""

from dataclasses import asdict, dataclass
from enum import Enum

from shared.errors import BelowMinimumOrder, InvalidInput

TAX_RATE_PERCENT = 18
FREE_SHIPPING_THRESHOLD = 1000
STANDARD_SHIPPING = 80
EXPRESS_SHIPPING = 200
WHOLESALE_MINIMUM_ORDER = 10000


class DeliveryOption(Enum):
    NORMAL = "normal"
    EXPRESS = "express"
    WHOLESALE = "wholesale"


@dataclass(frozen=True)
class BuyerContext:
    is_wholesale_buyer: bool = False
    delivery_option: DeliveryOption = DeliveryOption.NORMAL


@dataclass(frozen=True)
class Quote:
    subtotal: int
    shipping_cost: int
    tax: int
    total: int

    def to_dict(self) -> dict:
        return asdict(self)


def resolve_delivery_option(value, is_wholesale_buyer: bool) -> DeliveryOption:
    """Normalise a requested delivery option for the buyer.

    Wholesale orders always ship on negotiated terms, whatever was requested.
    Retail buyers may only pick normal or express delivery.
    """
    if is_wholesale_buyer:
        return DeliveryOption.WHOLESALE

    if isinstance(value, DeliveryOption):
        option = value
    else:
        try:
            option = DeliveryOption((value or DeliveryOption.NORMAL.value).lower())
        except ValueError:
            raise InvalidInput("delivery_option", f"Unknown delivery option: {value}") from None

    if option == DeliveryOption.WHOLESALE:
        raise InvalidInput("delivery_option", "Wholesale delivery is only available to wholesale buyers")
    return option


def buyer_context(is_wholesale_buyer: bool, delivery_option=None) -> BuyerContext:
    return BuyerContext(
        is_wholesale_buyer=is_wholesale_buyer,
        delivery_option=resolve_delivery_option(delivery_option, is_wholesale_buyer),
    )


def subtotal_of(lines) -> int:
    """Sum of unit_price * quantity over (unit_price, quantity) pairs."""
    return sum(int(unit_price) * int(quantity) for unit_price, quantity in lines)


def tax_on(subtotal: int) -> int:
    # Integer half-up rounding: no float ever touches a currency amount
    return (subtotal * TAX_RATE_PERCENT + 50) // 100


def shipping_for(subtotal: int, buyer: BuyerContext) -> int:
    if buyer.is_wholesale_buyer:
        return 0
    if buyer.delivery_option == DeliveryOption.EXPRESS:
        return EXPRESS_SHIPPING
    if subtotal >= FREE_SHIPPING_THRESHOLD:
        return 0
    return STANDARD_SHIPPING


def quote(lines, buyer: BuyerContext) -> Quote:
    subtotal = subtotal_of(lines)
    shipping_cost = shipping_for(subtotal, buyer)
    tax = tax_on(subtotal)
    return Quote(
        subtotal=subtotal,
        shipping_cost=shipping_cost,
        tax=tax,
        total=subtotal + shipping_cost + tax,
    )


def enforce_minimum_order(subtotal: int, buyer: BuyerContext) -> None:
    """Reject wholesale checkouts below the minimum order amount."""
    if buyer.is_wholesale_buyer and subtotal < WHOLESALE_MINIMUM_ORDER:
        raise BelowMinimumOrder(WHOLESALE_MINIMUM_ORDER, subtotal)


def reconcile(lines, buyer: BuyerContext, claimed: dict) -> Quote:
    """Check caller-supplied totals against the engine.

    Totals arriving with an order come from the client, which may have
    computed them from a stale or manipulated cart. Every component has to
    match what the engine derives from the frozen line items.
    """
    expected = quote(lines, buyer)
    enforce_minimum_order(expected.subtotal, buyer)

    for field, value in expected.to_dict().items():
        if field in claimed and claimed[field] is not None and claimed[field] != value:
            raise InvalidInput(field, f"Expected {field} {value}, got {claimed[field]}")
    return expected
