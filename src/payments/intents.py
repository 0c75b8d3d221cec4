"""Payment intents: opening a gateway order for a checkout total.

Amounts arrive in major currency units and leave in minor units (x100). The
conversion goes through Decimal so that 670.5 becomes exactly 67050, and an
amount that cannot be expressed in whole minor units is rejected rather than
rounded.
"""

import time
from decimal import Decimal, InvalidOperation

import structlog

from payments.config import get_settings
from payments.gateway import get_gateway
from payments.gateway.port import GatewayOrder
from shared.errors import InvalidAmount

logger = structlog.get_logger(__name__)

MINOR_UNITS_PER_MAJOR = 100


def to_minor_units(amount) -> int:
    """Convert a major-unit amount to integer minor units, exactly."""
    if amount is None or isinstance(amount, bool):
        raise InvalidAmount()
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise InvalidAmount() from None

    if not value.is_finite() or value < 1:
        raise InvalidAmount()

    minor = value * MINOR_UNITS_PER_MAJOR
    if minor != minor.to_integral_value():
        raise InvalidAmount("Amount has more precision than the currency allows")
    return int(minor)


def default_receipt() -> str:
    return f"order_{int(time.time() * 1000)}"


def create_intent(amount, currency: str | None = None, receipt: str | None = None) -> GatewayOrder:
    """Open a gateway order for ``amount`` major units.

    Raises InvalidAmount for amounts below 1 or finer than a minor unit, and
    PaymentProviderError when the gateway fails.
    """
    amount_minor = to_minor_units(amount)
    currency = (currency or get_settings().currency).upper()
    receipt = receipt or default_receipt()

    gateway_order = get_gateway().create_order(amount=amount_minor, currency=currency, receipt=receipt)
    logger.info(
        "Payment intent created",
        gateway_order_id=gateway_order.gateway_order_id,
        amount=gateway_order.amount,
        currency=gateway_order.currency,
        receipt=receipt,
    )
    return gateway_order
