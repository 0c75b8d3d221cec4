"""Checkout saga: open a payment intent, settle the payment, persist the order.

Opening an intent prices the owner's cart and only asks the gateway to charge
exactly that total; the gateway order is then recorded against its owner and
charged amount. Settlement pairs a signed confirmation with that record, so
an order is only marked paid for the owner who opened the intent and only
when its total equals what was charged.

The order write always comes first and is idempotent on the gateway order
id. Deleting the cart afterwards is best-effort: a failure there is logged
and the caller still gets the order.

Settlement for one gateway order is serialized through a keyed lock held
across the whole command dispatch. Writers outside this process are caught
by the unique constraints on the gateway identifiers; the loser returns the
winner's order.
"""

import json

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.cart.store import discard_cart, quote_cart
from ordering.checkout.intent import PaymentIntent
from ordering.order.materialization import MaterializeVerifiedOrder, PlaceDirectOrder
from ordering.order.order import Order
from ordering.pricing.engine import buyer_context, enforce_minimum_order
from ordering.utils.locks import settlement_locks
from payments.config import get_settings
from payments.gateway.port import GatewayOrder
from payments.intents import MINOR_UNITS_PER_MAJOR, create_intent, to_minor_units
from payments.verification import verify
from shared.errors import InvalidAmount, InvalidInput, PaymentMismatch

logger = structlog.get_logger(__name__)

_GATEWAY_KEYS = ("gateway_order_id", "gateway_payment_id")


def _is_duplicate_settlement(exc: ValidationError) -> bool:
    messages = getattr(exc, "messages", None) or {}
    return any(key in messages for key in _GATEWAY_KEYS)


def _owned_by(order: Order, owner_id) -> Order:
    if str(order.owner_id) != str(owner_id):
        logger.warning(
            "Confirmation replayed by another owner",
            gateway_order_id=order.gateway_order_id,
            owner_id=str(owner_id),
        )
        raise PaymentMismatch("Payment was settled for another owner")
    return order


def _order_fields(owner_id, order_data: dict, is_wholesale_buyer: bool) -> dict:
    return {
        "owner_id": owner_id,
        "items": json.dumps(order_data["items"]),
        "shipping_details": json.dumps(order_data["shipping_details"]),
        "subtotal": order_data.get("subtotal"),
        "shipping_cost": order_data.get("shipping_cost"),
        "tax": order_data.get("tax"),
        "total": order_data.get("total"),
        "delivery_option": order_data.get("delivery_option"),
        "is_wholesale_buyer": is_wholesale_buyer,
    }


def retire_cart(owner_id) -> None:
    """Delete the owner's cart after an order was persisted. Never raises."""
    try:
        discard_cart(owner_id)
    except Exception:
        logger.exception("Cart could not be deleted after order placement", owner_id=str(owner_id))


# ---------------------------------------------------------------------------
# Payment intents
# ---------------------------------------------------------------------------
def record_intent(owner_id, gateway_order: GatewayOrder) -> PaymentIntent:
    intent = PaymentIntent.open(owner_id, gateway_order)
    current_domain.repository_for(PaymentIntent).add(intent)
    return intent


def find_intent(gateway_order_id) -> PaymentIntent | None:
    return current_domain.repository_for(PaymentIntent).find_by_gateway_order_id(gateway_order_id)


def open_payment_intent(
    owner_id,
    amount,
    currency: str | None = None,
    receipt: str | None = None,
    delivery_option=None,
    is_wholesale_buyer: bool = False,
) -> GatewayOrder:
    """Open a gateway order for the owner's cart and record what it charges.

    ``amount`` is in major units and must equal the cart total for the
    buyer's delivery option. Raises InvalidAmount, InvalidInput or
    BelowMinimumOrder before the gateway is contacted.
    """
    amount_minor = to_minor_units(amount)
    cart_quote = quote_cart(owner_id, delivery_option, is_wholesale_buyer)
    enforce_minimum_order(cart_quote.subtotal, buyer_context(is_wholesale_buyer, delivery_option))

    if cart_quote.subtotal <= 0:
        raise InvalidInput("cart", "Cart is empty")
    if amount_minor != cart_quote.total * MINOR_UNITS_PER_MAJOR:
        raise InvalidAmount(f"Amount {amount} does not match the cart total {cart_quote.total}")

    gateway_order = create_intent(amount, currency=currency, receipt=receipt)
    record_intent(owner_id, gateway_order)
    return gateway_order


# ---------------------------------------------------------------------------
# Settlement
# ---------------------------------------------------------------------------
def settle_verified_payment(
    owner_id,
    gateway_order_id: str,
    gateway_payment_id: str,
    signature: str,
    order_data: dict,
    is_wholesale_buyer: bool = False,
    secret: str | None = None,
) -> Order:
    """Verify a payment confirmation and materialize its order exactly once.

    Re-delivering the same confirmation returns the order created the first
    time, but only to its owner. Raises InvalidSignature before anything is
    written when the signature does not match, and PaymentMismatch when the
    confirmation does not pair with an intent opened by ``owner_id`` or the
    order total differs from the charged amount.
    """
    verify(
        gateway_order_id,
        gateway_payment_id,
        signature,
        secret if secret is not None else get_settings().key_secret,
    )

    intent = find_intent(gateway_order_id)
    if intent is None:
        raise PaymentMismatch(f"No payment intent recorded for {gateway_order_id}")
    if not intent.belongs_to(owner_id):
        logger.warning(
            "Confirmation presented by another owner",
            gateway_order_id=gateway_order_id,
            owner_id=str(owner_id),
        )
        raise PaymentMismatch("Payment intent was opened by another owner")

    repo = current_domain.repository_for(Order)
    with settlement_locks.hold(gateway_order_id):
        existing = repo.find_settled(gateway_order_id, gateway_payment_id)
        if existing is not None:
            logger.info(
                "Duplicate payment confirmation",
                gateway_order_id=gateway_order_id,
                order_id=str(existing.id),
            )
            return _owned_by(existing, owner_id)

        command = MaterializeVerifiedOrder(
            gateway_order_id=gateway_order_id,
            gateway_payment_id=gateway_payment_id,
            charged_amount=intent.amount,
            **_order_fields(owner_id, order_data, is_wholesale_buyer),
        )
        try:
            order_id = current_domain.process(command, asynchronous=False)
        except ValidationError as exc:
            if not _is_duplicate_settlement(exc):
                raise
            existing = repo.find_settled(gateway_order_id, gateway_payment_id)
            if existing is None:
                raise
            logger.info(
                "Concurrent settlement resolved to existing order",
                gateway_order_id=gateway_order_id,
                order_id=str(existing.id),
            )
            return _owned_by(existing, owner_id)

    retire_cart(owner_id)
    return repo.get(order_id)


def place_direct_order(owner_id, order_data: dict, is_wholesale_buyer: bool = False) -> Order:
    """Persist an unpaid order, then retire the owner's cart."""
    command = PlaceDirectOrder(**_order_fields(owner_id, order_data, is_wholesale_buyer))
    order_id = current_domain.process(command, asynchronous=False)

    retire_cart(owner_id)
    return current_domain.repository_for(Order).get(order_id)
