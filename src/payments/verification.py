"""Payment confirmation signatures.

The gateway signs ``"<gateway_order_id>|<gateway_payment_id>"`` with
HMAC-SHA256 keyed by the account's key secret and sends the hex digest back
with the confirmation.
"""

import hashlib
import hmac

import structlog

from shared.errors import InvalidSignature

logger = structlog.get_logger(__name__)


def sign(gateway_order_id: str, gateway_payment_id: str, secret: str) -> str:
    message = f"{gateway_order_id}|{gateway_payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def verify(gateway_order_id, gateway_payment_id, signature, secret) -> None:
    """Raise InvalidSignature unless ``signature`` matches the pairing.

    The comparison runs in constant time. Verification has no side effects.
    """
    if not (gateway_order_id and gateway_payment_id and signature and secret):
        logger.warning(
            "Payment confirmation incomplete",
            gateway_order_id=gateway_order_id,
            gateway_payment_id=gateway_payment_id,
        )
        raise InvalidSignature("Missing payment confirmation fields")

    expected = sign(gateway_order_id, gateway_payment_id, secret)
    if not hmac.compare_digest(expected.encode(), str(signature).encode()):
        logger.warning(
            "Payment signature mismatch",
            gateway_order_id=gateway_order_id,
            gateway_payment_id=gateway_payment_id,
        )
        raise InvalidSignature("Signature does not match")
