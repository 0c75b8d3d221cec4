"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing (PAYMENT_GATEWAY=fake, the default)
- RazorpayGateway for production (PAYMENT_GATEWAY=razorpay)
"""

from payments.config import get_settings
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import GatewayOrder, PaymentGateway
from payments.gateway.razorpay_adapter import RazorpayGateway

__all__ = [
    "FakeGateway",
    "GatewayOrder",
    "PaymentGateway",
    "RazorpayGateway",
    "get_gateway",
    "reset_gateway",
    "set_gateway",
]

_current_gateway: PaymentGateway | None = None


def _gateway_from_settings() -> PaymentGateway:
    settings = get_settings()
    if settings.gateway == "razorpay":
        return RazorpayGateway(
            key_id=settings.key_id,
            key_secret=settings.key_secret,
            api_url=settings.api_url,
            timeout=settings.timeout,
        )
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, built from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _gateway_from_settings()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
