"""Configurable fake payment gateway for development and testing.

This adapter simulates the gateway without any external calls. It can be
configured at runtime to succeed or fail, and it records every call so tests
can assert on what was sent.
"""

from uuid import uuid4

from payments.gateway.port import GatewayOrder, PaymentGateway
from shared.errors import PaymentProviderError


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_order(self, amount: int, currency: str, receipt: str) -> GatewayOrder:
        self.calls.append(
            {
                "method": "create_order",
                "amount": amount,
                "currency": currency,
                "receipt": receipt,
            }
        )

        if not self.should_succeed:
            raise PaymentProviderError(self.failure_reason)

        return GatewayOrder(
            gateway_order_id=f"order_fake{uuid4().hex[:14]}",
            amount=amount,
            currency=currency,
            receipt=receipt,
            status="created",
        )
