"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and RazorpayGateway
(production) without changing any checkout code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class GatewayOrder:
    """A payment order opened with the gateway.

    ``amount`` is in minor currency units, as echoed back by the gateway.
    """

    gateway_order_id: str
    amount: int
    currency: str
    receipt: str | None = None
    status: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_order(self, amount: int, currency: str, receipt: str) -> GatewayOrder:
        """Open a payment order for ``amount`` minor units.

        Raises PaymentProviderError when the gateway fails or times out.
        """
        ...
