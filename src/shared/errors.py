"""Checkout error taxonomy shared by the ordering and payments contexts.

Input and policy failures specialise Protean's ValidationError so the FastAPI
handlers registered by ``register_exception_handlers`` answer them with 400
and the field-level messages intact. Missing records use Protean's
ObjectNotFoundError (404) directly.

Two failures are not client mistakes and stand apart: an invalid payment
signature (the caller gets a deliberately vague answer) and a payment
provider failure (the gateway, not the request, is at fault).
"""

from protean.exceptions import ValidationError


class InvalidInput(ValidationError):
    """A request field is malformed or inconsistent."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__({field: [message]})


class InvalidQuantity(InvalidInput):
    def __init__(self, message: str = "Quantity must be at least 1") -> None:
        super().__init__("quantity", message)


class InvalidPrice(InvalidInput):
    def __init__(self, message: str = "Product price is not valid") -> None:
        super().__init__("price", message)


class InvalidAmount(InvalidInput):
    def __init__(self, message: str = "Invalid amount") -> None:
        super().__init__("amount", message)


class OutOfStock(InvalidInput):
    def __init__(self, product_id: str) -> None:
        super().__init__("product_id", f"Product {product_id} is out of stock")


class BelowMinimumOrder(InvalidInput):
    def __init__(self, minimum: int, subtotal: int) -> None:
        super().__init__(
            "subtotal",
            f"Minimum order amount for wholesale buyers is {minimum}, got {subtotal}",
        )


class InvalidTransition(InvalidInput):
    def __init__(self, current: str, target: str) -> None:
        super().__init__("status", f"Cannot transition from {current} to {target}")


class InvalidSignature(Exception):
    """The payment confirmation signature did not match."""


class PaymentProviderError(Exception):
    """The payment gateway rejected the request, failed or timed out."""


class PaymentMismatch(InvalidSignature):
    """The confirmation does not pair with the intent opened for its gateway order.

    Covers an unknown gateway order, an intent or order belonging to another
    owner, and an order total that differs from the amount charged.
    """
