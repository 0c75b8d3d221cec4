"""Payment settings, read from the environment.

    PAYMENT_GATEWAY          fake | razorpay (default: fake)
    RAZORPAY_KEY_ID          API key id, also sent to the browser checkout
    RAZORPAY_KEY_SECRET      API key secret and payment signature secret
    RAZORPAY_API_URL         default: https://api.razorpay.com
    PAYMENT_GATEWAY_TIMEOUT  seconds (default: 10)
    PAYMENT_CURRENCY         default: INR
"""

import os
from dataclasses import dataclass

DEFAULT_API_URL = "https://api.razorpay.com"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_CURRENCY = "INR"


@dataclass(frozen=True)
class PaymentSettings:
    gateway: str = "fake"
    key_id: str = ""
    key_secret: str = ""
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    currency: str = DEFAULT_CURRENCY

    @classmethod
    def from_env(cls) -> "PaymentSettings":
        return cls(
            gateway=os.environ.get("PAYMENT_GATEWAY", "fake").lower(),
            key_id=os.environ.get("RAZORPAY_KEY_ID", ""),
            key_secret=os.environ.get("RAZORPAY_KEY_SECRET", ""),
            api_url=os.environ.get("RAZORPAY_API_URL", DEFAULT_API_URL).rstrip("/"),
            timeout=float(os.environ.get("PAYMENT_GATEWAY_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)),
            currency=os.environ.get("PAYMENT_CURRENCY", DEFAULT_CURRENCY).upper(),
        )


def get_settings() -> PaymentSettings:
    return PaymentSettings.from_env()
