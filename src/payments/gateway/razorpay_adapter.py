"""Razorpay Orders API adapter.

Opens orders with ``POST /v1/orders`` using HTTP basic auth (key id and key
secret). Payments are auto-captured. Every failure, timeouts included,
surfaces as PaymentProviderError and is not retried.
"""

import httpx
import structlog

from payments.gateway.port import GatewayOrder, PaymentGateway
from shared.errors import PaymentProviderError

logger = structlog.get_logger(__name__)


class RazorpayGateway(PaymentGateway):
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_url: str = "https://api.razorpay.com",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.key_id = key_id
        self._client = httpx.Client(
            base_url=api_url,
            auth=(key_id, key_secret),
            timeout=timeout,
            transport=transport,
        )

    def create_order(self, amount: int, currency: str, receipt: str) -> GatewayOrder:
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1,
        }
        try:
            response = self._client.post("/v1/orders", json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("Razorpay order request timed out", receipt=receipt)
            raise PaymentProviderError("Payment gateway timed out") from exc
        except httpx.HTTPStatusError as exc:
            detail = _error_description(exc.response)
            logger.error(
                "Razorpay rejected order",
                receipt=receipt,
                status_code=exc.response.status_code,
                detail=detail,
            )
            raise PaymentProviderError(detail or "Payment gateway rejected the order") from exc
        except httpx.HTTPError as exc:
            logger.error("Razorpay order request failed", receipt=receipt, error=str(exc))
            raise PaymentProviderError("Payment gateway unavailable") from exc

        body = response.json()
        return GatewayOrder(
            gateway_order_id=body["id"],
            amount=int(body["amount"]),
            currency=body["currency"],
            receipt=body.get("receipt"),
            status=body.get("status"),
        )

    def close(self) -> None:
        self._client.close()


def _error_description(response: httpx.Response) -> str | None:
    try:
        return response.json().get("error", {}).get("description")
    except ValueError:
        return None
