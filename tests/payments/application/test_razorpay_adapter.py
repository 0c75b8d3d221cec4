"""Tests for the Razorpay adapter against a mocked HTTP transport."""

import base64
import json

import httpx
import pytest
from payments.gateway.razorpay_adapter import RazorpayGateway
from shared.errors import PaymentProviderError


def _gateway(handler):
    return RazorpayGateway(
        key_id="rzp_test_key",
        key_secret="rzp_test_secret",
        api_url="https://api.razorpay.test",
        transport=httpx.MockTransport(handler),
    )


def test_creates_order_with_basic_auth_and_auto_capture():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"id": "order_Rz1", "amount": 67000, "currency": "INR", "receipt": "rcpt-1", "status": "created"},
        )

    result = _gateway(handler).create_order(amount=67000, currency="INR", receipt="rcpt-1")

    assert result.gateway_order_id == "order_Rz1"
    assert result.amount == 67000
    assert seen["url"] == "https://api.razorpay.test/v1/orders"
    assert seen["auth"] == "Basic " + base64.b64encode(b"rzp_test_key:rzp_test_secret").decode()
    assert seen["body"] == {"amount": 67000, "currency": "INR", "receipt": "rcpt-1", "payment_capture": 1}


def test_rejection_carries_gateway_description():
    def handler(request):
        return httpx.Response(400, json={"error": {"description": "The amount must be atleast INR 1.00"}})

    with pytest.raises(PaymentProviderError, match="atleast INR 1.00"):
        _gateway(handler).create_order(amount=50, currency="INR", receipt="r")


def test_server_error_without_json_body():
    def handler(request):
        return httpx.Response(503, text="upstream unavailable")

    with pytest.raises(PaymentProviderError):
        _gateway(handler).create_order(amount=100, currency="INR", receipt="r")


def test_timeout_is_a_provider_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(PaymentProviderError, match="timed out"):
        _gateway(handler).create_order(amount=100, currency="INR", receipt="r")


def test_connection_error_is_a_provider_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(PaymentProviderError):
        _gateway(handler).create_order(amount=100, currency="INR", receipt="r")
