"""Tests for payment intent creation."""

from decimal import Decimal

import pytest
from payments.intents import create_intent, to_minor_units
from shared.errors import InvalidAmount, PaymentProviderError


class TestMinorUnits:
    @pytest.mark.parametrize(
        "amount, expected",
        [(670, 67000), (1, 100), ("1970", 197000), (670.5, 67050), (Decimal("0.1") + 1, 110), (19.99, 1999)],
    )
    def test_exact_conversion(self, amount, expected):
        assert to_minor_units(amount) == expected

    @pytest.mark.parametrize("amount", [0, -5, 0.99, None, "abc", True, float("nan"), 10.005])
    def test_rejected(self, amount):
        with pytest.raises(InvalidAmount):
            to_minor_units(amount)


class TestCreateIntent:
    def test_opens_gateway_order_in_minor_units(self, gateway):
        result = create_intent(670, currency="inr", receipt="rcpt-1")
        assert result.amount == 67000
        assert result.currency == "INR"
        assert result.gateway_order_id.startswith("order_")
        assert gateway.calls == [{"method": "create_order", "amount": 67000, "currency": "INR", "receipt": "rcpt-1"}]

    def test_default_currency_and_receipt(self, gateway):
        create_intent(100)
        call = gateway.calls[0]
        assert call["currency"] == "INR"
        assert call["receipt"].startswith("order_")
        assert call["receipt"][len("order_"):].isdigit()

    def test_invalid_amount_never_reaches_gateway(self, gateway):
        with pytest.raises(InvalidAmount):
            create_intent(0)
        assert gateway.calls == []

    def test_gateway_failure_surfaces(self, gateway):
        gateway.configure(should_succeed=False, failure_reason="Gateway down")
        with pytest.raises(PaymentProviderError, match="Gateway down"):
            create_intent(100)
