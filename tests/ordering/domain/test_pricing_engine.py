"""Tests for checkout pricing."""

import pytest
from ordering.pricing.engine import (
    BuyerContext,
    DeliveryOption,
    buyer_context,
    enforce_minimum_order,
    quote,
    reconcile,
    resolve_delivery_option,
    tax_on,
)
from shared.errors import BelowMinimumOrder, InvalidInput

RETAIL_NORMAL = BuyerContext()
RETAIL_EXPRESS = BuyerContext(delivery_option=DeliveryOption.EXPRESS)
WHOLESALE = BuyerContext(is_wholesale_buyer=True, delivery_option=DeliveryOption.WHOLESALE)


class TestQuote:
    def test_retail_normal_below_free_shipping(self):
        result = quote([(500, 1)], RETAIL_NORMAL)
        assert result.subtotal == 500
        assert result.shipping_cost == 80
        assert result.tax == 90
        assert result.total == 670

    def test_retail_express(self):
        result = quote([(750, 2)], RETAIL_EXPRESS)
        assert result.subtotal == 1500
        assert result.shipping_cost == 200
        assert result.tax == 270
        assert result.total == 1970

    def test_free_shipping_from_threshold(self):
        assert quote([(1000, 1)], RETAIL_NORMAL).shipping_cost == 0
        assert quote([(999, 1)], RETAIL_NORMAL).shipping_cost == 80

    def test_wholesale_ships_free(self):
        result = quote([(2500, 4)], WHOLESALE)
        assert result.shipping_cost == 0
        assert result.total == 10000 + 1800

    def test_total_is_sum_of_parts(self):
        result = quote([(333, 3), (17, 5)], RETAIL_EXPRESS)
        assert result.total == result.subtotal + result.shipping_cost + result.tax

    def test_empty_cart(self):
        result = quote([], RETAIL_NORMAL)
        assert result.subtotal == 0
        assert result.tax == 0


class TestTax:
    @pytest.mark.parametrize(
        "subtotal, expected",
        [(0, 0), (100, 18), (25, 5), (36, 6), (3, 1), (2, 0)],
    )
    def test_rounds_half_up(self, subtotal, expected):
        assert tax_on(subtotal) == expected


class TestDeliveryOption:
    def test_defaults_to_normal(self):
        assert resolve_delivery_option(None, False) == DeliveryOption.NORMAL

    def test_case_insensitive(self):
        assert resolve_delivery_option("Express", False) == DeliveryOption.EXPRESS

    def test_wholesale_buyer_always_gets_wholesale_terms(self):
        assert resolve_delivery_option("express", True) == DeliveryOption.WHOLESALE

    def test_unknown_option_is_rejected(self):
        with pytest.raises(InvalidInput):
            resolve_delivery_option("overnight", False)

    def test_retail_buyer_cannot_pick_wholesale(self):
        with pytest.raises(InvalidInput):
            resolve_delivery_option("wholesale", False)


class TestMinimumOrder:
    def test_wholesale_below_minimum_is_rejected(self):
        with pytest.raises(BelowMinimumOrder):
            enforce_minimum_order(9999, WHOLESALE)

    def test_wholesale_at_minimum_passes(self):
        enforce_minimum_order(10000, WHOLESALE)

    def test_retail_has_no_minimum(self):
        enforce_minimum_order(1, RETAIL_NORMAL)


class TestReconcile:
    def test_matching_totals_pass(self):
        result = reconcile(
            [(500, 1)],
            buyer_context(False, "normal"),
            {"subtotal": 500, "shipping_cost": 80, "tax": 90, "total": 670},
        )
        assert result.total == 670

    def test_missing_claims_are_filled_in(self):
        result = reconcile([(500, 1)], RETAIL_NORMAL, {})
        assert result.total == 670

    def test_tampered_total_is_rejected(self):
        with pytest.raises(InvalidInput) as exc:
            reconcile([(500, 1)], RETAIL_NORMAL, {"total": 1})
        assert "total" in exc.value.messages

    def test_wrong_shipping_for_option_is_rejected(self):
        with pytest.raises(InvalidInput):
            reconcile([(500, 1)], RETAIL_EXPRESS, {"shipping_cost": 80})

    def test_minimum_order_is_rechecked(self):
        with pytest.raises(BelowMinimumOrder):
            reconcile([(9999, 1)], WHOLESALE, {})
