"""Tests for cart item management."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from protean.exceptions import ObjectNotFoundError, ValidationError
from shared.errors import InvalidPrice, InvalidQuantity


def _make_cart():
    return ShoppingCart.create(owner_id="user-001")


class TestCreateCart:
    def test_new_cart_is_empty(self):
        cart = _make_cart()
        assert len(cart.items) == 0
        assert cart.total_amount == 0
        assert cart.owner_id == "user-001"


class TestAddItem:
    def test_add_item(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2, 500)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2
        assert cart.items[0].unit_price == 500
        assert cart.total_amount == 1000

    def test_add_item_raises_event(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, 500)
        added_events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(added_events) == 1
        event = added_events[0]
        assert event.product_id == "prod-001"
        assert event.quantity == 1
        assert event.merged is False

    def test_same_product_and_tier_merges(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, 500)
        cart.add_item("prod-001", 2, 500)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3
        assert cart.total_amount == 1500

    def test_merge_keeps_original_price_snapshot(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, 500)
        cart.add_item("prod-001", 1, 650)
        assert len(cart.items) == 1
        assert cart.items[0].unit_price == 500
        assert cart.total_amount == 1000

    def test_retail_and_wholesale_lines_are_kept_apart(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, 100, is_wholesale=False)
        cart.add_item("prod-001", 2, 90, is_wholesale=True)
        assert len(cart.items) == 2
        assert cart.total_amount == 280

    def test_zero_quantity_is_rejected(self):
        cart = _make_cart()
        with pytest.raises(InvalidQuantity):
            cart.add_item("prod-001", 0, 500)

    def test_non_positive_price_is_rejected(self):
        cart = _make_cart()
        with pytest.raises(InvalidPrice):
            cart.add_item("prod-001", 1, 0)

    def test_errors_are_validation_errors(self):
        cart = _make_cart()
        with pytest.raises(ValidationError) as exc:
            cart.add_item("prod-001", -1, 500)
        assert "quantity" in exc.value.messages


class TestUpdateQuantity:
    def test_update_quantity(self):
        cart = _make_cart()
        item = cart.add_item("prod-001", 1, 250)
        cart.update_item_quantity(item.id, 4)
        assert cart.items[0].quantity == 4
        assert cart.total_amount == 1000

    def test_update_quantity_raises_event(self):
        cart = _make_cart()
        item = cart.add_item("prod-001", 1, 250)
        cart.update_item_quantity(item.id, 3)
        events = [e for e in cart._events if isinstance(e, CartQuantityUpdated)]
        assert len(events) == 1
        assert events[0].previous_quantity == 1
        assert events[0].new_quantity == 3

    def test_quantity_below_one_is_rejected(self):
        cart = _make_cart()
        item = cart.add_item("prod-001", 1, 250)
        with pytest.raises(InvalidQuantity):
            cart.update_item_quantity(item.id, 0)
        assert cart.items[0].quantity == 1

    def test_unknown_line_is_not_found(self):
        cart = _make_cart()
        with pytest.raises(ObjectNotFoundError):
            cart.update_item_quantity("missing", 2)


class TestRemoveItem:
    def test_remove_item(self):
        cart = _make_cart()
        first = cart.add_item("prod-001", 1, 100)
        cart.add_item("prod-002", 1, 300)
        assert cart.remove_item(first.id) is True
        assert len(cart.items) == 1
        assert cart.total_amount == 300

    def test_remove_raises_event(self):
        cart = _make_cart()
        item = cart.add_item("prod-001", 1, 100)
        cart.remove_item(item.id)
        assert any(isinstance(e, CartItemRemoved) for e in cart._events)

    def test_removing_absent_line_is_a_no_op(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, 100)
        assert cart.remove_item("missing") is False
        assert len(cart.items) == 1


class TestClear:
    def test_clear_removes_every_line(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, 100)
        cart.add_item("prod-002", 2, 50)
        assert cart.clear() == 2
        assert len(cart.items) == 0
        assert cart.total_amount == 0
        assert any(isinstance(e, CartCleared) for e in cart._events)

    def test_clearing_empty_cart_is_a_no_op(self):
        cart = _make_cart()
        assert cart.clear() == 0
        assert not any(isinstance(e, CartCleared) for e in cart._events)


class TestTotalInvariant:
    def test_total_tracks_every_mutation(self):
        cart = _make_cart()
        a = cart.add_item("prod-001", 2, 120)
        b = cart.add_item("prod-002", 1, 75)
        cart.update_item_quantity(a.id, 5)
        cart.remove_item(b.id)
        cart.add_item("prod-003", 3, 10, is_wholesale=True)
        assert cart.total_amount == sum(i.unit_price * i.quantity for i in cart.items)
        assert cart.total_amount == 630

    def test_empty_cart_cannot_carry_a_total(self):
        cart = _make_cart()
        with pytest.raises(ValidationError) as exc:
            cart.total_amount = 500
        assert "total_amount" in exc.value.messages

    def test_total_drifting_from_lines_is_rejected(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, 500)
        with pytest.raises(ValidationError):
            cart.total_amount = 499
