"""Tests for the ShoppingCart aggregate."""

import pytest
from protean.exceptions import ValidationError
from storefront.cart.cart import ShoppingCart
from storefront.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from storefront.errors import NotFound


def _cart():
    cart = ShoppingCart.create(user_id="user-1")
    cart._events.clear()
    return cart


class TestAddItem:
    def test_add_new_product_creates_a_line(self):
        cart = _cart()
        item = cart.add_item("prod-1", 2)
        assert len(cart.items) == 1
        assert item.quantity == 2
        assert str(item.product_id) == "prod-1"

    def test_adding_same_product_merges_into_one_line(self):
        cart = _cart()
        first = cart.add_item("prod-1", 2)
        second = cart.add_item("prod-1", 3)
        assert len(cart.items) == 1
        assert first.id == second.id
        assert cart.items[0].quantity == 5

    def test_quantity_after_adding(self):
        cart = _cart()
        cart.add_item("prod-1", 2)
        assert cart.quantity_after_adding("prod-1", 4) == 6
        assert cart.quantity_after_adding("prod-2", 4) == 4

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            _cart().add_item("prod-1", 0)

    def test_add_raises_event(self):
        cart = _cart()
        cart.add_item("prod-1", 1)
        assert isinstance(cart._events[0], CartItemAdded)


class TestChangeItems:
    def test_update_quantity(self):
        cart = _cart()
        item = cart.add_item("prod-1", 2)
        cart._events.clear()

        cart.update_item_quantity(item.id, 7)
        assert cart.items[0].quantity == 7
        event = cart._events[0]
        assert isinstance(event, CartQuantityUpdated)
        assert event.previous_quantity == 2
        assert event.new_quantity == 7

    def test_update_unknown_item_is_not_found(self):
        with pytest.raises(NotFound):
            _cart().update_item_quantity("missing", 1)

    def test_remove_item(self):
        cart = _cart()
        item = cart.add_item("prod-1", 2)
        cart._events.clear()

        cart.remove_item(item.id)
        assert len(cart.items) == 0
        assert isinstance(cart._events[0], CartItemRemoved)

    def test_remove_unknown_item_is_not_found(self):
        with pytest.raises(NotFound):
            _cart().remove_item("missing")


class TestClear:
    def test_clear_returns_count(self):
        cart = _cart()
        cart.add_item("prod-1", 1)
        cart.add_item("prod-2", 1)
        cart._events.clear()

        assert cart.clear() == 2
        assert len(cart.items) == 0
        assert isinstance(cart._events[0], CartCleared)
        assert cart._events[0].items_removed == 2

    def test_clear_empty_cart(self):
        assert _cart().clear() == 0
