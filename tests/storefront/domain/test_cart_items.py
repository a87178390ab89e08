"""Tests for cart item management on the ShoppingCart aggregate."""

import pytest
from protean.exceptions import ValidationError
from storefront.cart.cart import ShoppingCart
from storefront.cart.events import CartCleared, CartItemAdded, CartItemQuantityChanged, CartItemRemoved
from storefront.errors import CartItemNotFound, InsufficientStock


def _make_cart():
    return ShoppingCart.create(customer_id="cust-001")


class TestAddItem:
    def test_add_item(self):
        cart = _make_cart()
        total = cart.add_item("prod-001", 2, available=5)
        assert total == 2
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_add_same_product_merges_lines(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available=5)
        total = cart.add_item("prod-001", 2, available=5)
        assert total == 3
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3

    def test_add_different_products(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available=5)
        cart.add_item("prod-002", 1, available=5)
        assert len(cart.items) == 2
        assert cart.item_count == 2

    def test_add_raises_event(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2, available=5)
        added = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(added) == 1
        assert added[0].total_in_cart == 2

    def test_cannot_exceed_stock_including_cart_quantity(self):
        cart = _make_cart()
        cart.add_item("prod-001", 3, available=4)
        with pytest.raises(InsufficientStock) as exc:
            cart.add_item("prod-001", 2, available=4)
        assert exc.value.message == "Cannot add 2 items. Only 1 more available"
        assert cart.quantity_of("prod-001") == 3

    def test_quantity_must_be_positive(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.add_item("prod-001", 0, available=5)


class TestSetItemQuantity:
    def test_set_quantity(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available=5)
        cart._events.clear()
        cart.set_item_quantity("prod-001", 4, available=5)
        assert cart.quantity_of("prod-001") == 4
        event = cart._events[0]
        assert isinstance(event, CartItemQuantityChanged)
        assert event.previous_quantity == 1
        assert event.new_quantity == 4

    def test_set_quantity_for_missing_line(self):
        cart = _make_cart()
        with pytest.raises(CartItemNotFound):
            cart.set_item_quantity("prod-404", 1, available=5)

    def test_set_quantity_above_stock(self):
        cart = _make_cart()
        cart.add_item("prod-001", 1, available=3)
        with pytest.raises(InsufficientStock) as exc:
            cart.set_item_quantity("prod-001", 4, available=3)
        assert exc.value.message == "Only 3 items available in stock"
        assert cart.quantity_of("prod-001") == 1


class TestRemoveAndClear:
    def test_remove_item(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2, available=5)
        removed = cart.remove_item("prod-001")
        assert removed == 2
        assert cart.is_empty
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_remove_missing_item(self):
        cart = _make_cart()
        with pytest.raises(CartItemNotFound):
            cart.remove_item("prod-001")

    def test_clear(self):
        cart = _make_cart()
        cart.add_item("prod-001", 2, available=5)
        cart.add_item("prod-002", 1, available=5)
        assert cart.clear() == 3
        assert cart.is_empty
        assert isinstance(cart._events[-1], CartCleared)

    def test_clear_empty_cart_is_a_no_op(self):
        cart = _make_cart()
        assert cart.clear() == 0
        assert cart._events == []
