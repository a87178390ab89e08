"""Application tests for cancellation, status updates and order queries."""

import pytest
from protean import current_domain
from storefront.cart.items import AddToCart
from storefront.catalogue.product import Product
from storefront.checkout.checkout import checkout
from storefront.errors import Forbidden, InvalidStatusTransition, NotCancellable, OrderNotFound
from storefront.order.cancellation import CancelOrder
from storefront.order.order import Order
from storefront.order.queries import order_for, orders_for_customer, recent_orders
from storefront.order.status import UpdateOrderStatus


@pytest.fixture()
def stocked(add_product):
    return {
        "a": add_product(name="Product A", price=10.0, quantity=5),
        "b": add_product(name="Product B", price=5.5, quantity=1),
    }


@pytest.fixture()
def place_order(stocked, shipping_address):
    def _place(customer_id="cust-001", quantities=None):
        for key, quantity in (quantities or {"a": 2, "b": 1}).items():
            current_domain.process(
                AddToCart(customer_id=customer_id, product_id=stocked[key], quantity=quantity),
                asynchronous=False,
            )
        return checkout(customer_id, shipping_address)

    return _place


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).quantity


def _cancel(order_id, actor_id="cust-001", actor_role="user"):
    return current_domain.process(
        CancelOrder(order_id=order_id, actor_id=actor_id, actor_role=actor_role),
        asynchronous=False,
    )


def _set_status(order_id, status, changed_by="admin-001"):
    return current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=status, changed_by=changed_by),
        asynchronous=False,
    )


def _reload(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestCancelOrder:
    def test_owner_cancels_and_stock_returns(self, place_order, stocked):
        order = place_order()
        assert _stock(stocked["a"]) == 3
        assert _stock(stocked["b"]) == 0

        _cancel(order.id)

        cancelled = _reload(order.id)
        assert cancelled.status == "cancelled"
        assert cancelled.cancelled_by == "cust-001"
        assert cancelled.cancelled_at is not None
        assert _stock(stocked["a"]) == 5
        assert _stock(stocked["b"]) == 1

    def test_admin_can_cancel_any_order(self, place_order, stocked):
        order = place_order()
        _cancel(order.id, actor_id="admin-001", actor_role="admin")
        assert _reload(order.id).status == "cancelled"
        assert _stock(stocked["a"]) == 5

    def test_other_customer_is_forbidden(self, place_order, stocked):
        order = place_order()
        with pytest.raises(Forbidden):
            _cancel(order.id, actor_id="cust-002")
        assert _reload(order.id).status == "pending"
        assert _stock(stocked["a"]) == 3

    def test_shipped_order_is_not_cancellable(self, place_order, stocked):
        order = place_order()
        _set_status(order.id, "shipped")

        with pytest.raises(NotCancellable):
            _cancel(order.id)

        assert _reload(order.id).status == "shipped"
        assert _stock(stocked["a"]) == 3
        assert _stock(stocked["b"]) == 0

    def test_cancelling_twice_does_not_restock_twice(self, place_order, stocked):
        order = place_order()
        _cancel(order.id)
        with pytest.raises(NotCancellable):
            _cancel(order.id)
        assert _stock(stocked["a"]) == 5

    def test_unknown_order(self):
        with pytest.raises(OrderNotFound):
            _cancel("missing-order")


class TestUpdateOrderStatus:
    def test_status_moves_forward(self, place_order):
        order = place_order()
        _set_status(order.id, "processing")
        assert _reload(order.id).status == "processing"

    def test_delivered_sets_delivery_date(self, place_order):
        order = place_order()
        _set_status(order.id, "delivered")
        delivered = _reload(order.id)
        assert delivered.status == "delivered"
        assert delivered.delivery_date is not None

    def test_cancelled_status_restores_stock(self, place_order, stocked):
        order = place_order()
        _set_status(order.id, "cancelled")
        cancelled = _reload(order.id)
        assert cancelled.status == "cancelled"
        assert cancelled.cancelled_by == "admin-001"
        assert _stock(stocked["a"]) == 5
        assert _stock(stocked["b"]) == 1

    def test_cancelled_order_cannot_be_reopened(self, place_order, stocked):
        order = place_order()
        _cancel(order.id)
        with pytest.raises(InvalidStatusTransition):
            _set_status(order.id, "processing")
        assert _reload(order.id).status == "cancelled"
        assert _stock(stocked["a"]) == 5


class TestOrderQueries:
    def test_orders_for_customer_newest_first(self, place_order):
        first = place_order(quantities={"a": 1})
        second = place_order(quantities={"a": 1})
        place_order(customer_id="cust-002", quantities={"a": 1})

        orders = orders_for_customer("cust-001")
        assert [o.id for o in orders] == [second.id, first.id]

    def test_order_for_owner(self, place_order):
        order = place_order()
        assert order_for(order.id, "cust-001").order_number == order.order_number

    def test_order_for_admin(self, place_order):
        order = place_order()
        assert order_for(order.id, "admin-001", "admin").id == order.id

    def test_order_for_other_customer(self, place_order):
        order = place_order()
        with pytest.raises(Forbidden):
            order_for(order.id, "cust-002")

    def test_recent_orders_is_limited(self, place_order):
        for _ in range(3):
            place_order(quantities={"a": 1})
        assert len(recent_orders(limit=2)) == 2
        assert len(recent_orders()) == 3
