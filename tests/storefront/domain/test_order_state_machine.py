"""Tests for the order status state machine."""

import pytest
from storefront.errors import InvalidTransition
from storefront.order.events import OrderCanceled, OrderStatusChanged
from storefront.order.order import Order, OrderStatus, PaymentStatus, allowed_transitions


def _order():
    order = Order.create(
        user_id="user-1",
        shipping={"full_name": "Amira", "phone": "20123456", "address_line1": "12 Rue", "city": "Tunis"},
        lines_data=[
            {
                "product_id": "prod-1",
                "product_name": "Harissa",
                "unit_price_cents": 500,
                "quantity": 2,
                "line_total_cents": 1000,
            }
        ],
        subtotal_cents=1000,
        discount_cents=0,
        shipping_cents=0,
        total_cents=1000,
        currency="TND",
    )
    order._events.clear()
    return order


def _order_in(*path):
    order = _order()
    for status in path:
        order.transition_to(status)
    order._events.clear()
    return order


class TestAllowedTransitions:
    def test_table(self):
        assert allowed_transitions("PENDING") == {OrderStatus.PAID, OrderStatus.CANCELED}
        assert allowed_transitions("PAID") == {OrderStatus.SHIPPED, OrderStatus.CANCELED}
        assert allowed_transitions("SHIPPED") == {OrderStatus.COMPLETED, OrderStatus.CANCELED}
        assert allowed_transitions("COMPLETED") == set()
        assert allowed_transitions("CANCELED") == set()


class TestForwardTransitions:
    def test_pending_to_paid_marks_payment_paid(self):
        order = _order()
        previous = order.mark_paid()
        assert previous == OrderStatus.PENDING
        assert order.status == "PAID"
        assert order.payment.status == PaymentStatus.PAID.value

    def test_paid_to_shipped_keeps_payment(self):
        order = _order_in("PAID")
        order.ship()
        assert order.status == "SHIPPED"
        assert order.payment.status == PaymentStatus.PAID.value

    def test_shipped_to_completed(self):
        order = _order_in("PAID", "SHIPPED")
        order.complete()
        assert order.status == "COMPLETED"

    def test_transition_raises_status_changed(self):
        order = _order()
        order.mark_paid()
        event = order._events[0]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "PENDING"
        assert event.new_status == "PAID"
        assert event.payment_status == "PAID"

    def test_payment_amount_is_preserved(self):
        order = _order_in("PAID")
        assert order.payment.amount_cents == 1000


class TestCancellation:
    @pytest.mark.parametrize("path", [(), ("PAID",), ("PAID", "SHIPPED")])
    def test_non_terminal_states_can_cancel(self, path):
        order = _order_in(*path)
        order.cancel()
        assert order.status == "CANCELED"
        assert order.payment.status == PaymentStatus.FAILED.value

    def test_cancel_raises_events(self):
        order = _order()
        order.cancel()
        assert [type(e) for e in order._events] == [OrderStatusChanged, OrderCanceled]
        assert order._events[1].previous_status == "PENDING"


class TestRejectedTransitions:
    @pytest.mark.parametrize(
        "path, target",
        [
            ((), "SHIPPED"),
            ((), "COMPLETED"),
            ((), "PENDING"),
            (("PAID",), "PENDING"),
            (("PAID",), "COMPLETED"),
            (("PAID", "SHIPPED", "COMPLETED"), "PENDING"),
            (("PAID", "SHIPPED", "COMPLETED"), "CANCELED"),
            (("CANCELED",), "CANCELED"),
            (("CANCELED",), "PAID"),
        ],
    )
    def test_invalid_transition(self, path, target):
        order = _order_in(*path)
        status_before = order.status
        with pytest.raises(InvalidTransition):
            order.transition_to(target)
        assert order.status == status_before
        assert order._events == []
